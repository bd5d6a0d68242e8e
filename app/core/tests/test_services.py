"""
Tests for ServiceResult and BaseService.
"""

import logging

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from core.services import BaseService, ServiceResult


class TestServiceResult:
    """Tests for the ServiceResult wrapper."""

    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result.success is True
        assert bool(result) is True
        assert result.data == {"id": 1}
        assert result.to_response() == {"success": True, "data": {"id": 1}}

    def test_failure_response_includes_codes_and_errors(self):
        result = ServiceResult.failure(
            "Required fields missing",
            error_code="VALIDATION_ERROR",
            errors={"body": ["This field is required."]},
        )

        assert bool(result) is False
        assert result.to_response() == {
            "success": False,
            "error": "Required fields missing",
            "error_code": "VALIDATION_ERROR",
            "errors": {"body": ["This field is required."]},
        }

    def test_failure_response_omits_empty_fields(self):
        assert ServiceResult.failure("Nope").to_response() == {
            "success": False,
            "error": "Nope",
        }

    def test_from_exception_defaults_code_to_class_name(self):
        result = ServiceResult.from_exception(DatabaseError("disk full"))

        assert result.error == "disk full"
        assert result.error_code == "DATABASEERROR"

    def test_map_transforms_success_only(self):
        """
        map() applies to data and passes failures through untouched.

        Why it matters: Consumers shape payloads with map() and rely on the
        original error code surviving.
        """
        failure = ServiceResult.failure("Conversation not found", "NOT_FOUND")

        assert ServiceResult.success(2).map(lambda n: n * 10).data == 20
        assert failure.map(lambda n: n * 10) is failure


class ExampleService(BaseService):
    pass


class TestBaseService:
    """Tests for BaseService helpers."""

    def test_logger_named_after_service(self):
        assert ExampleService.get_logger().name == f"{__name__}.ExampleService"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_validate_required_rejects_blank(self, value):
        result = ExampleService.validate_required(body=value, conversation_id="abc")

        assert result.error_code == "VALIDATION_ERROR"
        assert result.errors == {"body": ["This field is required."]}

    def test_validate_required_passes(self):
        assert ExampleService.validate_required(body="hi") is None

    def test_handle_exception_logs_and_wraps(self, caplog):
        with caplog.at_level(logging.ERROR):
            result = ExampleService.handle_exception(
                DatabaseError("locked"), "Persisting message", error_code="PERSISTENCE_FAILED"
            )

        assert result.success is False
        assert result.error_code == "PERSISTENCE_FAILED"
        assert "Persisting message: locked" in caplog.text

    @pytest.mark.django_db
    def test_atomic_rolls_back_on_error(self):
        """
        Given writes inside atomic()
        When the block raises
        Then none of the writes are kept
        """
        User = get_user_model()

        with pytest.raises(RuntimeError):
            with ExampleService.atomic():
                User.objects.create_user(email="rollback@example.com", password="x")
                raise RuntimeError("boom")

        assert not User.objects.filter(email="rollback@example.com").exists()
