"""
Tests for application exceptions.
"""

from core.exceptions import AuthenticationError, BaseApplicationError


class TestAuthenticationError:
    def test_default_code(self):
        exc = AuthenticationError("No token")

        assert exc.error_code == "AUTHENTICATION_FAILED"
        assert str(exc) == "[AUTHENTICATION_FAILED] No token"
        assert isinstance(exc, BaseApplicationError)

    def test_to_dict_includes_details_when_present(self):
        exc = AuthenticationError(
            "Token is invalid or expired",
            error_code="TOKEN_INVALID",
            details={"source": "subprotocol"},
        )

        assert exc.to_dict() == {
            "error": "Token is invalid or expired",
            "error_code": "TOKEN_INVALID",
            "details": {"source": "subprotocol"},
        }

    def test_to_dict_without_details(self):
        assert AuthenticationError("No token").to_dict() == {
            "error": "No token",
            "error_code": "AUTHENTICATION_FAILED",
        }
