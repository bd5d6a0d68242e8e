"""
Tests for UserManager.

The UserManager provides:
- create_user(): Creates customers (or admins when role is passed)
- create_superuser(): Creates privileged chat admins with elevated flags
- active_admins(): The admin pool used for welcome messages and email fan-out

Related files:
    - managers.py: Implementation under test
    - models.py: User model that uses this manager
"""

import pytest

from authentication.models import User, UserRole
from authentication.tests.factories import AdminFactory, UserFactory


class TestUserManagerCreateUser:
    """Tests for UserManager.create_user() method."""

    def test_creates_customer_by_default(self, db):
        """
        Given only an email and password
        When create_user is called
        Then a non-privileged customer is created
        """
        # Act
        user = User.objects.create_user(email="new@example.com", password="SecurePass123!")

        # Assert
        assert user.role == UserRole.USER
        assert user.is_chat_admin is False
        assert user.check_password("SecurePass123!") is True

    def test_normalizes_email_domain_to_lowercase(self, db):
        """
        Given an email with uppercase characters in domain
        When create_user is called
        Then the domain portion is normalized to lowercase
        """
        user = User.objects.create_user(email="Test.User@EXAMPLE.COM", password="TestPass123!")

        assert user.email == "Test.User@example.com"

    def test_raises_valueerror_when_email_is_empty(self, db):
        """
        Given an empty email
        When create_user is called
        Then a ValueError is raised with descriptive message
        """
        with pytest.raises(ValueError) as exc_info:
            User.objects.create_user(email="", password="TestPass123!")

        assert "Email field must be set" in str(exc_info.value)

    def test_creates_user_without_password(self, db):
        """
        Given an email but no password
        When create_user is called
        Then user is created with unusable password
        """
        user = User.objects.create_user(email="nopass@example.com")

        assert user.has_usable_password() is False


class TestUserManagerCreateSuperuser:
    """Tests for UserManager.create_superuser() method."""

    def test_superuser_is_chat_admin(self, db):
        """
        Superusers are support staff.

        Why it matters: The first account created with createsuperuser must
        be able to greet customers and answer conversations.
        """
        admin = User.objects.create_superuser(email="root@example.com", password="AdminPass123!")

        assert admin.is_staff is True
        assert admin.is_superuser is True
        assert admin.role == UserRole.ADMIN
        assert admin.is_chat_admin is True

    def test_rejects_is_staff_false(self, db):
        with pytest.raises(ValueError, match="is_staff=True"):
            User.objects.create_superuser(
                email="root@example.com", password="AdminPass123!", is_staff=False
            )


class TestActiveAdmins:
    """Tests for UserManager.active_admins()."""

    def test_returns_only_active_admins(self, db):
        """
        Customers and deactivated admins are excluded.

        Why it matters: Welcome messages and notifications must never be
        attributed to or sent to a disabled account.
        """
        active = AdminFactory()
        AdminFactory(is_active=False)
        UserFactory()

        assert list(User.objects.active_admins()) == [active]

    def test_ordered_oldest_first(self, db):
        """
        The oldest admin account comes first.

        Why it matters: The welcome message author is the first active admin,
        so it must be stable across calls.
        """
        first = AdminFactory()
        second = AdminFactory()

        assert list(User.objects.active_admins()) == [first, second]

    def test_empty_when_no_admins(self, db):
        UserFactory()

        assert User.objects.active_admins().exists() is False
