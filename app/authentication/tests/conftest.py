"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, access_token):
        identity = IdentityVerifier.verify(access_token)
        assert identity.user_id == user.id
"""

import pytest

from authentication.services import IdentityVerifier
from authentication.tests.factories import AdminFactory, UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create an active customer."""
    return UserFactory(full_name="Jane Doe")


@pytest.fixture
def admin(db):
    """Create an active support admin."""
    return AdminFactory(full_name="Sam Support")


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated customer (is_active=False)."""
    return UserFactory(is_active=False)


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def access_token(user):
    """A valid access token for ``user``."""
    return IdentityVerifier.token_for(user)
