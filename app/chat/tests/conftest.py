"""
Test configuration and fixtures for chat tests.

This module provides:
- Customer and support admin fixtures
- Conversation fixtures (fresh, assigned, closed)
- API client helpers for authenticated requests
- Websocket communicator helpers for gateway tests

Usage:
    def test_example(conversation, customer_client):
        response = customer_client.get(
            f"/api/v1/chat/user/conversations/{conversation.id}/messages/"
        )
        assert response.status_code == 200
"""

import pytest
from channels.testing import WebsocketCommunicator
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory
from chat.middleware import JWTAuthMiddleware
from chat.routing import websocket_urlpatterns
from chat.tests.factories import ConversationFactory

# =============================================================================
# Mail Fixtures
# =============================================================================


@pytest.fixture
def mailoutbox(db, mailoutbox):
    """
    pytest-django's outbox, requested after ``db``.

    Django's test-case setup (run by ``db``) rebinds ``mail.outbox``, so the
    outbox must be resolved afterwards to see the emails a test sends.
    """
    from django.core import mail

    return mail.outbox


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def customer(db):
    """A customer who owns support conversations."""
    return UserFactory(full_name="Jane Doe")


@pytest.fixture
def other_customer(db):
    """A second customer, never a participant in ``conversation``."""
    return UserFactory(full_name="Other Person")


@pytest.fixture
def support_admin(db):
    """The first (and oldest) support admin."""
    return AdminFactory(full_name="Sam Support")


@pytest.fixture
def second_admin(db, support_admin):
    """Another support admin, created after ``support_admin``."""
    return AdminFactory(full_name="Alex Helper")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def conversation(db, customer):
    """An active, unassigned conversation with no messages."""
    return ConversationFactory(user=customer)


@pytest.fixture
def assigned_conversation(db, customer, support_admin):
    """An active conversation assigned to ``support_admin``."""
    return ConversationFactory(user=customer, admin=support_admin)


@pytest.fixture
def closed_conversation(db, customer):
    """A deactivated conversation."""
    return ConversationFactory(user=customer, is_active=False, deactivated_at=timezone.now())


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def customer_client(authenticated_client_factory, customer):
    """API client authenticated as the customer."""
    return authenticated_client_factory(customer)


@pytest.fixture
def other_customer_client(authenticated_client_factory, other_customer):
    return authenticated_client_factory(other_customer)


@pytest.fixture
def admin_client(authenticated_client_factory, support_admin):
    """API client authenticated as the support admin."""
    return authenticated_client_factory(support_admin)


# =============================================================================
# Websocket Fixtures
# =============================================================================


@pytest.fixture
def ws_application():
    """The websocket stack as served by config.asgi, minus origin checks."""
    from channels.routing import URLRouter

    return JWTAuthMiddleware(URLRouter(websocket_urlpatterns))


@pytest.fixture
def communicator_for(ws_application):
    """
    Build a WebsocketCommunicator authenticated as a user.

    Usage:
        communicator = communicator_for(customer)
        connected, _ = await communicator.connect()
    """

    def _make(user=None, token=None, subprotocols=None):
        if token is None and user is not None:
            token = str(RefreshToken.for_user(user).access_token)

        path = "/ws/chat/"
        if token is not None and subprotocols is None:
            path = f"{path}?token={token}"

        return WebsocketCommunicator(ws_application, path, subprotocols=subprotocols)

    return _make
