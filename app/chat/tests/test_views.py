"""
Tests for chat API views.

This module tests the request/response surface:
- UserConversationViewSet: current, messages, read
- AdminConversationViewSet: list, open, assign, messages, read, deactivate

Testing Philosophy:
    Tests focus on observable HTTP behavior:
    - Response status codes and error envelopes
    - Response body structure
    - Authentication/permission enforcement
"""

from rest_framework import status

from chat.models import Conversation
from chat.services import MessageService
from chat.tests.factories import MessageFactory


# =============================================================================
# URL Constants
# =============================================================================


USER_CONVERSATIONS_URL = "/api/v1/chat/user/conversations/"
ADMIN_CONVERSATIONS_URL = "/api/v1/chat/admin/conversations/"
CURRENT_URL = f"{USER_CONVERSATIONS_URL}current/"
OPEN_URL = f"{ADMIN_CONVERSATIONS_URL}open/"


def user_messages_url(conversation_id):
    return f"{USER_CONVERSATIONS_URL}{conversation_id}/messages/"


def user_read_url(conversation_id):
    return f"{USER_CONVERSATIONS_URL}{conversation_id}/read/"


def admin_action_url(conversation_id, action):
    """Generate URL for an admin detail action (assign, messages, read, deactivate)."""
    return f"{ADMIN_CONVERSATIONS_URL}{conversation_id}/{action}/"


# =============================================================================
# Customer endpoints
# =============================================================================


class TestCurrentConversation:
    """Tests for GET /user/conversations/current/."""

    def test_first_call_creates_with_welcome(self, customer_client, customer, support_admin):
        """
        First contact creates the conversation with one unread welcome.

        Why it matters: The chat widget shows support's greeting immediately.
        """
        response = customer_client.get(CURRENT_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["was_created"] is True
        conversation = response.data["conversation"]
        assert conversation["user"]["id"] == customer.id
        assert conversation["admin"] is None
        assert conversation["unread_count"] == {"user": 1, "admin": 0}

    def test_second_call_returns_same_conversation(self, customer_client):
        first = customer_client.get(CURRENT_URL).data["conversation"]["id"]

        response = customer_client.get(CURRENT_URL)

        assert response.data["was_created"] is False
        assert response.data["conversation"]["id"] == first

    def test_admin_gets_forbidden(self, admin_client):
        response = admin_client.get(CURRENT_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_AUTHORIZED"

    def test_requires_authentication(self, api_client, db):
        response = api_client.get(CURRENT_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUserMessages:
    """Tests for GET /user/conversations/{id}/messages/."""

    def test_owner_lists_messages_in_order(self, customer_client, conversation, customer, support_admin):
        MessageService.send_message(conversation.id, customer, "first")
        MessageService.send_message(conversation.id, support_admin, "second")

        response = customer_client.get(user_messages_url(conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert [m["body"] for m in response.data] == ["first", "second"]
        assert response.data[1]["sender"]["role"] == "admin"
        assert response.data[0]["conversation_id"] == str(conversation.id)

    def test_non_participant_forbidden(self, other_customer_client, conversation):
        """
        Strangers cannot read someone else's support thread.

        Why it matters: Conversation ids leak through room names; reads
        must still be authorized.
        """
        response = other_customer_client.get(user_messages_url(conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data == {
            "error": "You are not a participant in this conversation",
            "error_code": "NOT_AUTHORIZED",
        }

    def test_unknown_conversation_not_found(self, customer_client):
        response = customer_client.get(user_messages_url("00000000-0000-0000-0000-000000000000"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "NOT_FOUND"

    def test_closed_conversation_not_found(self, customer_client, closed_conversation):
        response = customer_client.get(user_messages_url(closed_conversation.id))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUserMarkRead:
    """Tests for POST /user/conversations/{id}/read/."""

    def test_marks_admin_messages_read(self, customer_client, conversation, support_admin):
        MessageService.send_message(conversation.id, support_admin, "hello")
        MessageService.send_message(conversation.id, support_admin, "anyone there?")

        response = customer_client.post(user_read_url(conversation.id))

        conversation.refresh_from_db()
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"unread_count": 0}
        assert conversation.user_unread_count == 0

    def test_non_participant_forbidden(self, other_customer_client, conversation):
        response = other_customer_client.post(user_read_url(conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Admin endpoints
# =============================================================================


class TestAdminList:
    """Tests for GET /admin/conversations/."""

    def test_lists_active_by_recent_activity(
        self, admin_client, conversation, other_customer, closed_conversation
    ):
        from chat.tests.factories import ConversationFactory

        newer = ConversationFactory(user=other_customer)
        MessageService.send_message(conversation.id, conversation.user, "older")
        MessageService.send_message(newer.id, other_customer, "newer")

        response = admin_client.get(ADMIN_CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert [c["id"] for c in response.data] == [str(newer.id), str(conversation.id)]
        assert response.data[0]["unread_count"] == {"user": 0, "admin": 1}
        assert response.data[0]["last_message"] == "newer"

    def test_customer_forbidden(self, customer_client):
        """
        Only support admins see the conversation pool.

        Why it matters: The list exposes every customer's last message.
        """
        response = customer_client.get(ADMIN_CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestAdminOpen:
    """Tests for POST /admin/conversations/open/."""

    def test_creates_and_assigns(self, admin_client, customer, support_admin):
        response = admin_client.post(OPEN_URL, {"user_id": customer.id}, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["was_created"] is True
        assert response.data["conversation"]["admin"]["id"] == support_admin.id

    def test_existing_returns_200(self, admin_client, conversation, customer):
        response = admin_client.post(OPEN_URL, {"user_id": customer.id}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["conversation"]["id"] == str(conversation.id)

    def test_unknown_user_not_found(self, admin_client):
        response = admin_client.post(OPEN_URL, {"user_id": 987654}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_payload(self, admin_client):
        response = admin_client.post(OPEN_URL, {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "user_id" in response.data


class TestAdminAssign:
    """Tests for POST /admin/conversations/{id}/assign/."""

    def test_assign_is_idempotent(self, admin_client, conversation, support_admin):
        url = admin_action_url(conversation.id, "assign")

        first = admin_client.post(url)
        second = admin_client.post(url)

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_200_OK
        assert second.data["admin"]["id"] == support_admin.id

    def test_unknown_conversation_not_found(self, admin_client):
        response = admin_client.post(
            admin_action_url("00000000-0000-0000-0000-000000000000", "assign")
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAdminMessagesAndRead:
    """Tests for admin messages and read actions."""

    def test_any_admin_reads_any_conversation(
        self, authenticated_client_factory, assigned_conversation, second_admin
    ):
        MessageFactory(conversation=assigned_conversation)
        client = authenticated_client_factory(second_admin)

        response = client.get(admin_action_url(assigned_conversation.id, "messages"))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1

    def test_admin_read_recounts_admin_side(self, admin_client, conversation, customer):
        MessageService.send_message(conversation.id, customer, "one")
        MessageService.send_message(conversation.id, customer, "two")

        response = admin_client.post(admin_action_url(conversation.id, "read"))

        conversation.refresh_from_db()
        assert response.data == {"unread_count": 0}
        assert conversation.admin_unread_count == 0


class TestAdminDeactivate:
    """Tests for POST /admin/conversations/{id}/deactivate/."""

    def test_deactivate_hides_conversation(self, admin_client, conversation):
        response = admin_client.post(admin_action_url(conversation.id, "deactivate"))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert Conversation.objects.active().filter(pk=conversation.pk).exists() is False

    def test_customer_cannot_deactivate(self, customer_client, conversation):
        response = customer_client.post(admin_action_url(conversation.id, "deactivate"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        conversation.refresh_from_db()
        assert conversation.is_active is True
