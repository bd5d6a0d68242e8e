"""
Chat services.

This module contains the business logic of the support chat:
- ConversationService: conversation lifecycle and queries (REST surface)
- MessageService: the persistence step of sending a message (websocket surface)
- ChatNotificationService: fire-and-forget hand-off to the email task

Related files:
    - models.py: Conversation, Message
    - consumers.py: Realtime gateway that calls MessageService
    - tasks.py: Email notification task
    - views.py: REST endpoints that call ConversationService

Error codes:
    NOT_FOUND: Conversation (or user) missing or inactive
    NOT_AUTHORIZED: Caller may not read or act on the conversation
    VALIDATION_ERROR: Blank or oversized message body
    PERSISTENCE_FAILED: Database write for a send did not complete
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from chat.constants import MESSAGE_CONFIG
from chat.models import ChatRole, Conversation, Message
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from uuid import UUID

    from django.db.models import QuerySet

    from authentication.models import User

logger = logging.getLogger(__name__)


def summarize(body: str) -> str:
    """Trim a message body to fit Conversation.last_message."""
    limit = MESSAGE_CONFIG.SUMMARY_LENGTH
    if len(body) <= limit:
        return body
    return body[: limit - 1] + "…"


@dataclass
class SendOutcome:
    """What the gateway needs to fan out a persisted message."""

    message: Message
    conversation: Conversation
    sender_is_admin: bool
    recipient_side: str

    @property
    def unread_count(self) -> dict[str, int]:
        return self.conversation.unread_count


# =============================================================================
# ConversationService
# =============================================================================


class ConversationService(BaseService):
    """
    Lifecycle and query operations over support conversations.

    Every method returns a ServiceResult. Authorization differs between the
    customer-facing entry points (owner or assigned admin) and the
    admin-facing ones (any support admin).

    Usage:
        result = ConversationService.get_or_create_for_user(request.user)
        conversation, was_created = result.data
    """

    @staticmethod
    def get_active(conversation_id: UUID | str) -> Conversation | None:
        """
        Fetch an active conversation by id.

        Malformed ids are treated as missing.
        """
        try:
            return (
                Conversation.objects.active()
                .select_related("user", "admin")
                .filter(pk=conversation_id)
                .first()
            )
        except (DjangoValidationError, ValueError):
            return None

    @classmethod
    def get_or_create_for_user(cls, user: User) -> ServiceResult[tuple[Conversation, bool]]:
        """
        Return the customer's active conversation, creating it on first contact.

        A new conversation opens with a welcome message authored by an
        active support admin, if one exists. Two concurrent first calls
        race on the one-active-conversation constraint; the loser re-reads
        the winner's row.

        Returns:
            ServiceResult with (conversation, was_created)

        Error codes:
            NOT_AUTHORIZED: Support admins do not own support conversations
        """
        if user.is_chat_admin:
            return ServiceResult.failure(
                "Support admins cannot open a support conversation for themselves",
                error_code="NOT_AUTHORIZED",
            )

        existing = cls._find_active_for_user(user)
        if existing is not None:
            return ServiceResult.success((existing, False))

        try:
            with cls.atomic():
                conversation = Conversation.objects.create(user=user)
                cls._post_welcome_message(conversation)
        except IntegrityError:
            existing = cls._find_active_for_user(user)
            if existing is None:
                raise
            cls.get_logger().info(
                f"Concurrent conversation creation for user {user.id}, reusing {existing.id}"
            )
            return ServiceResult.success((existing, False))

        cls.get_logger().info(f"Created conversation {conversation.id} for user {user.id}")
        return ServiceResult.success((conversation, True))

    @staticmethod
    def _find_active_for_user(user: User) -> Conversation | None:
        return Conversation.objects.active().for_user(user).select_related("user", "admin").first()

    @classmethod
    def _post_welcome_message(cls, conversation: Conversation) -> Message | None:
        """Synthesize the welcome message from any active support admin."""
        User = get_user_model()
        greeter = User.objects.active_admins().first()
        if greeter is None:
            cls.get_logger().warning(
                f"No active support admin; conversation {conversation.id} opens empty"
            )
            return None

        customer = conversation.user
        body = "\n\n".join(
            [
                MESSAGE_CONFIG.WELCOME_HEADLINE,
                MESSAGE_CONFIG.WELCOME_BODY.format(name=customer.full_name or "there"),
            ]
        )
        message = Message.objects.create(
            conversation=conversation,
            sender=greeter,
            body=body,
        )

        conversation.last_message = MESSAGE_CONFIG.WELCOME_HEADLINE
        conversation.last_message_at = message.sent_at
        conversation.user_unread_count = 1
        conversation.save(
            update_fields=[
                "last_message",
                "last_message_at",
                "user_unread_count",
                "updated_at",
            ]
        )
        return message

    @classmethod
    def open_for_user(cls, admin: User, user_id: int) -> ServiceResult[tuple[Conversation, bool]]:
        """
        Open (or fetch) a customer's conversation on behalf of support.

        The calling admin is assigned if the conversation has no admin yet.

        Error codes:
            NOT_FOUND: No active customer with that id
        """
        User = get_user_model()
        customer = User.objects.filter(pk=user_id, is_active=True).first()
        if customer is None or customer.is_chat_admin:
            return ServiceResult.failure("User not found", error_code="NOT_FOUND")

        result = cls.get_or_create_for_user(customer)
        if not result.success:
            return result

        conversation, was_created = result.data
        if conversation.admin_id is None:
            conversation.admin = admin
            conversation.save(update_fields=["admin", "updated_at"])

        return ServiceResult.success((conversation, was_created))

    @classmethod
    def list_messages(cls, conversation_id, caller: User) -> ServiceResult[QuerySet[Message]]:
        """
        Messages of a conversation for the customer-facing entry point.

        The caller must be the owner or the assigned admin.

        Error codes:
            NOT_FOUND, NOT_AUTHORIZED
        """
        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        if not conversation.is_visible_to(caller):
            return ServiceResult.failure(
                "You are not a participant in this conversation",
                error_code="NOT_AUTHORIZED",
            )

        return ServiceResult.success(cls._messages_of(conversation))

    @classmethod
    def list_messages_for_admin(cls, conversation_id) -> ServiceResult[QuerySet[Message]]:
        """Messages of any active conversation, for support admins."""
        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        return ServiceResult.success(cls._messages_of(conversation))

    @staticmethod
    def _messages_of(conversation: Conversation) -> QuerySet[Message]:
        return conversation.messages.select_related("sender").in_order()

    @classmethod
    def list_for_admin(cls) -> ServiceResult[QuerySet[Conversation]]:
        """All active conversations, most recently active first."""
        conversations = (
            Conversation.objects.active()
            .select_related("user", "admin")
            .by_recent_activity()
        )
        return ServiceResult.success(conversations)

    @classmethod
    def assign_admin(cls, conversation_id, admin: User) -> ServiceResult[Conversation]:
        """
        Assign (or reassign) a support admin. Idempotent.

        Error codes:
            NOT_FOUND, NOT_AUTHORIZED
        """
        if not admin.is_chat_admin:
            return ServiceResult.failure(
                "Only support admins can be assigned", error_code="NOT_AUTHORIZED"
            )

        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        if conversation.admin_id == admin.pk:
            return ServiceResult.success(conversation)

        previous_admin_id = conversation.admin_id
        conversation.admin = admin
        conversation.save(update_fields=["admin", "updated_at"])

        cls.get_logger().info(
            f"Conversation {conversation.id} assigned to admin {admin.id} "
            f"(was {previous_admin_id})"
        )
        return ServiceResult.success(conversation)

    @classmethod
    def mark_read(cls, conversation_id, caller: User, as_admin: bool = False) -> ServiceResult[int]:
        """
        Mark the other party's messages as read and recount the caller's side.

        The counter is replaced by the exact number of messages from the
        other party that are still unread, not decremented, so drift from
        any missed update is corrected here.

        Args:
            conversation_id: Conversation to mark
            caller: Reader
            as_admin: Admin-facing entry point (any support admin may read)

        Returns:
            ServiceResult with the new unread count for the caller's side

        Error codes:
            NOT_FOUND, NOT_AUTHORIZED
        """
        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        if as_admin:
            if not caller.is_chat_admin:
                return ServiceResult.failure(
                    "Support admin access required", error_code="NOT_AUTHORIZED"
                )
            side = ChatRole.ADMIN
        else:
            if not conversation.is_visible_to(caller):
                return ServiceResult.failure(
                    "You are not a participant in this conversation",
                    error_code="NOT_AUTHORIZED",
                )
            side = conversation.side_of(caller)

        from_other_party = cls._messages_from_other_side(conversation, side)

        with cls.atomic():
            marked = from_other_party.mark_read()
            remaining = from_other_party.unread().count()
            Conversation.objects.filter(pk=conversation.pk).update(
                **{Conversation.counter_field(side): remaining},
                updated_at=timezone.now(),
            )

        cls.get_logger().debug(
            f"User {caller.id} read {marked} messages in {conversation.id} "
            f"({side} unread now {remaining})"
        )
        return ServiceResult.success(remaining)

    @staticmethod
    def _messages_from_other_side(conversation: Conversation, side: str) -> QuerySet[Message]:
        """Messages that count toward ``side``'s unread counter."""
        messages = Message.objects.filter(conversation=conversation)
        if side == ChatRole.USER:
            return messages.exclude(sender_id=conversation.user_id)
        return messages.filter(sender_id=conversation.user_id)

    @classmethod
    def deactivate(cls, conversation_id) -> ServiceResult[Conversation]:
        """
        Soft-close a conversation. Its messages are kept.

        The customer gets a fresh conversation on their next contact.
        """
        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        conversation.deactivate()
        cls.get_logger().info(f"Conversation {conversation.id} deactivated")
        return ServiceResult.success(conversation)

    @classmethod
    def unread_counts(cls, conversation_id) -> ServiceResult[tuple[Conversation, dict[str, int]]]:
        """Current counters of both sides, read fresh from the store."""
        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")
        return ServiceResult.success((conversation, conversation.unread_count))

    @classmethod
    def can_join_room(cls, conversation_id, user: User) -> bool:
        """
        Whether a session may join a conversation's broadcast room.

        Room join is unchecked unless CHAT_AUTHORIZE_ROOM_JOIN is enabled,
        in which case it follows the read rule.
        """
        if not settings.CHAT_AUTHORIZE_ROOM_JOIN:
            return True

        conversation = cls.get_active(conversation_id)
        if conversation is None:
            return False
        return user.is_chat_admin or conversation.is_visible_to(user)


# =============================================================================
# MessageService
# =============================================================================


class MessageService(BaseService):
    """
    The write path for new messages.

    ``send_message`` is the durability point of the realtime gateway: the
    message row, the conversation summary and the recipient counter change
    in one transaction, and nothing is broadcast unless it commits.
    """

    @classmethod
    def send_message(cls, conversation_id, sender: User, body: str | None) -> ServiceResult[SendOutcome]:
        """
        Persist a message and bump the recipient's unread counter.

        The counter is incremented with an F() expression so concurrent
        sends never lose an update. The email notification is queued only
        after the transaction commits.

        Returns:
            ServiceResult with a SendOutcome

        Error codes:
            VALIDATION_ERROR: Blank or oversized body
            NOT_FOUND: Conversation missing or inactive
            NOT_AUTHORIZED: Sender is neither the owner nor a support admin
            PERSISTENCE_FAILED: The database write failed
        """
        if body is not None and not isinstance(body, str):
            return ServiceResult.failure(
                "Message body must be text",
                error_code="VALIDATION_ERROR",
                errors={"body": ["Not a valid string."]},
            )

        validation = cls.validate_required(body=body)
        if validation:
            return validation

        body = body.strip()
        if len(body) > MESSAGE_CONFIG.MAX_BODY_LENGTH:
            return ServiceResult.failure(
                f"Message exceeds {MESSAGE_CONFIG.MAX_BODY_LENGTH} characters",
                error_code="VALIDATION_ERROR",
                errors={"body": ["Message is too long."]},
            )

        conversation = ConversationService.get_active(conversation_id)
        if conversation is None:
            return ServiceResult.failure("Conversation not found", error_code="NOT_FOUND")

        if sender.pk != conversation.user_id and not sender.is_chat_admin:
            return ServiceResult.failure(
                "You are not a participant in this conversation",
                error_code="NOT_AUTHORIZED",
            )

        recipient_side = conversation.recipient_side_of(sender)
        counter = Conversation.counter_field(recipient_side)

        try:
            with cls.atomic():
                message = Message.objects.create(
                    conversation=conversation,
                    sender=sender,
                    body=body,
                )
                Conversation.objects.filter(pk=conversation.pk).update(
                    last_message=summarize(body),
                    last_message_at=message.sent_at,
                    updated_at=timezone.now(),
                    **{counter: F(counter) + 1},
                )
                conversation.refresh_from_db(
                    fields=[
                        "last_message",
                        "last_message_at",
                        "user_unread_count",
                        "admin_unread_count",
                        "updated_at",
                    ]
                )
                transaction.on_commit(partial(ChatNotificationService.dispatch, message.id))
        except DatabaseError as e:
            return cls.handle_exception(
                e,
                f"Persisting message from user {sender.id} in conversation {conversation.pk}",
                error_code="PERSISTENCE_FAILED",
            )

        cls.get_logger().debug(
            f"User {sender.id} sent message {message.id} in {conversation.pk} "
            f"({recipient_side} unread {conversation.unread_count[recipient_side]})"
        )
        return ServiceResult.success(
            SendOutcome(
                message=message,
                conversation=conversation,
                sender_is_admin=sender.is_chat_admin,
                recipient_side=recipient_side,
            )
        )


# =============================================================================
# ChatNotificationService
# =============================================================================


class ChatNotificationService(BaseService):
    """
    Best-effort email side channel for new messages.

    Queueing failures are logged and swallowed: a message that was
    persisted and broadcast is never reported as failed because its email
    could not be queued.
    """

    @classmethod
    def dispatch(cls, message_id: int) -> bool:
        """
        Queue the new-message email task.

        Returns:
            True if the task was queued
        """
        from chat.tasks import send_new_message_notification

        try:
            send_new_message_notification.delay(message_id)
        except Exception:
            cls.get_logger().exception(
                f"Could not queue notification for message {message_id}"
            )
            return False
        return True
