"""
Chat Store models.

This module defines the persisted state of the support chat:
- Conversation: one active conversation per customer, with per-side unread counters
- Message: an immutable chat line; only its read state ever changes

Related files:
    - services.py: ConversationService, MessageService (the only writers)
    - consumers.py: Realtime gateway
    - rooms.py: Room naming and membership bookkeeping

Invariants:
    - At most one active conversation per user (partial unique constraint)
    - Unread counters never go negative (check constraints)
    - Messages are ordered by (sent_at, id); sent_at is assigned by the
      server at insert time and id breaks ties
    - is_read only moves from False to True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.managers import ActiveQuerySet
from core.model_mixins import DeactivatableMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class ChatRole(models.TextChoices):
    """The two sides of a support conversation, each with its own counter."""

    USER = "user", "User"
    ADMIN = "admin", "Admin"


class MessageType(models.TextChoices):
    """Message content type. Only text is supported today."""

    TEXT = "text", "Text"


# =============================================================================
# QuerySets
# =============================================================================


class ConversationQuerySet(ActiveQuerySet):
    """QuerySet helpers for conversations."""

    def for_user(self, user: User) -> ConversationQuerySet:
        """Conversations owned by a customer."""
        return self.filter(user=user)

    def by_recent_activity(self) -> ConversationQuerySet:
        """Most recently active first; conversations without messages last."""
        return self.order_by(
            models.F("last_message_at").desc(nulls_last=True), "-created_at"
        )


class MessageQuerySet(models.QuerySet):
    """QuerySet helpers for messages."""

    def in_order(self) -> MessageQuerySet:
        """Authoritative delivery order."""
        return self.order_by("sent_at", "id")

    def unread(self) -> MessageQuerySet:
        return self.filter(is_read=False)

    def not_sent_by(self, user: User) -> MessageQuerySet:
        return self.exclude(sender=user)

    def mark_read(self) -> int:
        """
        Mark every unread message in the queryset as read.

        Already-read rows keep their original read_at.

        Returns:
            Number of messages that transitioned to read
        """
        return self.filter(is_read=False).update(is_read=True, read_at=timezone.now())


# =============================================================================
# Conversation
# =============================================================================


class Conversation(UUIDPrimaryKeyMixin, DeactivatableMixin, BaseModel):
    """
    A support conversation between one customer and the admin pool.

    Fields:
        id: Opaque UUID, also used in websocket room names
        user: The customer (immutable after creation)
        admin: Assigned support admin, unset until first assignment
        is_active: False once soft-closed; inactive conversations are
                   invisible to lookups but keep their messages
        last_message: Denormalized summary of the newest message
        last_message_at: sent_at of the newest message
        user_unread_count: Messages from the admin side the customer has not read
        admin_unread_count: Messages from the customer the admin side has not read

    Counter rules:
        - A new message increments the recipient side by exactly one
          using an F() expression, never a read-modify-write in Python
        - Marking read replaces the reader's counter with a full recount
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="support_conversations",
        help_text="Customer who owns this conversation",
    )
    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_conversations",
        help_text="Support admin currently assigned (null until assigned)",
    )
    last_message = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Summary of the most recent message, for list views",
    )
    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the most recent message",
    )
    user_unread_count = models.PositiveIntegerField(
        default=0,
        help_text="Admin-side messages not yet read by the customer",
    )
    admin_unread_count = models.PositiveIntegerField(
        default=0,
        help_text="Customer messages not yet read by the admin side",
    )

    objects = ConversationQuerySet.as_manager()

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-last_message_at", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_active=True),
                name="unique_active_conversation_per_user",
            ),
            models.CheckConstraint(
                condition=Q(user_unread_count__gte=0),
                name="chat_conv_user_unread_gte_0",
            ),
            models.CheckConstraint(
                condition=Q(admin_unread_count__gte=0),
                name="chat_conv_admin_unread_gte_0",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "is_active"], name="chat_conv_user_active_idx"),
            models.Index(fields=["admin", "is_active"], name="chat_conv_admin_active_idx"),
            models.Index(
                fields=["-last_message_at"],
                name="chat_conv_last_msg_idx",
                condition=Q(is_active=True),
            ),
        ]

    def __str__(self) -> str:
        return f"Conversation({self.pk}, user={self.user_id})"

    @property
    def unread_count(self) -> dict[str, int]:
        """Both counters keyed by side."""
        return {
            ChatRole.USER.value: self.user_unread_count,
            ChatRole.ADMIN.value: self.admin_unread_count,
        }

    @staticmethod
    def counter_field(side: str) -> str:
        """Name of the unread counter column for a side."""
        if side == ChatRole.USER:
            return "user_unread_count"
        return "admin_unread_count"

    def side_of(self, user: User) -> str:
        """
        The side an identity speaks for in this conversation.

        The owning customer is the user side; everyone else who may write
        here is support staff.
        """
        if user.pk == self.user_id:
            return ChatRole.USER
        return ChatRole.ADMIN

    def recipient_side_of(self, sender: User) -> str:
        """The side whose unread counter a message from ``sender`` increments."""
        if self.side_of(sender) == ChatRole.USER:
            return ChatRole.ADMIN
        return ChatRole.USER

    def is_visible_to(self, user: User) -> bool:
        """
        Read rule for customer-facing entry points.

        The owner or the assigned admin may read; admin-facing entry points
        allow any support admin instead.
        """
        return user.pk == self.user_id or (
            self.admin_id is not None and user.pk == self.admin_id
        )


# =============================================================================
# Message
# =============================================================================


class Message(models.Model):
    """
    A single chat line.

    Fields:
        conversation: Owning conversation (immutable)
        sender: Author (immutable)
        message_type: Content type (text)
        body: Message text
        sent_at: Assigned by the server when the row is inserted
        is_read: Whether the other side has read it
        read_at: When it was marked read

    The auto-increment id doubles as a sequence number: two messages with
    equal sent_at are ordered by id.
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="support_messages",
        help_text="User who sent this message",
    )
    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Content type of the message",
    )
    body = models.TextField(
        help_text="Message text",
    )
    sent_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        help_text="Server-assigned timestamp at persistence time",
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Whether the recipient side has read this message",
    )
    read_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When this message was marked read",
    )

    objects = MessageQuerySet.as_manager()

    class Meta:
        db_table = "chat_message"
        ordering = ["sent_at", "id"]
        indexes = [
            models.Index(
                fields=["conversation", "sent_at", "id"],
                name="chat_msg_conv_order_idx",
            ),
            models.Index(
                fields=["conversation", "sender"],
                name="chat_msg_conv_unread_idx",
                condition=Q(is_read=False),
            ),
        ]

    def __str__(self) -> str:
        return f"Message({self.pk}, conversation={self.conversation_id})"
