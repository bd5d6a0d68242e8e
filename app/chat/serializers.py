"""
Serializers for the chat API and websocket payloads.

Serializer Hierarchy:
    ParticipantSerializer: Public view of a user in a conversation
    MessageSerializer: Message as delivered over REST and websocket
    ConversationSerializer: Conversation with counters for list views
    OpenConversationSerializer: Input for admins opening a user's conversation

Design Decisions:
    - Output is plain JSON types (ids as strings, ISO timestamps) so the
      same data can be pushed through the channel layer unchanged
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from chat.models import Conversation, Message

User = get_user_model()


class ParticipantSerializer(serializers.ModelSerializer):
    """Public identity of a conversation participant."""

    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "full_name", "email", "role"]
        read_only_fields = fields


class MessageSerializer(serializers.ModelSerializer):
    """A persisted message."""

    conversation_id = serializers.UUIDField(read_only=True)
    sender = ParticipantSerializer(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "sender",
            "message_type",
            "body",
            "sent_at",
            "is_read",
            "read_at",
        ]
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    """Conversation with participants and both unread counters."""

    user = ParticipantSerializer(read_only=True)
    admin = ParticipantSerializer(read_only=True, allow_null=True)
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = [
            "id",
            "user",
            "admin",
            "is_active",
            "last_message",
            "last_message_at",
            "unread_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_unread_count(self, obj: Conversation) -> dict[str, int]:
        return obj.unread_count


class OpenConversationSerializer(serializers.Serializer):
    """Input for POST admin/conversations/open/."""

    user_id = serializers.IntegerField(min_value=1)
