"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation management (including bulk soft-close)
- Message inspection
"""

from django.contrib import admin, messages
from django.contrib.auth import get_user_model

from chat.models import Conversation, Message


class MessageInline(admin.TabularInline):
    """Read-only transcript inside the conversation admin."""

    model = Message
    extra = 0
    can_delete = False
    fields = ["sender", "body", "sent_at", "is_read", "read_at"]
    readonly_fields = fields
    ordering = ["sent_at", "id"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """
    Admin interface for Conversation model.

    Only the assigned admin is editable. Conversations are created by
    ConversationService and closed with the bulk action, never deleted.
    """

    list_display = [
        "id",
        "user",
        "admin",
        "is_active",
        "user_unread_count",
        "admin_unread_count",
        "last_message_at",
        "created_at",
    ]
    list_filter = ["is_active", "created_at"]
    search_fields = ["id", "user__email", "admin__email"]
    readonly_fields = [
        "user",
        "is_active",
        "created_at",
        "updated_at",
        "deactivated_at",
        "last_message",
        "last_message_at",
        "user_unread_count",
        "admin_unread_count",
    ]
    raw_id_fields = ["admin"]
    inlines = [MessageInline]
    ordering = ["-created_at"]
    actions = ["deactivate_conversations"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        if db_field.name == "admin":
            kwargs["queryset"] = get_user_model().objects.active_admins()
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    @admin.action(description="Close selected conversations")
    def deactivate_conversations(self, request, queryset):
        count = queryset.deactivate()
        self.message_user(request, f"{count} conversation(s) closed.", messages.SUCCESS)


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """
    Read-only admin interface for Message model.

    Messages are never edited or deleted; is_read only changes through
    ConversationService.mark_read.
    """

    list_display = [
        "id",
        "conversation",
        "sender",
        "message_type",
        "body_preview",
        "is_read",
        "sent_at",
    ]
    list_filter = ["message_type", "is_read", "sent_at"]
    search_fields = ["body", "sender__email"]
    ordering = ["-sent_at"]

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Body Preview")
    def body_preview(self, obj: Message) -> str:
        """Return truncated body for list display."""
        max_length = 50
        if len(obj.body) > max_length:
            return obj.body[:max_length] + "..."
        return obj.body
