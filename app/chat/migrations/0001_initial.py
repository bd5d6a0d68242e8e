import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Conversation",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Whether this record is active. Deactivate instead of deleting.",
                    ),
                ),
                (
                    "deactivated_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="Timestamp when this record was deactivated",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "last_message",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Summary of the most recent message, for list views",
                        max_length=255,
                    ),
                ),
                (
                    "last_message_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="Timestamp of the most recent message",
                    ),
                ),
                (
                    "user_unread_count",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Admin-side messages not yet read by the customer",
                    ),
                ),
                (
                    "admin_unread_count",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Customer messages not yet read by the admin side",
                    ),
                ),
                (
                    "admin",
                    models.ForeignKey(
                        blank=True,
                        help_text="Support admin currently assigned (null until assigned)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_conversations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Customer who owns this conversation",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="support_conversations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_conversation",
                "ordering": ["-last_message_at", "-created_at"],
                "indexes": [
                    models.Index(
                        fields=["user", "is_active"], name="chat_conv_user_active_idx"
                    ),
                    models.Index(
                        fields=["admin", "is_active"], name="chat_conv_admin_active_idx"
                    ),
                    models.Index(
                        condition=models.Q(("is_active", True)),
                        fields=["-last_message_at"],
                        name="chat_conv_last_msg_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("user",),
                        name="unique_active_conversation_per_user",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("user_unread_count__gte", 0)),
                        name="chat_conv_user_unread_gte_0",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("admin_unread_count__gte", 0)),
                        name="chat_conv_admin_unread_gte_0",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "message_type",
                    models.CharField(
                        choices=[("text", "Text")],
                        default="text",
                        help_text="Content type of the message",
                        max_length=10,
                    ),
                ),
                ("body", models.TextField(help_text="Message text")),
                (
                    "sent_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        editable=False,
                        help_text="Server-assigned timestamp at persistence time",
                    ),
                ),
                (
                    "is_read",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the recipient side has read this message",
                    ),
                ),
                (
                    "read_at",
                    models.DateTimeField(
                        blank=True,
                        null=True,
                        help_text="When this message was marked read",
                    ),
                ),
                (
                    "conversation",
                    models.ForeignKey(
                        help_text="Conversation this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.conversation",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="support_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["sent_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["conversation", "sent_at", "id"],
                        name="chat_msg_conv_order_idx",
                    ),
                    models.Index(
                        condition=models.Q(("is_read", False)),
                        fields=["conversation", "sender"],
                        name="chat_msg_conv_unread_idx",
                    ),
                ],
            },
        ),
    ]
