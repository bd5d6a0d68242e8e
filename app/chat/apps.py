"""
Chat application configuration.

This app provides the customer support chat:
- One active conversation per customer, serviced by a shared admin pool
- Unread counters per side, kept exact by recount on read
- Realtime delivery over websockets with email as a side channel
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Support chat"
