"""
Constants and configuration for the support chat.

This module centralizes configuration values for:
- Message content limits and the welcome message
- Websocket close codes and event names
- Email notification subjects and templates

Deployment-specific values (notification address, dashboard URLs, room
join authorization) live in Django settings under the CHAT_ prefix.

Import example:
    from chat.constants import MESSAGE_CONFIG, EVENTS
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message content."""

    MAX_BODY_LENGTH: Final[int] = 10000  # Characters
    SUMMARY_LENGTH: Final[int] = 255  # Conversation.last_message

    WELCOME_HEADLINE: Final[str] = "Welcome to Elite Retoucher! 🎉"
    WELCOME_BODY: Final[str] = (
        "Hi {name}! I'm here to help you with all your photo retouching needs. "
        "Whether you have questions about our services, need help with an order, "
        "or want advice on your photos, feel free to ask.\n\n"
        "How can I help you today?"
    )


# =============================================================================
# Websocket Configuration
# =============================================================================


class CLOSE_CODES:
    """Application close codes for the websocket connection."""

    UNAUTHENTICATED: Final[int] = 4001


class EVENTS:
    """Event type names on the websocket."""

    # Inbound (client -> server)
    JOIN_CONVERSATION: Final[str] = "join_conversation"
    LEAVE_CONVERSATION: Final[str] = "leave_conversation"
    SEND_MESSAGE: Final[str] = "send_message"
    TYPING: Final[str] = "typing"
    ACKNOWLEDGE_READ: Final[str] = "acknowledge_read"

    # Outbound (server -> client)
    NEW_MESSAGE: Final[str] = "new_message"
    NEW_CONVERSATION_ACTIVITY: Final[str] = "new_conversation_activity"
    UNREAD_COUNT_CHANGED: Final[str] = "unread_count_changed"
    USER_TYPING: Final[str] = "user_typing"
    ERROR: Final[str] = "error"


# =============================================================================
# Notification Configuration
# =============================================================================


class NOTIFICATION_CONFIG:
    """Configuration for new-message email notifications."""

    ADMIN_SUBJECT: Final[str] = "New support message from {name}"
    USER_SUBJECT: Final[str] = "{name} replied to your support chat"

    ADMIN_TEMPLATE: Final[str] = "chat/email/new_message_admin"
    USER_TEMPLATE: Final[str] = "chat/email/new_message_user"
