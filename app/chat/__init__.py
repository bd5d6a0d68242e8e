"""
Chat app for real-time customer support.

This app handles:
- One active support conversation per customer
- Message persistence, history and per-side unread counters
- WebSocket real-time delivery (rooms, typing, unread pushes)
- Email notifications for new messages

Related apps:
    - authentication: User model, roles and token verification
    - toolkit: EmailService used by notifications

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for the gateway, rooms.py for room bookkeeping,
    routing.py for WebSocket URL patterns.

Usage:
    from chat.services import ConversationService, MessageService

    result = ConversationService.get_or_create_for_user(user)
    conversation, was_created = result.data

    result = MessageService.send_message(conversation.id, user, "Hello!")
"""
