"""
Celery tasks for the chat app.

This module defines async tasks for:
- New-message email notifications

Related files:
    - services.py: ChatNotificationService queues these tasks after commit
    - toolkit/services/email.py: EmailService

Usage:
    from chat.tasks import send_new_message_notification

    send_new_message_notification.delay(message_id)
"""

import logging

from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model

from chat.constants import NOTIFICATION_CONFIG
from chat.models import Message
from toolkit.helpers import mask_email
from toolkit.services.email import EmailService

logger = logging.getLogger(__name__)


def admin_recipients(message: Message) -> list[str]:
    """
    Who hears about a customer's message.

    Order of preference: the configured support inbox, the assigned
    admin, every active support admin.
    """
    if settings.CHAT_ADMIN_NOTIFICATION_EMAIL:
        return [settings.CHAT_ADMIN_NOTIFICATION_EMAIL]

    admin = message.conversation.admin
    if admin is not None and admin.is_active:
        return [admin.email]

    User = get_user_model()
    return list(User.objects.active_admins().values_list("email", flat=True))


def _admin_notification(message: Message) -> tuple[str, dict]:
    customer = message.sender
    subject = NOTIFICATION_CONFIG.ADMIN_SUBJECT.format(name=customer.get_full_name())
    context = {
        "user_full_name": customer.get_full_name(),
        "user_email": customer.email,
        "message_text": message.body,
        "conversation_id": str(message.conversation_id),
        "dashboard_url": settings.CHAT_ADMIN_DASHBOARD_URL,
        "sent_at": message.sent_at,
    }
    return subject, context


def _user_notification(message: Message) -> tuple[str, dict]:
    admin = message.sender
    customer = message.conversation.user
    subject = NOTIFICATION_CONFIG.USER_SUBJECT.format(name=admin.get_full_name())
    context = {
        "admin_full_name": admin.get_full_name(),
        "user_full_name": customer.full_name or "there",
        "message_text": message.body,
        "chat_url": settings.CHAT_USER_DASHBOARD_URL,
        "sent_at": message.sent_at,
    }
    return subject, context


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_new_message_notification(self, message_id: int) -> int:
    """
    Email the other side of a conversation about a new message.

    A customer's message goes to support (see admin_recipients); a
    support message goes to the customer. Each recipient is sent to
    independently, so one failed address does not stop the others.

    Args:
        message_id: ID of the persisted message

    Returns:
        Number of emails sent
    """
    try:
        message = Message.objects.select_related(
            "sender", "conversation__user", "conversation__admin"
        ).get(id=message_id)
    except Message.DoesNotExist:
        logger.error(f"Message {message_id} not found for notification")
        return 0

    if message.sender.is_chat_admin:
        recipients = [message.conversation.user.email]
        subject, context = _user_notification(message)
        template_name = NOTIFICATION_CONFIG.USER_TEMPLATE
    else:
        recipients = admin_recipients(message)
        subject, context = _admin_notification(message)
        template_name = NOTIFICATION_CONFIG.ADMIN_TEMPLATE

    if not recipients:
        logger.warning(f"No recipients for message {message_id} notification")
        return 0

    sent = 0
    for address in recipients:
        if EmailService.send(
            to=address,
            subject=subject,
            template_name=template_name,
            context=context,
        ):
            sent += 1
        else:
            logger.warning(f"Notification for message {message_id} to {mask_email(address)} failed")

    logger.info(f"Sent {sent}/{len(recipients)} notifications for message {message_id}")
    return sent
