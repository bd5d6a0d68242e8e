"""
Email service for centralized email sending.

This module provides the EmailService class for sending template-based
emails (HTML and plain text alternatives rendered with Django templates).

Related files:
    - chat/tasks.py: New-message notifications
    - chat/templates/chat/email/: Notification templates

Configuration:
    Email settings are read from Django settings:
    - EMAIL_BACKEND
    - EMAIL_HOST, EMAIL_PORT
    - DEFAULT_FROM_EMAIL

Usage:
    from toolkit.services.email import EmailService

    EmailService.send(
        to="user@example.com",
        subject="New reply",
        template_name="chat/email/new_message_user",
        context={"user_full_name": "Jane"},
    )
"""

from __future__ import annotations

import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string
from django.utils.html import strip_tags

from toolkit.helpers import mask_email

logger = logging.getLogger(__name__)


class EmailService:
    """
    Centralized email sending with template support.

    Delivery problems are reported through the return value, never raised,
    so callers on a best-effort path can log and move on.
    """

    @staticmethod
    def send(
        to: str | list[str],
        subject: str,
        template_name: str,
        context: dict,
        from_email: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """
        Send email using a template.

        Args:
            to: Recipient email address(es)
            subject: Email subject line
            template_name: Name of template (without extension)
                           Looks for: {template_name}.html and {template_name}.txt
            context: Template context variables
            from_email: Sender email (defaults to DEFAULT_FROM_EMAIL)
            reply_to: Reply-to address

        Returns:
            True if email was sent successfully

        Raises:
            TemplateDoesNotExist: If neither template variant exists
        """
        if isinstance(to, str):
            to = [to]

        from_email = from_email or settings.DEFAULT_FROM_EMAIL

        try:
            html_content = render_to_string(f"{template_name}.html", context)
        except TemplateDoesNotExist:
            html_content = None

        try:
            text_content = render_to_string(f"{template_name}.txt", context)
        except TemplateDoesNotExist:
            if html_content is None:
                raise
            text_content = strip_tags(html_content)

        email = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=from_email,
            to=to,
            reply_to=[reply_to] if reply_to else None,
        )
        if html_content:
            email.attach_alternative(html_content, "text/html")

        recipients = ", ".join(mask_email(address) for address in to)
        try:
            email.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {recipients}: {e}")
            return False

        logger.info(f"Email sent to {recipients}: {subject}")
        return True
