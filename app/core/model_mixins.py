"""
Model mixins providing reusable functionality for Django models.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    DeactivatableMixin: Soft-close support (is_active, deactivated_at)

Usage:
    from core.models import BaseModel
    from core.model_mixins import DeactivatableMixin, UUIDPrimaryKeyMixin

    class Conversation(UUIDPrimaryKeyMixin, DeactivatableMixin, BaseModel):
        objects = ConversationQuerySet.as_manager()

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
    - DeactivatableMixin pairs with core.managers.ActiveQuerySet
"""

from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Identifiers are opaque and non-guessable, which matters for records
    whose id travels to clients (websocket room names, URLs).

    Fields:
        id: UUIDField as primary key (auto-generated)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class DeactivatableMixin(models.Model):
    """
    Soft-close support for models that are never physically deleted.

    A deactivated record is hidden from normal lookups but keeps its
    related rows. Deactivation is one-way in normal operation.

    Fields:
        is_active: Whether the record is visible to normal lookups
        deactivated_at: Timestamp when the record was deactivated

    Usage:
        conversation.deactivate()
        Conversation.objects.active()  # excludes it from now on
    """

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this record is active. Deactivate instead of deleting.",
    )
    deactivated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp when this record was deactivated",
    )

    class Meta:
        abstract = True

    def deactivate(self) -> None:
        """
        Mark this record as inactive.

        No-op when the record is already inactive.
        """
        if not self.is_active:
            return
        self.is_active = False
        self.deactivated_at = timezone.now()
        self.save(update_fields=["is_active", "deactivated_at", "updated_at"])
