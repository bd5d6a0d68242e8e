"""
Custom QuerySet classes for common patterns.

This module provides reusable queryset patterns:
- ActiveQuerySet: Filter records by the DeactivatableMixin flag

Usage:
    from core.managers import ActiveQuerySet

    class ConversationQuerySet(ActiveQuerySet):
        def for_user(self, user):
            return self.filter(user=user)

    class Conversation(DeactivatableMixin, BaseModel):
        objects = ConversationQuerySet.as_manager()

    Conversation.objects.active().for_user(user)

Related:
    - core.model_mixins.DeactivatableMixin: Model mixin for the is_active flag
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class ActiveQuerySet(models.QuerySet):
    """
    QuerySet for models using DeactivatableMixin.

    Unlike a default-filtering manager, nothing is hidden implicitly: admin
    screens need to see inactive rows, so callers ask for ``active()``.
    """

    def active(self) -> ActiveQuerySet:
        """Filter to only active records."""
        return self.filter(is_active=True)

    def inactive(self) -> ActiveQuerySet:
        """Filter to only deactivated records."""
        return self.filter(is_active=False)

    def deactivate(self) -> int:
        """
        Deactivate all active records in the queryset.

        Returns:
            Number of records deactivated
        """
        now = timezone.now()
        return self.filter(is_active=True).update(
            is_active=False, deactivated_at=now, updated_at=now
        )
