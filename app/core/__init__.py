"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. No business logic
lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - DeactivatableMixin: Soft close support (is_active, deactivated_at)

Managers (import from core.managers):
    - ActiveQuerySet: active()/inactive()/deactivate() for deactivatable rows

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - AuthenticationError: Missing or unusable credentials

Usage:
    from core.models import BaseModel
    from core.model_mixins import DeactivatableMixin, UUIDPrimaryKeyMixin
    from core.services import BaseService, ServiceResult

    class Conversation(UUIDPrimaryKeyMixin, DeactivatableMixin, BaseModel):
        objects = ConversationQuerySet.as_manager()

Note:
    Django models, mixins and managers are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import AuthenticationError, BaseApplicationError

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "AuthenticationError",
]
