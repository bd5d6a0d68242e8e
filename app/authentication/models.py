"""
Authentication models.

This module defines the identity model consumed by the support chat:
- User: Custom user model with email-based authentication and a chat role

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: IdentityVerifier (token -> Identity)

Roles:
    USER  - a customer; owns at most one active support conversation
    ADMIN - support staff; privileged identity that services every
            conversation and receives the admin broadcast
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """Role of an identity in the support chat."""

    USER = "user", "User"
    ADMIN = "admin", "Admin"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        full_name: Display name shown in chat and notification emails
        role: Chat role (user or admin)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(email="user@example.com", password="pw")
        admin = User.objects.create_user(
            email="support@example.com", password="pw", role=UserRole.ADMIN
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    full_name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name used in chat and notification emails",
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
        db_index=True,
        help_text="Chat role: customers are 'user', support staff are 'admin'",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role", "is_active"], name="user_role_active_idx"),
        ]

    def __str__(self):
        return self.email

    @property
    def is_chat_admin(self) -> bool:
        """Whether this identity is privileged in the support chat."""
        return self.role == UserRole.ADMIN

    def get_full_name(self):
        """Return the display name, or the email if none is set."""
        return self.full_name or self.email

    def get_short_name(self):
        """Return the first word of the display name, or the email local part."""
        if self.full_name:
            return self.full_name.split()[0]
        return self.email.split("@")[0]
