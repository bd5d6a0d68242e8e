"""
Authentication services.

This module provides the IdentityVerifier, the single place that turns a
client credential into an identity for the chat core.

Related files:
    - models.py: User, UserRole
    - chat/middleware.py: Websocket handshake authentication

Security:
    - Tokens are SimpleJWT access tokens (signature + expiry validated)
    - Unknown and deactivated users are rejected, not downgraded
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from core.exceptions import AuthenticationError

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """A verified caller: who they are and which chat role they hold."""

    user_id: int
    role: str
    user: User


class IdentityVerifier:
    """
    Verify a credential and yield the caller's identity.

    Usage:
        from authentication.services import IdentityVerifier

        try:
            identity = IdentityVerifier.verify(token)
        except AuthenticationError as e:
            ...  # reject the request or connection

        identity.user_id, identity.role
    """

    @staticmethod
    def verify(token: str | None) -> Identity:
        """
        Validate an access token and resolve its user.

        Args:
            token: Encoded JWT access token

        Returns:
            Identity for the token's user

        Raises:
            AuthenticationError: TOKEN_MISSING, TOKEN_INVALID,
                USER_NOT_FOUND or USER_INACTIVE
        """
        if not token:
            raise AuthenticationError("No credential provided", error_code="TOKEN_MISSING")

        try:
            access_token = AccessToken(token)
        except TokenError as e:
            raise AuthenticationError(str(e), error_code="TOKEN_INVALID") from e

        user_id = access_token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise AuthenticationError(
                "Token contains no user identifier", error_code="TOKEN_INVALID"
            )

        User = get_user_model()
        try:
            user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except User.DoesNotExist as e:
            raise AuthenticationError(
                "User not found", error_code="USER_NOT_FOUND"
            ) from e

        if not user.is_active:
            logger.warning(f"Inactive user {user.id} presented a valid token")
            raise AuthenticationError("User is inactive", error_code="USER_INACTIVE")

        return Identity(user_id=user.id, role=user.role, user=user)

    @staticmethod
    def token_for(user: User) -> str:
        """Issue an access token for a user (tooling and tests)."""
        return str(AccessToken.for_user(user))
