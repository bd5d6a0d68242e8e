"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    └── AuthenticationError - Missing, invalid or unusable credentials

Usage:
    from core.exceptions import AuthenticationError

    raise AuthenticationError("Token is invalid or expired", error_code="TOKEN_INVALID")

    try:
        identity = IdentityVerifier.verify(token)
    except AuthenticationError as e:
        logger.warning(f"Rejected connection: {e.error_code}")

Note:
    Expected service outcomes use core.services.ServiceResult instead.
    These exceptions are for failures that abort the caller's flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API or websocket responses.

        Example:
            {
                "error": "Token is invalid or expired",
                "error_code": "TOKEN_INVALID",
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class AuthenticationError(BaseApplicationError):
    """
    Raised when a caller cannot be identified.

    Use for:
    - Missing credential
    - Malformed, expired or tampered token
    - Token that names an unknown or deactivated user

    Note:
        DRF views rely on DRF's own AuthenticationFailed. This exception is
        raised by authentication.services.IdentityVerifier, which also backs
        the websocket handshake.
    """

    default_error_code: str = "AUTHENTICATION_FAILED"

