"""
Authentication application.

This app provides the email-based user model with its support chat role,
JWT token endpoints and the identity verifier used by the websocket
handshake.

Key components:
    - User model: Email login, role (user/admin), display name
    - IdentityVerifier: Access token to active user

Usage:
    from authentication.models import User
    from authentication.services import IdentityVerifier
"""
