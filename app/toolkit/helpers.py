"""
Helper functions for handling personal data.

Usage:
    from toolkit.helpers import mask_email

    masked = mask_email("user@example.com")  # u***@example.com
"""

from __future__ import annotations


def mask_email(email: str) -> str:
    """
    Mask an email address for logs.

    Keeps the first character of the local part and the whole domain.

    Example:
        mask_email("john.doe@example.com")  # "j***@example.com"
        mask_email("j@example.com")         # "***@example.com"
    """
    if not email or "@" not in email:
        return "***"

    local, domain = email.rsplit("@", 1)

    if len(local) > 1:
        masked_local = local[0] + "***"
    else:
        masked_local = "***"

    return f"{masked_local}@{domain}"
