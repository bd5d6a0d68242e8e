"""
Permission classes for the chat API.

- IsChatAdmin: Caller is support staff (role=admin)

Conversation-level rules (owner or assigned admin) are enforced in
ConversationService so the REST and websocket surfaces share them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsChatAdmin(permissions.BasePermission):
    """Allows access only to support admins."""

    message = "Support admin access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_chat_admin)
