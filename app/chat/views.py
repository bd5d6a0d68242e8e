"""
API views for the support chat.

ViewSets:
    UserConversationViewSet: Customer-facing conversation operations
    AdminConversationViewSet: Support-admin conversation operations

Response Conventions:
    Service failures are returned as {"error": ..., "error_code": ...} with
    404 for NOT_FOUND, 403 for NOT_AUTHORIZED and 400 otherwise.

Related files:
    - services.py: ConversationService (all business rules live there)
    - serializers.py: Response shapes
    - permissions.py: IsChatAdmin
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.permissions import IsChatAdmin
from chat.serializers import (
    ConversationSerializer,
    MessageSerializer,
    OpenConversationSerializer,
)
from chat.services import ConversationService

if TYPE_CHECKING:
    from core.services import ServiceResult

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOT_AUTHORIZED": status.HTTP_403_FORBIDDEN,
}

ConversationEnvelopeSerializer = inline_serializer(
    name="ConversationEnvelope",
    fields={
        "conversation": ConversationSerializer(),
        "was_created": serializers.BooleanField(),
    },
)

UnreadCountSerializer = inline_serializer(
    name="UnreadCount",
    fields={"unread_count": serializers.IntegerField()},
)


def failure_response(result: ServiceResult) -> Response:
    """Translate a failed ServiceResult into an HTTP response."""
    return Response(
        {"error": result.error, "error_code": result.error_code},
        status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


def conversation_envelope(conversation, was_created: bool) -> dict:
    return {
        "conversation": ConversationSerializer(conversation).data,
        "was_created": was_created,
    }


class UserConversationViewSet(viewsets.ViewSet):
    """
    Customer-facing conversation endpoints.

    Endpoints:
        GET  /user/conversations/current/         Get or create my conversation
        GET  /user/conversations/{id}/messages/   Messages (owner or assigned admin)
        POST /user/conversations/{id}/read/       Mark read, returns my unread count
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_or_create_support_conversation",
        summary="Get or create my support conversation",
        tags=["Chat - Customer"],
        responses={200: ConversationEnvelopeSerializer},
    )
    @action(detail=False, methods=["get"])
    def current(self, request):
        """Return the caller's active conversation, creating it on first contact."""
        result = ConversationService.get_or_create_for_user(request.user)
        if not result.success:
            return failure_response(result)

        conversation, was_created = result.data
        return Response(conversation_envelope(conversation, was_created))

    @extend_schema(
        operation_id="list_support_conversation_messages",
        summary="List messages of my conversation",
        tags=["Chat - Customer"],
        responses={200: MessageSerializer(many=True)},
    )
    @action(detail=True, methods=["get"])
    def messages(self, request, pk=None):
        result = ConversationService.list_messages(pk, request.user)
        if not result.success:
            return failure_response(result)

        return Response(MessageSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="mark_support_conversation_read",
        summary="Mark my conversation as read",
        tags=["Chat - Customer"],
        request=None,
        responses={200: UnreadCountSerializer},
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = ConversationService.mark_read(pk, request.user)
        if not result.success:
            return failure_response(result)

        return Response({"unread_count": result.data})


class AdminConversationViewSet(viewsets.ViewSet):
    """
    Support-admin conversation endpoints.

    Endpoints:
        GET  /admin/conversations/                    All active, newest activity first
        POST /admin/conversations/open/               Open a user's conversation
        POST /admin/conversations/{id}/assign/        Assign myself
        GET  /admin/conversations/{id}/messages/      Messages of any conversation
        POST /admin/conversations/{id}/read/          Mark read (admin side)
        POST /admin/conversations/{id}/deactivate/    Soft-close
    """

    permission_classes = [IsAuthenticated, IsChatAdmin]

    @extend_schema(
        operation_id="list_support_conversations",
        summary="List active support conversations",
        tags=["Chat - Admin"],
        responses={200: ConversationSerializer(many=True)},
    )
    def list(self, request):
        result = ConversationService.list_for_admin()
        return Response(ConversationSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="open_support_conversation_for_user",
        summary="Open a user's support conversation",
        tags=["Chat - Admin"],
        request=OpenConversationSerializer,
        responses={
            200: ConversationEnvelopeSerializer,
            201: ConversationEnvelopeSerializer,
            404: OpenApiResponse(description="User not found"),
        },
    )
    @action(detail=False, methods=["post"])
    def open(self, request):
        """Fetch or create the user's conversation and assign the caller if unassigned."""
        serializer = OpenConversationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.open_for_user(
            request.user, serializer.validated_data["user_id"]
        )
        if not result.success:
            return failure_response(result)

        conversation, was_created = result.data
        return Response(
            conversation_envelope(conversation, was_created),
            status=status.HTTP_201_CREATED if was_created else status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="assign_support_conversation",
        summary="Assign myself to a conversation",
        tags=["Chat - Admin"],
        request=None,
        responses={200: ConversationSerializer},
    )
    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        result = ConversationService.assign_admin(pk, request.user)
        if not result.success:
            return failure_response(result)

        return Response(ConversationSerializer(result.data).data)

    @extend_schema(
        operation_id="list_support_conversation_messages_admin",
        summary="List messages of a conversation",
        tags=["Chat - Admin"],
        responses={200: MessageSerializer(many=True)},
    )
    @action(detail=True, methods=["get"])
    def messages(self, request, pk=None):
        result = ConversationService.list_messages_for_admin(pk)
        if not result.success:
            return failure_response(result)

        return Response(MessageSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="mark_support_conversation_read_admin",
        summary="Mark a conversation as read for support",
        tags=["Chat - Admin"],
        request=None,
        responses={200: UnreadCountSerializer},
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = ConversationService.mark_read(pk, request.user, as_admin=True)
        if not result.success:
            return failure_response(result)

        return Response({"unread_count": result.data})

    @extend_schema(
        operation_id="deactivate_support_conversation",
        summary="Close a conversation",
        tags=["Chat - Admin"],
        request=None,
        responses={204: None},
    )
    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        result = ConversationService.deactivate(pk)
        if not result.success:
            return failure_response(result)

        logger.info(f"Admin {request.user.id} closed conversation {pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)
