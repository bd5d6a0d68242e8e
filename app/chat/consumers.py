"""
WebSocket consumer for the support chat (the realtime message gateway).

Consumers:
    SupportChatConsumer: One connection per browser session

Authentication:
    JWTAuthMiddleware attaches the user to self.scope["user"]. Anonymous
    sessions are closed with code 4001 before being accepted and never
    join any room.

Rooms (see rooms.py):
    user_<id>               joined on connect
    admins                  joined on connect by support admins
    conversation_<uuid>     joined and left on request

Message Types (from client):
    - join_conversation   {conversation_id}
    - leave_conversation  {conversation_id}
    - send_message        {conversation_id, body}
    - typing              {conversation_id, is_typing}
    - acknowledge_read    {conversation_id}

Message Types (to client):
    - new_message                {message}
    - new_conversation_activity  {conversation_id, message, sender_id}
    - unread_count_changed       {conversation_id, role, count}
    - user_typing                {conversation_id, user_id, is_typing}
    - error                      {message, error_code}
"""

from __future__ import annotations

import logging
from uuid import UUID

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import CLOSE_CODES, EVENTS
from chat.models import ChatRole
from chat.rooms import ADMIN_ROOM, conversation_room, room_router, sequencer, user_room
from chat.serializers import MessageSerializer
from chat.services import ConversationService, MessageService, SendOutcome

logger = logging.getLogger(__name__)


class SupportChatConsumer(AsyncJsonWebsocketConsumer):
    """
    Realtime gateway for one authenticated session.

    Handles:
        - Connection authentication and personal/admin room membership
        - Joining/leaving conversation rooms
        - Persisting and fanning out messages
        - Typing indicators
        - Pushing recounted unread counters after a read

    Attributes:
        user: Authenticated user (after connect)
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None

    async def connect(self):
        """
        Accept authenticated sessions and join their standing rooms.

        Rooms are joined before accepting so no event addressed to the
        session is lost between accept and join.
        """
        user = self.scope.get("user")

        if user is None or not user.is_authenticated:
            logger.warning("Rejected unauthenticated websocket connection")
            await self.close(code=CLOSE_CODES.UNAUTHENTICATED)
            return

        self.user = user
        await room_router.join(self.channel_layer, self.channel_name, user_room(user.id))
        if user.is_chat_admin:
            await room_router.join(self.channel_layer, self.channel_name, ADMIN_ROOM)

        # Browsers require the server to echo a subprotocol they offered
        subprotocol = "jwt" if "jwt" in self.scope.get("subprotocols", []) else None
        await self.accept(subprotocol=subprotocol)
        logger.info(f"User {user.id} connected ({self.channel_name})")

    async def disconnect(self, close_code):
        """Drop every room membership of this session."""
        rooms = await room_router.leave_all(self.channel_layer, self.channel_name)
        if self.user is not None:
            logger.info(
                f"User {self.user.id} disconnected with code {close_code}, "
                f"left {len(rooms)} rooms"
            )

    async def receive_json(self, content, **kwargs):
        """
        Dispatch an inbound event.

        Every event names a conversation; a missing or malformed id is
        answered with an error event and nothing else happens.
        """
        if not isinstance(content, dict):
            await self._send_error("Events must be JSON objects", "VALIDATION_ERROR")
            return

        handlers = {
            EVENTS.JOIN_CONVERSATION: self._handle_join,
            EVENTS.LEAVE_CONVERSATION: self._handle_leave,
            EVENTS.SEND_MESSAGE: self._handle_send_message,
            EVENTS.TYPING: self._handle_typing,
            EVENTS.ACKNOWLEDGE_READ: self._handle_acknowledge_read,
        }

        message_type = content.get("type")
        handler = handlers.get(message_type)
        if handler is None:
            await self._send_error(f"Unknown message type: {message_type}", "UNKNOWN_EVENT")
            return

        conversation_id = self._parse_conversation_id(content.get("conversation_id"))
        if conversation_id is None:
            await self._send_error("A valid conversation_id is required", "VALIDATION_ERROR")
            return

        await handler(conversation_id, content)

    # -------------------------------------------------------------------------
    # Inbound handlers
    # -------------------------------------------------------------------------

    async def _handle_join(self, conversation_id: UUID, content: dict):
        if not await self._can_join(conversation_id):
            await self._send_error(
                "You are not a participant in this conversation", "NOT_AUTHORIZED"
            )
            return

        await room_router.join(
            self.channel_layer, self.channel_name, conversation_room(conversation_id)
        )
        logger.debug(f"User {self.user.id} joined conversation {conversation_id}")

    async def _handle_leave(self, conversation_id: UUID, content: dict):
        await room_router.leave(
            self.channel_layer, self.channel_name, conversation_room(conversation_id)
        )

    async def _handle_send_message(self, conversation_id: UUID, content: dict):
        """
        Persist, then fan out.

        The per-conversation lock is held until every broadcast of this
        message has been handed to the channel layer, so a concurrent send
        in the same conversation cannot overtake it.
        """
        room = conversation_room(conversation_id)
        lock = sequencer.lock_for(room)

        async with lock:
            result = await self._persist_message(conversation_id, content.get("body"))
            if not result.success:
                await self._send_error(result.error, result.error_code)
                return

            await self._broadcast_message(conversation_id, result.data)

    async def _handle_typing(self, conversation_id: UUID, content: dict):
        await self.channel_layer.group_send(
            conversation_room(conversation_id),
            {
                "type": "chat.typing",
                "conversation_id": str(conversation_id),
                "user_id": self.user.id,
                "is_typing": content.get("is_typing") is True,
                "origin": self.channel_name,
            },
        )

    async def _handle_acknowledge_read(self, conversation_id: UUID, content: dict):
        """Push both freshly read counters to the admin room and the owner's room."""
        result = await self._unread_counts(conversation_id)
        if not result.success:
            await self._send_error(result.error, result.error_code)
            return

        owner_id, unread_count = result.data
        await self._send_unread_count(conversation_id, ChatRole.ADMIN, unread_count, owner_id)
        await self._send_unread_count(conversation_id, ChatRole.USER, unread_count, owner_id)

    # -------------------------------------------------------------------------
    # Fan-out
    # -------------------------------------------------------------------------

    async def _broadcast_message(self, conversation_id: UUID, payload: dict):
        message = payload["message"]

        await self.channel_layer.group_send(
            conversation_room(conversation_id),
            {"type": "chat.new_message", "message": message},
        )

        if not payload["sender_is_admin"]:
            await self.channel_layer.group_send(
                ADMIN_ROOM,
                {
                    "type": "chat.conversation_activity",
                    "conversation_id": str(conversation_id),
                    "message": message,
                    "sender_id": self.user.id,
                },
            )

        await self._send_unread_count(
            conversation_id,
            payload["recipient_side"],
            payload["unread_count"],
            payload["owner_id"],
        )

    async def _send_unread_count(self, conversation_id, side: str, unread_count: dict, owner_id):
        """Counters of the admin side go to the admin room, the user side to the owner."""
        target = ADMIN_ROOM if side == ChatRole.ADMIN else user_room(owner_id)
        await self.channel_layer.group_send(
            target,
            {
                "type": "chat.unread_count",
                "conversation_id": str(conversation_id),
                "role": str(side),
                "count": unread_count[side],
            },
        )

    # -------------------------------------------------------------------------
    # Channel layer event handlers
    # -------------------------------------------------------------------------

    async def chat_new_message(self, event):
        await self.send_json({"type": EVENTS.NEW_MESSAGE, "message": event["message"]})

    async def chat_conversation_activity(self, event):
        await self.send_json(
            {
                "type": EVENTS.NEW_CONVERSATION_ACTIVITY,
                "conversation_id": event["conversation_id"],
                "message": event["message"],
                "sender_id": event["sender_id"],
            }
        )

    async def chat_unread_count(self, event):
        await self.send_json(
            {
                "type": EVENTS.UNREAD_COUNT_CHANGED,
                "conversation_id": event["conversation_id"],
                "role": event["role"],
                "count": event["count"],
            }
        )

    async def chat_typing(self, event):
        """Relay typing to every session in the room except the one typing."""
        if event["origin"] == self.channel_name:
            return

        await self.send_json(
            {
                "type": EVENTS.USER_TYPING,
                "conversation_id": event["conversation_id"],
                "user_id": event["user_id"],
                "is_typing": event["is_typing"],
            }
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _send_error(self, message: str, error_code: str | None):
        await self.send_json({"type": EVENTS.ERROR, "message": message, "error_code": error_code})

    @staticmethod
    def _parse_conversation_id(value) -> UUID | None:
        if value is None:
            return None
        try:
            return UUID(str(value))
        except ValueError:
            return None

    @database_sync_to_async
    def _can_join(self, conversation_id: UUID) -> bool:
        return ConversationService.can_join_room(conversation_id, self.user)

    @database_sync_to_async
    def _persist_message(self, conversation_id: UUID, body):
        """
        Persist through MessageService and shape the fan-out payload.

        Serialization happens here, on the database thread, because it
        reads related rows.
        """
        result = MessageService.send_message(conversation_id, self.user, body)
        return result.map(self._fanout_payload)

    @staticmethod
    def _fanout_payload(outcome: SendOutcome) -> dict:
        return {
            "message": MessageSerializer(outcome.message).data,
            "sender_is_admin": outcome.sender_is_admin,
            "recipient_side": outcome.recipient_side,
            "unread_count": outcome.unread_count,
            "owner_id": outcome.conversation.user_id,
        }

    @database_sync_to_async
    def _unread_counts(self, conversation_id: UUID):
        result = ConversationService.unread_counts(conversation_id)
        return result.map(lambda data: (data[0].user_id, data[1]))
