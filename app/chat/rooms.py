"""
Presence and room routing for the realtime gateway.

A connected session (one websocket, identified by its channel name) sits
in exactly one personal room, the admin room if it is privileged, and any
number of conversation rooms it joined explicitly. Membership is in-memory
and dies with the connection; clients re-join after reconnecting.

Broadcast itself goes through channel layer groups, which is what lets
sessions on different worker processes share a room when the layer is
backed by Redis. RoomRouter mirrors every group change so each process can
answer "who is in this room" for its own sessions.

Room names:
    user_<user id>                  personal room
    admins                          every privileged session
    conversation_<conversation id>  sessions that joined a conversation

Related files:
    - consumers.py: SupportChatConsumer (the only caller)
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING
from uuid import UUID
from weakref import WeakValueDictionary

if TYPE_CHECKING:
    from channels.layers import BaseChannelLayer

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admins"


def user_room(user_id) -> str:
    """Personal room of an identity."""
    return f"user_{user_id}"


def conversation_room(conversation_id: UUID | str) -> str:
    """
    Broadcast room of a conversation.

    Raises:
        ValueError: If conversation_id is not a UUID
    """
    return f"conversation_{UUID(str(conversation_id))}"


class RoomRouter:
    """
    In-memory session <-> room bookkeeping backed by channel layer groups.

    Usage:
        await room_router.join(self.channel_layer, self.channel_name, ADMIN_ROOM)
        room_router.members_of(ADMIN_ROOM)
        await room_router.leave_all(self.channel_layer, self.channel_name)
    """

    def __init__(self):
        self._rooms_by_session: dict[str, set[str]] = defaultdict(set)
        self._sessions_by_room: dict[str, set[str]] = defaultdict(set)

    async def join(self, channel_layer: BaseChannelLayer, channel_name: str, room: str) -> bool:
        """
        Add a session to a room. Joining twice is harmless.

        Returns:
            True if the session was not already a member
        """
        await channel_layer.group_add(room, channel_name)
        is_new = room not in self._rooms_by_session[channel_name]
        self._rooms_by_session[channel_name].add(room)
        self._sessions_by_room[room].add(channel_name)
        return is_new

    async def leave(self, channel_layer: BaseChannelLayer, channel_name: str, room: str) -> bool:
        """
        Remove a session from a room; no-op if it is not a member.

        Returns:
            True if the session was a member
        """
        if not self.is_member(channel_name, room):
            return False

        await channel_layer.group_discard(room, channel_name)
        self._forget(channel_name, room)
        return True

    async def leave_all(self, channel_layer: BaseChannelLayer, channel_name: str) -> set[str]:
        """
        Remove a session from every room (disconnect).

        Returns:
            The rooms the session was in
        """
        rooms = set(self._rooms_by_session.get(channel_name, ()))
        for room in rooms:
            await channel_layer.group_discard(room, channel_name)
            self._forget(channel_name, room)
        return rooms

    def rooms_for(self, channel_name: str) -> frozenset[str]:
        return frozenset(self._rooms_by_session.get(channel_name, ()))

    def members_of(self, room: str) -> frozenset[str]:
        return frozenset(self._sessions_by_room.get(room, ()))

    def is_member(self, channel_name: str, room: str) -> bool:
        return room in self._rooms_by_session.get(channel_name, ())

    def _forget(self, channel_name: str, room: str) -> None:
        rooms = self._rooms_by_session.get(channel_name)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._rooms_by_session[channel_name]

        sessions = self._sessions_by_room.get(room)
        if sessions is not None:
            sessions.discard(channel_name)
            if not sessions:
                del self._sessions_by_room[room]


class ConversationSequencer:
    """
    One asyncio.Lock per conversation within a process.

    Holding the lock across persist and broadcast makes broadcast order
    equal persist order for sends handled by this process. Locks live in a
    WeakValueDictionary and disappear once no coroutine holds them.

    Usage:
        lock = sequencer.lock_for(room)
        async with lock:
            ...
    """

    def __init__(self):
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


room_router = RoomRouter()
sequencer = ConversationSequencer()
