"""
Voice room registry: membership for WebRTC peer discovery.

Rooms map a sanitized room name to the set of member connection ids. The
set doubles as the room's broadcast group: peer_joined / peer_left go to
exactly these ids. Rooms are created on first join and dropped as soon as
they are empty. Membership never exceeds the configured capacity; a join
beyond it is denied, not queued.

All membership changes and their notifications run under one registry lock,
so concurrent joins to the same room cannot overshoot the capacity.
"""

import asyncio
import logging

from qallaroom.core import events
from qallaroom.core.sanitize import clamp_string
from qallaroom.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)

DEFAULT_ROOM = "general"
MAX_ROOM_NAME = 32


def room_name(value) -> str:
    return clamp_string(value or DEFAULT_ROOM, MAX_ROOM_NAME) or DEFAULT_ROOM


class VoiceRoomRegistry:
    def __init__(self, connections: ConnectionManager, capacity: int = 4) -> None:
        self._connections = connections
        self.capacity = capacity
        # room -> member connection ids, in join order
        self._rooms: dict[str, dict[str, None]] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def members(self, room: str) -> list[str]:
        return list(self._rooms.get(room, ()))

    def rooms(self) -> dict[str, list[str]]:
        return {room: list(members) for room, members in self._rooms.items()}

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    async def join(self, connection_id: str, room) -> bool:
        """Add *connection_id* to *room*.

        On success the requester gets ``rtc:peers`` (everyone but itself) and
        existing members get ``rtc:peer_joined``. A full room only sends
        ``rtc:join_denied`` to the requester. Returns whether it is a member.
        """
        room = room_name(room)
        async with self._lock:
            members = self._rooms.get(room, {})
            if connection_id in members:
                await self._send_peers(connection_id, room, members)
                return True
            if len(members) >= self.capacity:
                logger.info("Voice room %r full, denied %s", room, connection_id)
                await self._connections.send_to(
                    connection_id,
                    events.RTC_JOIN_DENIED,
                    {"reason": f"Room full (max {self.capacity})"},
                )
                return False
            members[connection_id] = None
            self._rooms[room] = members
            await self._send_peers(connection_id, room, members)
            await self._connections.send_many(
                members,
                events.RTC_PEER_JOINED,
                {"room": room, "peerId": connection_id},
                exclude=connection_id,
            )
        return True

    async def leave(self, connection_id: str, room) -> bool:
        """Remove *connection_id* from *room*. Leaving a room you are not in is a no-op."""
        room = room_name(room)
        async with self._lock:
            return await self._remove(connection_id, room)

    async def disconnect_cleanup(self, connection_id: str) -> list[str]:
        """Drop *connection_id* from every room it is in; returns those rooms."""
        left: list[str] = []
        async with self._lock:
            for room in list(self._rooms):
                if await self._remove(connection_id, room):
                    left.append(room)
        return left

    async def _remove(self, connection_id: str, room: str) -> bool:
        members = self._rooms.get(room)
        if members is None or connection_id not in members:
            return False
        del members[connection_id]
        if not members:
            del self._rooms[room]
            return True
        await self._connections.send_many(
            members,
            events.RTC_PEER_LEFT,
            {"room": room, "peerId": connection_id},
        )
        return True

    async def _send_peers(self, connection_id: str, room: str, members) -> None:
        peers = [cid for cid in members if cid != connection_id]
        await self._connections.send_to(connection_id, events.RTC_PEERS, {"room": room, "peers": peers})

    def clear(self) -> None:
        self._rooms.clear()
