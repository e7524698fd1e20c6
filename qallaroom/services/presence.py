"""
Presence tracker: who is connected and has completed the handshake.

Every change re-publishes the complete roster to all connections; there
are no delta updates. Roster order follows insertion order.
"""

import asyncio
import logging

from qallaroom.core import events
from qallaroom.schemas.presence import PresenceEntry
from qallaroom.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)


class PresenceTracker:
    def __init__(self, connections: ConnectionManager) -> None:
        self._connections = connections
        self._entries: dict[str, PresenceEntry] = {}
        self._lock = asyncio.Lock()

    def roster(self) -> list[PresenceEntry]:
        return list(self._entries.values())

    async def set(self, connection_id: str, entry: PresenceEntry) -> None:
        async with self._lock:
            self._entries[connection_id] = entry
            await self._publish()

    async def remove(self, connection_id: str) -> None:
        async with self._lock:
            self._entries.pop(connection_id, None)
            await self._publish()

    async def _publish(self) -> None:
        await self._connections.broadcast(
            events.PRESENCE_LIST,
            [e.model_dump() for e in self._entries.values()],
        )

    def clear(self) -> None:
        self._entries.clear()
