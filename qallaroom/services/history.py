"""Channel catalog and bounded per-channel message history.

The catalog is fixed at startup. Each channel keeps its most recent
messages in insertion order; once the cap is reached the oldest message
is evicted for every new one.

Append and the following broadcast run under the channel's lock, so two
concurrent senders on one channel can never broadcast out of append order.
"""

import asyncio
import logging
from collections import deque

from qallaroom.core import events
from qallaroom.schemas.channel import Channel
from qallaroom.schemas.message import Message
from qallaroom.services.sessions import Session
from qallaroom.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = (
    Channel(id="general", name="general"),
    Channel(id="gaming", name="gaming"),
    Channel(id="music", name="music"),
    Channel(id="memes", name="memes"),
)


class ChannelHistoryStore:
    def __init__(
        self,
        connections: ConnectionManager,
        channels: tuple[Channel, ...] = DEFAULT_CHANNELS,
        limit: int = 200,
    ) -> None:
        self._connections = connections
        self._channels = channels
        self.limit = limit
        self._history: dict[str, deque[Message]] = {c.id: deque(maxlen=limit) for c in channels}
        self._locks: dict[str, asyncio.Lock] = {c.id: asyncio.Lock() for c in channels}

    @property
    def channels(self) -> list[Channel]:
        return list(self._channels)

    def catalog(self) -> list[dict]:
        return [c.model_dump() for c in self._channels]

    def has_channel(self, channel_id: str) -> bool:
        return channel_id in self._history

    def replay(self, channel_id: str) -> list[Message]:
        """Current history for *channel_id*, oldest first; empty if unknown."""
        return list(self._history.get(channel_id, ()))

    def history_payload(self, channel_id: str) -> dict:
        return {
            "channelId": channel_id,
            "messages": [m.to_wire() for m in self.replay(channel_id)],
        }

    async def append(self, channel_id: str, message: Message) -> bool:
        """Append *message* to its channel and broadcast it to every connection.

        Returns False (and does nothing) for an unknown channel.
        """
        log = self._history.get(channel_id)
        if log is None:
            logger.debug("append to unknown channel %r dropped", channel_id)
            return False
        async with self._locks[channel_id]:
            log.append(message)
            # Live delivery is global; channel scoping only applies to replay.
            await self._connections.broadcast(events.MESSAGE, message.to_wire())
        return True

    async def join(self, session: Session, channel_id: str) -> bool:
        """Switch *session* to *channel_id* and replay that channel to it alone."""
        if not self.has_channel(channel_id):
            logger.debug("join to unknown channel %r dropped", channel_id)
            return False
        session.channel_id = channel_id
        await self.send_history(session.id, channel_id)
        return True

    async def send_history(self, connection_id: str, channel_id: str) -> None:
        await self._connections.send_to(connection_id, events.HISTORY, self.history_payload(channel_id))

    def clear(self) -> None:
        for log in self._history.values():
            log.clear()
