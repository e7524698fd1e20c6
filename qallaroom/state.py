"""Owned runtime state for one relay process.

Built once at application startup from settings and torn down at shutdown.
Handlers reach the registries only through this object, never through
module globals.
"""

import logging
from dataclasses import dataclass, field

from qallaroom.config import Settings
from qallaroom.services.history import ChannelHistoryStore
from qallaroom.services.presence import PresenceTracker
from qallaroom.services.sessions import SessionRegistry
from qallaroom.services.signaling import SignalingRelay
from qallaroom.services.voice import VoiceRoomRegistry
from qallaroom.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)


@dataclass
class RelayState:
    connections: ConnectionManager
    sessions: SessionRegistry
    history: ChannelHistoryStore
    presence: PresenceTracker
    voice: VoiceRoomRegistry
    signaling: SignalingRelay
    invite_code: str = field(default="", repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RelayState":
        connections = ConnectionManager()
        return cls(
            connections=connections,
            sessions=SessionRegistry(),
            history=ChannelHistoryStore(connections, limit=settings.HISTORY_LIMIT),
            presence=PresenceTracker(connections),
            voice=VoiceRoomRegistry(connections, capacity=settings.VOICE_ROOM_CAPACITY),
            signaling=SignalingRelay(connections),
            invite_code=settings.invite_code,
        )

    async def close(self) -> None:
        await self.connections.close_all()
        self.voice.clear()
        self.presence.clear()
        self.sessions.clear()
        self.history.clear()
        logger.info("Relay state torn down")
