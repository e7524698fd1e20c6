"""Per-connection session state.

One Session per live connection, keyed by connection id. A session starts
with the guest defaults and only its own connection's ``hello`` / ``join``
events mutate it. Lookups for a torn-down connection return None so that
handlers racing a disconnect can bail out quietly.
"""

import logging
from dataclasses import dataclass

from qallaroom.core.sanitize import DEFAULT_COLOR, DEFAULT_NAME

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = "general"


@dataclass
class Session:
    id: str
    name: str = DEFAULT_NAME
    color: str = DEFAULT_COLOR
    channel_id: str = DEFAULT_CHANNEL


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def create(self, connection_id: str) -> Session:
        session = Session(id=connection_id)
        self._sessions[connection_id] = session
        return session

    def get(self, connection_id: str) -> Session | None:
        return self._sessions.get(connection_id)

    def update(self, connection_id: str, name: str, color: str) -> Session | None:
        """Commit an authenticated identity. No-op if the session is gone."""
        session = self._sessions.get(connection_id)
        if session is None:
            logger.debug("update for missing session %s", connection_id)
            return None
        session.name = name
        session.color = color
        return session

    def remove(self, connection_id: str) -> Session | None:
        return self._sessions.pop(connection_id, None)

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
