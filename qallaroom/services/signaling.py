"""Point-to-point relay for WebRTC offer / answer / ICE messages.

The server does not check that sender and target share a room; the room
tag is passed through for the client to demultiplex peer connections.
"""

import logging

from qallaroom.core import events
from qallaroom.core.sanitize import clamp_string
from qallaroom.websocket.manager import ConnectionManager

logger = logging.getLogger(__name__)


class SignalingRelay:
    def __init__(self, connections: ConnectionManager) -> None:
        self._connections = connections

    async def relay(self, kind: str, from_id: str, to_id, room, payload) -> bool:
        """Forward one signaling message to *to_id* only.

        Drops (returns False) when the kind is unknown, the target is missing
        or not a string, or the payload is absent or an empty string.
        """
        field = events.SIGNAL_FIELDS.get(kind)
        if field is None:
            return False
        if not isinstance(to_id, str) or not to_id or payload is None or payload == "":
            logger.debug("%s from %s dropped: missing target or %s", kind, from_id, field)
            return False
        return await self._connections.send_to(
            to_id,
            kind,
            {"from": from_id, "room": clamp_string(room or "", 32), field: payload},
        )
