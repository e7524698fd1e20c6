import json
import logging
import uuid
from collections.abc import Iterable
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def encode_frame(event: str, data: Any) -> str:
    return json.dumps({"type": event, "data": data})


class ConnectionManager:
    """Addressable registry of live WebSocket connections.

    Connections are stored as {connection_id: WebSocket}. Every outbound
    frame is ``{"type": event, "data": payload}``. Delivery targets are
    always explicit: one connection, an explicit set of ids, or everyone.

    A send that fails means the peer is gone; the connection is forgotten
    here and the owning handler does the rest of the cleanup when its
    receive loop ends.
    """

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def connect(self, websocket: WebSocket) -> str:
        """Register an already-accepted WebSocket and return its connection id."""
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = websocket
        logger.info("WebSocket connected (%s)", connection_id)
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        if self._connections.pop(connection_id, None) is not None:
            logger.info("WebSocket disconnected (%s)", connection_id)

    def connection_ids(self) -> list[str]:
        return list(self._connections.keys())

    async def close(self, connection_id: str, code: int = 1000) -> None:
        """Forcibly close a connection. Further sends to it are dropped."""
        ws = self._connections.pop(connection_id, None)
        if ws is None:
            return
        try:
            await ws.close(code=code)
        except Exception:
            logger.debug("close(%s) on an already-closed socket", connection_id)

    async def close_all(self) -> None:
        for connection_id in self.connection_ids():
            await self.close(connection_id, code=1001)

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def send_to(self, connection_id: str, event: str, data: Any) -> bool:
        """Send to one connection.

        Returns True if delivered, False if the connection isn't here.
        """
        ws = self._connections.get(connection_id)
        if ws is None:
            return False
        try:
            await ws.send_text(encode_frame(event, data))
            return True
        except Exception:
            self.disconnect(connection_id)
            return False

    async def send_many(
        self,
        connection_ids: Iterable[str],
        event: str,
        data: Any,
        exclude: str | None = None,
    ) -> None:
        """Send to an explicit set of connections, in the order given."""
        frame = encode_frame(event, data)
        dead: list[str] = []
        for cid in list(connection_ids):
            if cid == exclude:
                continue
            ws = self._connections.get(cid)
            if ws is None:
                continue
            try:
                await ws.send_text(frame)
            except Exception:
                dead.append(cid)
        for cid in dead:
            self.disconnect(cid)

    async def broadcast(self, event: str, data: Any, exclude: str | None = None) -> None:
        """Send to every live connection."""
        await self.send_many(self.connection_ids(), event, data, exclude=exclude)
