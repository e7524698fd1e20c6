"""Connection lifecycle controller for the /ws endpoint.

One task per connection: accept, create a guest session, then dispatch
inbound frames until the socket goes away, and finally remove the
connection from presence and from every voice room.

Invalid input is dropped without a reply. The only surfaced errors are a
failed invite (``auth:error`` then close) and a full voice room
(``rtc:join_denied``).
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect, status

from qallaroom.core import events
from qallaroom.core.sanitize import DEFAULT_COLOR, DEFAULT_NAME, clamp_string, normalize_color
from qallaroom.schemas.message import MAX_TEXT_LENGTH, MAX_URL_LENGTH, Message, new_message_id, now_ms
from qallaroom.schemas.presence import PresenceEntry
from qallaroom.services.sessions import DEFAULT_CHANNEL, Session
from qallaroom.state import RelayState

logger = logging.getLogger(__name__)

INVALID_INVITE = "Invalid invite code."

Handler = Callable[[RelayState, Session, dict[str, Any]], Awaitable[bool | None]]


class ConnectionClosed(Exception):
    """Raised by a handler that has closed its own connection."""


# ---------------------------------------------------------------------------
# Handshake / channels
# ---------------------------------------------------------------------------


async def handle_hello(state: RelayState, session: Session, data: dict[str, Any]) -> None:
    name = clamp_string(data.get("name") or DEFAULT_NAME, 32) or DEFAULT_NAME
    color = normalize_color(data.get("color") or DEFAULT_COLOR)
    invite = clamp_string(data.get("invite") or "", 64)

    if state.invite_code and invite != state.invite_code:
        logger.info("Rejected handshake from %s: bad invite code", session.id)
        await state.connections.send_to(session.id, events.AUTH_ERROR, {"message": INVALID_INVITE})
        await state.connections.close(session.id, code=status.WS_1008_POLICY_VIOLATION)
        raise ConnectionClosed(session.id)

    if state.sessions.update(session.id, name, color) is None:
        return

    await state.connections.send_to(session.id, events.CHANNELS, state.history.catalog())
    await state.history.send_history(session.id, session.channel_id)
    await state.connections.send_to(
        session.id,
        events.AUTH_OK,
        {"id": session.id, "name": name, "color": color, "channelId": session.channel_id},
    )
    await state.presence.set(session.id, PresenceEntry(id=session.id, name=name, color=color))
    logger.info("Session %s authenticated as %r", session.id, name)


async def handle_join(state: RelayState, session: Session, data: dict[str, Any]) -> bool:
    channel_id = clamp_string(data.get("channelId") or DEFAULT_CHANNEL, 32) or DEFAULT_CHANNEL
    return await state.history.join(session, channel_id)


async def handle_message(state: RelayState, session: Session, data: dict[str, Any]) -> bool:
    kind = clamp_string(data.get("type") or "text", 16) or "text"
    text = clamp_string(data.get("text") or "", MAX_TEXT_LENGTH)
    url = clamp_string(data.get("url") or "", MAX_URL_LENGTH)

    if kind == "text" and not text:
        return False
    if kind == "sticker" and not url:
        return False
    if kind not in ("text", "sticker"):
        logger.debug("message of unknown kind %r from %s dropped", kind, session.id)
        return False

    channel_id = session.channel_id or DEFAULT_CHANNEL
    if not state.history.has_channel(channel_id):
        return False

    ts = now_ms()
    message = Message(
        id=new_message_id(ts),
        channel_id=channel_id,
        user=session.name or DEFAULT_NAME,
        color=session.color or DEFAULT_COLOR,
        type=kind,
        text=text if kind == "text" else "",
        url=url if kind == "sticker" else "",
        ts=ts,
    )
    return await state.history.append(channel_id, message)


# ---------------------------------------------------------------------------
# Voice rooms / signaling
# ---------------------------------------------------------------------------


async def handle_rtc_join(state: RelayState, session: Session, data: dict[str, Any]) -> bool:
    return await state.voice.join(session.id, data.get("room"))


async def handle_rtc_leave(state: RelayState, session: Session, data: dict[str, Any]) -> bool:
    return await state.voice.leave(session.id, data.get("room"))


def _signal_handler(kind: str) -> Handler:
    field = events.SIGNAL_FIELDS[kind]

    async def handle(state: RelayState, session: Session, data: dict[str, Any]) -> bool:
        return await state.signaling.relay(kind, session.id, data.get("to"), data.get("room"), data.get(field))

    handle.__name__ = f"handle_{kind.replace(':', '_')}"
    return handle


HANDLERS: dict[str, Handler] = {
    events.HELLO: handle_hello,
    events.JOIN: handle_join,
    events.MESSAGE: handle_message,
    events.RTC_JOIN: handle_rtc_join,
    events.RTC_LEAVE: handle_rtc_leave,
    events.RTC_OFFER: _signal_handler(events.RTC_OFFER),
    events.RTC_ANSWER: _signal_handler(events.RTC_ANSWER),
    events.RTC_ICE: _signal_handler(events.RTC_ICE),
}


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def _parse_frame(raw: str) -> tuple[str | None, dict[str, Any]]:
    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        return None, {}
    if not isinstance(frame, dict):
        return None, {}
    data = frame.get("data")
    return frame.get("type"), data if isinstance(data, dict) else {}


async def dispatch(state: RelayState, connection_id: str, event_type: str | None, data: dict[str, Any]) -> None:
    """Run one inbound event. Unknown events and torn-down sessions are no-ops."""
    handler = HANDLERS.get(event_type) if isinstance(event_type, str) else None
    if handler is None:
        return
    session = state.sessions.get(connection_id)
    if session is None:
        return
    await handler(state, session, data)


async def disconnect_cleanup(state: RelayState, connection_id: str) -> None:
    state.sessions.remove(connection_id)
    state.connections.disconnect(connection_id)
    await state.presence.remove(connection_id)
    await state.voice.disconnect_cleanup(connection_id)


async def relay_ws_handler(websocket: WebSocket, state: RelayState) -> None:
    """Full lifecycle handler for one client connection."""
    await websocket.accept()
    connection_id = state.connections.connect(websocket)
    state.sessions.create(connection_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                logger.debug("Non-text frame from %s ignored", connection_id)
                continue
            event_type, data = _parse_frame(raw)
            try:
                await dispatch(state, connection_id, event_type, data)
            except ConnectionClosed:
                break
            except Exception as exc:
                logger.error(
                    "Error handling event %r from %s: %s",
                    event_type,
                    connection_id,
                    exc,
                    exc_info=True,
                )
    except WebSocketDisconnect:
        pass
    except Exception as exc:
        logger.exception("relay_ws_handler: unexpected error: %s", exc)
    finally:
        await disconnect_cleanup(state, connection_id)
