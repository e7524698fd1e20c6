"""
Pytest fixtures shared across all test modules.

The relay keeps everything in memory, so each TestClient context gets a
fresh RelayState from the app lifespan. Sticker uploads go to a temporary
directory.
"""

import os
import tempfile

# Set env vars BEFORE any app module is imported
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="qallaroom-stickers-")
os.environ["INVITE_CODE"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

# Import app modules AFTER env vars are set
from qallaroom.config import settings  # noqa: E402
from qallaroom.main import app  # noqa: E402
from qallaroom.websocket.manager import ConnectionManager  # noqa: E402

TEST_INVITE = "letmein"


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def invite_client(monkeypatch):
    """A client against a server that requires the invite code TEST_INVITE."""
    monkeypatch.setattr(settings, "INVITE_CODE", TEST_INVITE)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def connections():
    return ConnectionManager()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def send(ws, event: str, data: dict | None = None) -> None:
    ws.send_json({"type": event, "data": data or {}})


def recv(ws) -> tuple[str, object]:
    frame = ws.receive_json()
    return frame["type"], frame["data"]


def expect(ws, event: str):
    """Receive the next frame, assert its type and return its data."""
    event_type, data = recv(ws)
    assert event_type == event, f"expected {event!r}, got {event_type!r}: {data!r}"
    return data


def handshake(ws, name: str = "Guest", color: str = "#5865F2", invite: str | None = None) -> dict:
    """Send hello and drain channels/history/auth:ok/presence:list. Returns auth:ok data."""
    payload = {"name": name, "color": color}
    if invite is not None:
        payload["invite"] = invite
    send(ws, "hello", payload)
    expect(ws, "channels")
    expect(ws, "history")
    ok = expect(ws, "auth:ok")
    expect(ws, "presence:list")
    return ok
