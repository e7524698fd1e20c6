"""
Voice room registry unit tests.

Covers:
  - capacity limit and denial without membership change
  - rtc:peers / rtc:peer_joined / rtc:peer_left addressing
  - idempotent leave, room teardown when empty
  - disconnect cleanup across rooms
  - concurrent joins never overshoot capacity
"""

import asyncio

import pytest

from qallaroom.services.voice import VoiceRoomRegistry, room_name
from qallaroom.tests.fakes import attach


@pytest.fixture()
def voice(connections):
    return VoiceRoomRegistry(connections, capacity=4)


# ---------------------------------------------------------------------------
# Join
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_first_join_creates_room_and_returns_empty_peers(voice, connections):
    a, ws_a = attach(connections)
    assert await voice.join(a, "lounge") is True
    assert voice.members("lounge") == [a]
    assert ws_a.of_type("rtc:peers") == [{"room": "lounge", "peers": []}]


@pytest.mark.asyncio
async def test_join_notifies_existing_members_only(voice, connections):
    a, ws_a = attach(connections)
    b, ws_b = attach(connections)
    c, ws_c = attach(connections)  # not in the room
    await voice.join(a, "lounge")
    ws_a.frames.clear()

    await voice.join(b, "lounge")

    assert ws_b.of_type("rtc:peers") == [{"room": "lounge", "peers": [a]}]
    assert ws_a.of_type("rtc:peer_joined") == [{"room": "lounge", "peerId": b}]
    assert ws_b.of_type("rtc:peer_joined") == []
    assert ws_c.frames == []


@pytest.mark.asyncio
async def test_fifth_join_is_denied(voice, connections):
    members = [attach(connections)[0] for _ in range(4)]
    for cid in members:
        assert await voice.join(cid, "general") is True

    late, ws_late = attach(connections)
    assert await voice.join(late, "general") is False

    assert voice.members("general") == members
    assert ws_late.of_type("rtc:join_denied") == [{"reason": "Room full (max 4)"}]
    assert ws_late.of_type("rtc:peers") == []


@pytest.mark.asyncio
async def test_denied_join_is_not_announced(voice, connections):
    members = [attach(connections) for _ in range(4)]
    for cid, _ in members:
        await voice.join(cid, "general")
    for _, ws in members:
        ws.frames.clear()

    late, _ = attach(connections)
    await voice.join(late, "general")

    for _, ws in members:
        assert ws.frames == []


@pytest.mark.asyncio
async def test_rejoin_same_room_does_not_duplicate(voice, connections):
    a, ws_a = attach(connections)
    b, ws_b = attach(connections)
    await voice.join(a, "r")
    await voice.join(b, "r")
    ws_a.frames.clear()

    assert await voice.join(b, "r") is True

    assert voice.members("r") == [a, b]
    assert ws_a.frames == []
    assert ws_b.of_type("rtc:peers")[-1] == {"room": "r", "peers": [a]}


@pytest.mark.asyncio
async def test_concurrent_joins_respect_capacity(voice, connections):
    ids = [attach(connections)[0] for _ in range(10)]
    results = await asyncio.gather(*(voice.join(cid, "busy") for cid in ids))
    assert results.count(True) == 4
    assert len(voice.members("busy")) == 4


@pytest.mark.parametrize(
    "raw, expected",
    [(None, "general"), ("", "general"), ("   ", "general"), (12, "general"), (" lobby ", "lobby"), ("x" * 40, "x" * 32)],
)
def test_room_name_is_sanitized(raw, expected):
    assert room_name(raw) == expected


# ---------------------------------------------------------------------------
# Leave / cleanup
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_leave_notifies_remaining_members(voice, connections):
    a, ws_a = attach(connections)
    b, ws_b = attach(connections)
    await voice.join(a, "r")
    await voice.join(b, "r")
    ws_a.frames.clear()

    assert await voice.leave(b, "r") is True

    assert voice.members("r") == [a]
    assert ws_a.of_type("rtc:peer_left") == [{"room": "r", "peerId": b}]


@pytest.mark.asyncio
async def test_last_leave_destroys_room(voice, connections):
    a, _ = attach(connections)
    await voice.join(a, "r")
    await voice.leave(a, "r")
    assert "r" not in voice.rooms()


@pytest.mark.asyncio
async def test_leave_room_never_joined_is_noop(voice, connections):
    a, ws_a = attach(connections)
    b, ws_b = attach(connections)
    await voice.join(a, "r")
    ws_a.frames.clear()

    assert await voice.leave(b, "r") is False
    assert await voice.leave(b, "nowhere") is False

    assert voice.members("r") == [a]
    assert ws_a.frames == []
    assert ws_b.frames == []
    assert "nowhere" not in voice.rooms()


@pytest.mark.asyncio
async def test_disconnect_cleanup_scans_every_room(voice, connections):
    a, ws_a = attach(connections)
    b, ws_b = attach(connections)
    await voice.join(a, "one")
    await voice.join(b, "one")
    await voice.join(b, "two")
    ws_a.frames.clear()

    left = await voice.disconnect_cleanup(b)

    assert sorted(left) == ["one", "two"]
    assert voice.members("one") == [a]
    assert "two" not in voice.rooms()
    assert ws_a.of_type("rtc:peer_left") == [{"room": "one", "peerId": b}]


@pytest.mark.asyncio
async def test_disconnect_cleanup_for_non_member_is_noop(voice, connections):
    a, ws_a = attach(connections)
    await voice.join(a, "one")
    ws_a.frames.clear()

    assert await voice.disconnect_cleanup("stranger") == []
    assert voice.members("one") == [a]
    assert ws_a.frames == []


@pytest.mark.asyncio
async def test_freed_slot_can_be_taken(voice, connections):
    ids = [attach(connections)[0] for _ in range(4)]
    for cid in ids:
        await voice.join(cid, "general")
    await voice.leave(ids[0], "general")

    newcomer, _ = attach(connections)
    assert await voice.join(newcomer, "general") is True
    assert len(voice.members("general")) == 4
