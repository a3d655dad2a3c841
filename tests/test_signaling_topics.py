"""Tests for the Socket.IO topic handlers registered on the relay."""

import pytest

from signal_relay.controllers.signaling_controller import init


@pytest.fixture
def relay(server, registry):
    init(server, registry)
    return server


def test_registers_all_topics(relay):
    assert set(relay.handlers) == {"connect", "join", "relay", "leave", "disconnect"}


@pytest.mark.asyncio
async def test_join_with_positional_arguments(relay, registry):
    await relay.trigger("join", "a", "r1", "Alice")
    response = await relay.trigger("join", "b", "r1", "Bob")

    assert response == {"action": "join", "status": "success", "existing_members": ["a"]}
    assert registry.members("r1") == ["a", "b"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "args",
    [
        ("r1",),
        ("r1", 42),
        ("", "Alice"),
        ("r1", "   "),
    ],
)
async def test_invalid_join_is_rejected(relay, registry, args):
    response = await relay.trigger("join", "a", *args)

    assert response["status"] == "error"
    assert response["action"] == "join"
    assert registry.room_count() == 0
    assert relay.emitted == []


@pytest.mark.asyncio
async def test_relay_forwards_payload(relay):
    await relay.trigger("join", "a", "r1", "Alice")
    await relay.trigger("join", "b", "r1", "Bob")
    relay.emitted.clear()
    candidate = {"candidate": "candidate:1 1 udp 1 10.0.0.1 9 typ host", "sdpMid": "0", "sdpMLineIndex": 0}

    await relay.trigger("relay", "a", {"to": "b", "from": "a", "data": candidate})

    assert relay.emitted[0]["event"] == "relay"
    assert relay.emitted[0]["to"] == "b"
    assert relay.emitted[0]["data"] == {"from": "a", "data": candidate}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message",
    [
        {"to": "b", "from": "a"},
        {"to": "b", "from": "a", "data": "offer"},
        {"to": "b", "from": "a", "data": {"type": "pranswer", "sdp": "v=0"}},
        {"to": "b", "from": "a", "data": {"type": "offer"}},
    ],
)
async def test_malformed_relay_is_rejected(relay, message):
    await relay.trigger("join", "a", "r1", "Alice")
    await relay.trigger("join", "b", "r1", "Bob")
    relay.emitted.clear()

    response = await relay.trigger("relay", "a", message)

    assert response["status"] == "error"
    assert relay.emitted == []


@pytest.mark.asyncio
async def test_leave_keeps_connection_usable(relay, registry):
    await relay.trigger("join", "a", "r1", "Alice")

    response = await relay.trigger("leave", "a")
    assert response == {"action": "leave", "status": "success", "rooms": ["r1"]}
    assert not registry.has_room("r1")

    await relay.trigger("join", "a", "r2", "Alice")
    assert registry.members("r2") == ["a"]


@pytest.mark.asyncio
async def test_disconnect_cleans_up_membership(relay, registry):
    await relay.trigger("join", "a", "r1", "Alice")
    await relay.trigger("join", "b", "r1", "Bob")
    relay.emitted.clear()

    await relay.trigger("disconnect", "b", "transport close")

    assert registry.members("r1") == ["a"]
    assert relay.sent_to("a", "peer-left")[0]["data"] == "b"
