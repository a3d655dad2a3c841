"""Shared fakes for the relay and client tests."""

import asyncio
import itertools

import pytest
from aiortc import RTCSessionDescription

from signal_relay.controllers.signaling_controller import init as init_signaling_controller
from signal_relay.controllers.webrtc_controller import init as init_webrtc_controller
from signal_relay.controllers.webrtc_controller import RoomCoordinator
from signal_relay.tools.room_registry import RoomRegistry


def _as_args(data):
    return data if isinstance(data, tuple) else (data,)


class Hub:
    """Schedules every delivery as its own task, like Socket.IO async handlers."""

    def __init__(self):
        self.tasks = []

    def schedule(self, handler, *args):
        if handler is None:
            return
        self.tasks.append(asyncio.ensure_future(handler(*args)))

    async def settle(self):
        """Wait until no delivery is pending."""
        while True:
            pending = [t for t in self.tasks if not t.done()]
            if not pending:
                break
            await asyncio.gather(*pending)
        for task in self.tasks:
            task.result()


class FakeServer:
    """Records emits and room membership of a socketio.AsyncServer."""

    def __init__(self, hub=None):
        self.hub = hub
        self.handlers = {}
        self.rooms = {}
        self.clients = {}
        self.emitted = []

    def on(self, event):
        def decorator(handler):
            self.handlers[event] = handler
            return handler

        return decorator

    async def enter_room(self, sid, room):
        members = self.rooms.setdefault(room, [])
        if sid not in members:
            members.append(sid)

    async def leave_room(self, sid, room):
        members = self.rooms.get(room, [])
        if sid in members:
            members.remove(sid)
        if not members:
            self.rooms.pop(room, None)

    async def emit(self, event, data=None, to=None, room=None, skip_sid=None):
        self.emitted.append(
            {"event": event, "data": data, "to": to, "room": room, "skip_sid": skip_sid}
        )
        if to is not None:
            targets = [to]
        else:
            targets = [sid for sid in self.rooms.get(room, []) if sid != skip_sid]
        if self.hub is None:
            return
        for sid in targets:
            client = self.clients.get(sid)
            if client is not None and client.connected:
                self.hub.schedule(client.handlers.get(event), *_as_args(data))

    def sent_to(self, sid, event=None):
        """Events the server addressed to sid, directly or through a room."""
        received = []
        for item in self.emitted:
            if event is not None and item["event"] != event:
                continue
            if item["to"] == sid:
                received.append(item)
            elif item["room"] is not None and item["skip_sid"] != sid:
                received.append(item)
        return received

    async def trigger(self, event, sid, *args):
        return await self.handlers[event](sid, *args)


class FakeClient:
    """A socketio.AsyncClient connected to a FakeServer through the hub."""

    def __init__(self, sid, server=None, hub=None):
        self.sid = sid
        self.server = server
        self.hub = hub
        self.handlers = {}
        self.emitted = []
        self.connected = True
        if server is not None:
            server.clients[sid] = self

    def on(self, event):
        def decorator(handler):
            self.handlers[event] = handler
            return handler

        return decorator

    def get_sid(self):
        return self.sid

    async def emit(self, event, data=None):
        self.emitted.append((event, data))
        if self.server is not None and self.connected:
            self.hub.schedule(self.server.handlers.get(event), self.sid, *_as_args(data))

    async def disconnect(self):
        if not self.connected:
            return
        self.connected = False
        if self.server is not None:
            self.hub.schedule(self.server.handlers.get("disconnect"), self.sid, "client disconnect")


class FakePeerConnection:
    """The slice of aiortc.RTCPeerConnection that PeerLink uses."""

    _ids = itertools.count()

    def __init__(self, configuration=None):
        self.id = next(self._ids)
        self.configuration = configuration
        self.handlers = {}
        self.tracks = []
        self.candidates = []
        self.applied_remote = []
        self.localDescription = None
        self.remoteDescription = None
        self.signalingState = "stable"
        self.connectionState = "new"
        self.iceConnectionState = "new"
        self.closed = False

    def on(self, event):
        def decorator(handler):
            self.handlers[event] = handler
            return handler

        return decorator

    async def emit_async(self, event, *args):
        result = self.handlers[event](*args)
        if asyncio.iscoroutine(result):
            await result

    def addTrack(self, track):
        self.tracks.append(track)

    async def createOffer(self):
        if self.signalingState != "stable":
            raise RuntimeError(f"Cannot create offer in {self.signalingState}")
        return RTCSessionDescription(sdp=f"v=0 offer {self.id}", type="offer")

    async def createAnswer(self):
        if self.signalingState != "have-remote-offer":
            raise RuntimeError(f"Cannot create answer in {self.signalingState}")
        return RTCSessionDescription(sdp=f"v=0 answer {self.id}", type="answer")

    async def setLocalDescription(self, description):
        await asyncio.sleep(0)
        if description.type == "offer":
            self.signalingState = "have-local-offer"
        elif self.signalingState == "have-remote-offer":
            self.signalingState = "stable"
        else:
            raise RuntimeError(f"Cannot set local answer in {self.signalingState}")
        self.localDescription = description

    async def setRemoteDescription(self, description):
        await asyncio.sleep(0)
        if description.type == "offer":
            if self.signalingState != "stable":
                raise RuntimeError(f"Cannot set remote offer in {self.signalingState}")
            self.signalingState = "have-remote-offer"
        elif self.signalingState == "have-local-offer":
            self.signalingState = "stable"
        else:
            raise RuntimeError(f"Cannot set remote answer in {self.signalingState}")
        self.remoteDescription = description
        self.applied_remote.append(description)

    async def addIceCandidate(self, candidate):
        if self.closed:
            raise RuntimeError("RTCPeerConnection is closed")
        self.candidates.append(candidate)

    async def close(self):
        self.closed = True
        self.signalingState = "closed"
        self.connectionState = "closed"


class FakeTrack:
    kind = "audio"


class FakeLocalMedia:
    def __init__(self):
        self.acquired = False
        self.released = False

    @property
    def tracks(self):
        return ["local-audio"] if self.acquired else []

    def outbound_tracks(self):
        return list(self.tracks)

    def acquire(self):
        self.acquired = True

    def release(self):
        self.acquired = False
        self.released = True


class FakeSink:
    def __init__(self):
        self.tracks = []
        self.started = False
        self.stopped = False

    def addTrack(self, track):
        self.tracks.append(track)

    async def start(self):
        self.started = True

    async def stop(self):
        self.stopped = True


class Network:
    """A relay and any number of call clients wired through one hub."""

    def __init__(self, negotiation_timeout=None):
        self.hub = Hub()
        self.registry = RoomRegistry()
        self.server = FakeServer(self.hub)
        self.negotiation_timeout = negotiation_timeout
        init_signaling_controller(self.server, self.registry)
        self.clients = {}
        self.coordinators = {}

    def add_client(self, sid):
        client = FakeClient(sid, self.server, self.hub)
        coordinator = RoomCoordinator(
            client,
            FakeLocalMedia(),
            pc_factory=FakePeerConnection,
            sink_factory=FakeSink,
            negotiation_timeout=self.negotiation_timeout,
        )
        init_webrtc_controller(client, coordinator)
        self.clients[sid] = client
        self.coordinators[sid] = coordinator
        return coordinator

    async def settle(self):
        """Wait for relay deliveries and for coordinator background work."""
        while True:
            await self.hub.settle()
            busy = [c for c in self.coordinators.values() if c.pending]
            if not busy:
                break
            for coordinator in busy:
                await coordinator.wait_pending()


@pytest.fixture
def network():
    return Network()


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def server():
    return FakeServer()
