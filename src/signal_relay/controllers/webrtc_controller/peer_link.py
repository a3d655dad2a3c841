"""
Peer Link

Drives the offer/answer negotiation with exactly one remote member:
NEW -> HAVE_LOCAL_OFFER (initiator) | HAVE_REMOTE_OFFER (responder)
-> STABLE -> CLOSED.

A remote description is applied at most once. Duplicate offers and
answers are dropped, so the two sides can never be pushed out of STABLE
back into an offer/answer state.
"""

from aiortc import RTCPeerConnection
from signal_relay.tools.logger import log_info, log_debug, log_error, log_warning
from signal_relay.tools.signal_payload import (
    OFFER,
    ANSWER,
    CANDIDATE,
    signal_kind,
    description_to_dict,
    description_from_dict,
    candidate_to_dict,
    candidate_from_dict,
)
from typing import Awaitable, Callable, Iterable, Optional
import asyncio

from . import LinkState, NEGOTIATION_TIMEOUT_SECONDS


class PeerLink:
    """
    Negotiation and transport state between the local client and one remote member.

    The role is fixed at creation. Callbacks registered on the peer connection
    and the signal() handler share one lock, so no handler observes a
    half-applied description.
    """

    def __init__(
        self,
        remote_id: str,
        is_initiator: bool,
        send_signal: Callable[[str, dict], Awaitable[None]],
        local_tracks: Iterable = (),
        on_track: Optional[Callable] = None,
        on_closed: Optional[Callable] = None,
        configuration=None,
        pc_factory: Callable = RTCPeerConnection,
        negotiation_timeout: Optional[float] = NEGOTIATION_TIMEOUT_SECONDS,
    ):
        """
        Create the peer connection and attach the local tracks.

        Args:
            remote_id: Connection ID of the remote member
            is_initiator: True if this side sends the offer
            send_signal: Coroutine function (to, data) delivering a payload via the relay
            local_tracks: Outbound media tracks, shared by all links
            on_track: Called with (remote_id, track) when remote media arrives
            on_closed: Called with (link, reason) once the link is closed
            configuration: RTCConfiguration for the peer connection
            pc_factory: Peer connection class or factory
            negotiation_timeout: Seconds to reach STABLE before giving up, None to wait forever
        """
        self.remote_id = remote_id
        self.is_initiator = is_initiator
        self.state = LinkState.NEW
        self.close_reason: Optional[str] = None

        self._send_signal = send_signal
        self._on_track = on_track
        self._on_closed = on_closed
        self._negotiation_timeout = negotiation_timeout
        self._lock = asyncio.Lock()
        self._watchdog_task: Optional[asyncio.Task] = None

        self.pc = pc_factory(configuration) if configuration is not None else pc_factory()
        for track in local_tracks:
            self.pc.addTrack(track)

        self._setup_handlers()
        log_info(
            f"Created peer link to {remote_id} "
            f"({'initiator' if is_initiator else 'responder'})"
        )

    def _setup_handlers(self):
        """Register the peer connection callbacks."""

        @self.pc.on("icecandidate")
        async def on_ice_candidate(candidate):
            await self._on_candidate_produced(candidate)

        @self.pc.on("track")
        def on_track(track):
            log_info(f"Remote {track.kind} track received from {self.remote_id}")
            if self._on_track:
                self._on_track(self.remote_id, track)

        @self.pc.on("negotiationneeded")
        async def on_negotiation_needed():
            await self._on_negotiation_needed()

        @self.pc.on("connectionstatechange")
        async def on_connection_state_change():
            state = self.pc.connectionState
            log_info(f"Connection state for {self.remote_id}: {state}")
            if state == "failed":
                log_warning(f"Connection to {self.remote_id} failed")
                await self.close(reason="connection_failed")

        @self.pc.on("iceconnectionstatechange")
        async def on_ice_connection_state_change():
            log_debug(
                f"ICE connection state for {self.remote_id}: "
                f"{self.pc.iceConnectionState}"
            )

    @property
    def has_remote_description(self) -> bool:
        return self.pc.remoteDescription is not None

    @property
    def closed(self) -> bool:
        return self.state == LinkState.CLOSED

    async def start(self):
        """
        Start negotiating.

        aiortc never fires "negotiationneeded" by itself, so the initial
        exchange is kicked off here once the tracks are attached.
        """
        if self._negotiation_timeout is not None and self._watchdog_task is None:
            self._watchdog_task = asyncio.create_task(self._negotiation_watchdog())
        await self._on_negotiation_needed()

    async def _negotiation_watchdog(self):
        try:
            await asyncio.sleep(self._negotiation_timeout)
        except asyncio.CancelledError:
            return
        if self.state not in (LinkState.STABLE, LinkState.CLOSED):
            log_warning(
                f"Negotiation with {self.remote_id} stuck in {self.state.value} "
                f"after {self._negotiation_timeout}s"
            )
            self._watchdog_task = None
            await self.close(reason="negotiation_timeout")

    async def _on_negotiation_needed(self):
        """Initiator only: produce an offer, commit it and send it."""
        if not self.is_initiator:
            return

        async with self._lock:
            if self.state != LinkState.NEW:
                log_debug(f"Ignoring renegotiation for {self.remote_id} in {self.state.value}")
                return
            try:
                offer = await self.pc.createOffer()
                await self.pc.setLocalDescription(offer)
                if self.closed:
                    return
                self.state = LinkState.HAVE_LOCAL_OFFER
                await self._send_signal(
                    self.remote_id, description_to_dict(self.pc.localDescription)
                )
                log_info(f"Sent offer to {self.remote_id}")
            except Exception as e:
                log_error(f"Error creating offer for {self.remote_id}: {e}")

    async def _on_candidate_produced(self, candidate):
        if candidate is None or self.closed:
            return
        log_debug(f"Sending ICE candidate to {self.remote_id}")
        await self._send_signal(self.remote_id, candidate_to_dict(candidate))

    async def signal(self, data: dict):
        """
        Handle an incoming offer, answer or candidate from the remote member.

        A message arriving after close() is ignored.
        """
        if self.closed:
            log_debug(f"Ignoring signal for closed link to {self.remote_id}")
            return

        kind = signal_kind(data)
        if kind == OFFER:
            await self._apply_offer(data)
        elif kind == ANSWER:
            await self._apply_answer(data)
        elif kind == CANDIDATE:
            await self._add_candidate(data)

    async def _apply_offer(self, data: dict):
        async with self._lock:
            if self.closed:
                return
            if self.has_remote_description:
                log_warning(f"Skipping redundant offer from {self.remote_id}")
                return
            if self.state == LinkState.HAVE_LOCAL_OFFER:
                log_warning(f"Skipping offer from {self.remote_id}: own offer pending")
                return

            await self.pc.setRemoteDescription(description_from_dict(data))
            self.state = LinkState.HAVE_REMOTE_OFFER
            log_debug(f"Applied offer from {self.remote_id}")

            answer = await self.pc.createAnswer()
            await self.pc.setLocalDescription(answer)
            if self.closed:
                return
            self.state = LinkState.STABLE
            await self._send_signal(
                self.remote_id, description_to_dict(self.pc.localDescription)
            )
            log_info(f"Sent answer to {self.remote_id}")

    async def _apply_answer(self, data: dict):
        async with self._lock:
            if self.closed:
                return
            if self.has_remote_description:
                log_warning(f"Skipping redundant answer from {self.remote_id}")
                return

            await self.pc.setRemoteDescription(description_from_dict(data))
            if self.closed:
                return
            self.state = LinkState.STABLE
            log_info(f"Applied answer from {self.remote_id}, negotiation complete")

    async def _add_candidate(self, data: dict):
        try:
            candidate = candidate_from_dict(data)
            if candidate is None:
                log_debug(f"End of ICE candidates from {self.remote_id}")
                return
            await self.pc.addIceCandidate(candidate)
            log_debug(f"Added ICE candidate from {self.remote_id}")
        except Exception as e:
            log_error(f"Error adding ICE candidate from {self.remote_id}: {e}")

    async def close(self, reason: str = "requested"):
        """Tear down the peer connection. Calling it again does nothing."""
        if self.closed:
            return

        self.state = LinkState.CLOSED
        self.close_reason = reason

        if self._watchdog_task is not None:
            self._watchdog_task.cancel()
            self._watchdog_task = None

        try:
            await self.pc.close()
            log_info(f"Closed peer link to {self.remote_id} (reason: {reason})")
        except Exception as e:
            log_error(f"Error closing peer connection to {self.remote_id}: {e}")

        if self._on_closed:
            try:
                self._on_closed(self, reason)
            except Exception as e:
                log_error(f"Error in link closed callback: {e}")
