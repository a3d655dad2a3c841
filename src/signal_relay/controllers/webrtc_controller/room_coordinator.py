"""
Room Coordinator

Keeps exactly one PeerLink per remote member, reacting to the events the
relay pushes (existing members, peer joined, relayed signals, peer left).
"""

from aiortc import RTCPeerConnection
from aiortc.contrib.media import MediaBlackhole
from signal_relay.tools.logger import log_info, log_debug, log_error, log_warning
from signal_relay.tools.utils import should_initiate
from signal_relay.tools.topics import JOIN, RELAY
from typing import Callable, Dict, List, Optional, Tuple
import asyncio

from . import NEGOTIATION_TIMEOUT_SECONDS
from .peer_link import PeerLink


class RoomCoordinator:
    """
    Creates and discards peer links for one local participant.

    Args:
        client: Connected Socket.IO client
        local_media: LocalMedia providing the outbound tracks
        configuration: RTCConfiguration handed to every peer connection
        pc_factory: Peer connection class or factory
        sink_factory: Factory for the per-peer remote audio sink
        negotiation_timeout: Passed to each PeerLink
    """

    def __init__(
        self,
        client,
        local_media,
        configuration=None,
        pc_factory: Callable = RTCPeerConnection,
        sink_factory: Callable = MediaBlackhole,
        negotiation_timeout: Optional[float] = NEGOTIATION_TIMEOUT_SECONDS,
    ):
        self._client = client
        self._local_media = local_media
        self._configuration = configuration
        self._pc_factory = pc_factory
        self._sink_factory = sink_factory
        self._negotiation_timeout = negotiation_timeout
        self._tasks = set()

        self.room_id: Optional[str] = None
        self.links: Dict[str, PeerLink] = {}
        self.display_names: Dict[str, str] = {}
        self.sinks: Dict[str, MediaBlackhole] = {}

    @property
    def pending(self) -> bool:
        return bool(self._tasks)

    @property
    def local_id(self) -> str:
        return self._client.get_sid()

    async def join(self, room_id: str, display_name: str):
        """
        Acquire local media and ask the relay to join a room.

        Links to the members of a previous room are closed first, since
        the relay moves this client out of that room.

        Raises:
            MediaAccessError: if local audio is unavailable; nothing is sent
        """
        self._local_media.acquire()
        if self.room_id is not None and self.room_id != room_id:
            log_info(f"Leaving room {self.room_id} for {room_id}")
            for peer_id in list(self.links):
                await self.remove_peer(peer_id, reason="room_changed")
        self.room_id = room_id
        self.display_names[self.local_id] = display_name
        await self._client.emit(JOIN, (room_id, display_name))
        log_info(f"Joining room {room_id} as {display_name}")

    def ensure_link(self, peer_id: str, is_initiator: bool) -> Tuple[PeerLink, bool]:
        """
        Return the link for peer_id, creating it if there is none.

        An existing link is never replaced.

        Returns:
            tuple: (link, created)
        """
        link = self.links.get(peer_id)
        if link is not None:
            return link, False

        link = PeerLink(
            peer_id,
            is_initiator,
            self._send_signal,
            local_tracks=self._local_media.outbound_tracks(),
            on_track=self._on_remote_track,
            on_closed=self._on_link_closed,
            configuration=self._configuration,
            pc_factory=self._pc_factory,
            negotiation_timeout=self._negotiation_timeout,
        )
        self.links[peer_id] = link
        return link, True

    async def _connect_to(self, peer_id: str):
        if peer_id == self.local_id:
            log_warning("Relay listed this client as its own peer, ignoring")
            return
        link, created = self.ensure_link(peer_id, should_initiate(self.local_id, peer_id))
        if created:
            await link.start()
        else:
            log_debug(f"Peer link to {peer_id} already exists. Skipping creation.")

    async def _send_signal(self, to: str, data: dict):
        await self._client.emit(RELAY, {"to": to, "from": self.local_id, "data": data})

    async def handle_existing_members(self, member_ids: List[str]):
        log_info(f"Existing users in room: {member_ids}")
        for peer_id in member_ids:
            await self._connect_to(peer_id)

    async def handle_peer_joined(self, peer_id: str, display_name: str, existing_ids: List[str]):
        log_info(f"User {display_name} ({peer_id}) joined")
        self.display_names[peer_id] = display_name
        await self._connect_to(peer_id)

    async def handle_relay(self, from_id: str, data: dict):
        link = self.links.get(from_id)
        if link is None:
            log_info(f"Creating peer link for {from_id} due to incoming signal")
            link, created = self.ensure_link(from_id, False)
            if created:
                await link.start()

        try:
            await link.signal(data)
        except Exception as e:
            log_error(f"Error signaling peer {from_id}: {e}")

    async def handle_peer_left(self, peer_id: str):
        log_info(f"User {peer_id} left the room")
        await self.remove_peer(peer_id, reason="peer_left")

    async def remove_peer(self, peer_id: str, reason: str = "requested"):
        """Close and forget the link, display name and remote audio for peer_id."""
        link = self.links.pop(peer_id, None)
        self.display_names.pop(peer_id, None)
        sink = self.sinks.pop(peer_id, None)

        if link is not None:
            await link.close(reason=reason)
        if sink is not None:
            await sink.stop()

    async def leave_call(self):
        """Close every link, release local media and disconnect from the relay."""
        for peer_id in list(self.links):
            await self.remove_peer(peer_id, reason="leave_call")
        self.display_names.clear()
        self._local_media.release()
        await self._client.disconnect()
        self.room_id = None
        log_info("You have left the call.")

    def _on_remote_track(self, peer_id: str, track):
        sink = self.sinks.get(peer_id)
        if sink is None:
            sink = self._sink_factory()
            self.sinks[peer_id] = sink
        sink.addTrack(track)
        self._spawn(sink.start())
        name = self.display_names.get(peer_id, peer_id)
        log_info(f"Remote stream received from {name}")

    def _on_link_closed(self, link: PeerLink, reason: str):
        # Links closed by the coordinator are already gone from the table
        if self.links.get(link.remote_id) is link:
            log_info(f"Discarding peer link to {link.remote_id} ({reason})")
            self._spawn(self.remove_peer(link.remote_id, reason=reason))

    async def wait_pending(self):
        """Wait for the sink starts and removals spawned by link callbacks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _spawn(self, coro):
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
