"""
WebRTC Controller

Client side of the relay: one PeerLink per remote member, created and
discarded by the RoomCoordinator in response to relay events.
Signaling runs over the Socket.IO connection to the relay.
"""

from aiortc import RTCConfiguration, RTCIceServer
from signal_relay.tools.logger import log_info
from enum import Enum


class LinkState(Enum):
    """Peer link negotiation states."""
    NEW = "new"                              # Connection created, nothing exchanged
    HAVE_LOCAL_OFFER = "have-local-offer"    # Initiator sent its offer
    HAVE_REMOTE_OFFER = "have-remote-offer"  # Responder applied the remote offer
    STABLE = "stable"                        # Offer and answer both applied
    CLOSED = "closed"                        # Link torn down


ICE_SERVERS = ["stun:stun.l.google.com:19302"]

# Seconds a link may take to reach STABLE before it is closed
NEGOTIATION_TIMEOUT_SECONDS = 30


def build_configuration(stun_urls=None) -> RTCConfiguration:
    """Build the peer connection configuration from a list of STUN URLs."""
    if stun_urls is None:
        stun_urls = ICE_SERVERS
    return RTCConfiguration(iceServers=[RTCIceServer(urls=url) for url in stun_urls])


from .peer_link import PeerLink
from .room_coordinator import RoomCoordinator


def init(client, coordinator):
    """
    Initialize the WebRTC controller by registering signaling handlers.

    Args:
        client: Socket.IO client for signaling
        coordinator: RoomCoordinator owning the peer links
    """
    from .signaling import initialize_signaling

    log_info("Initializing WebRTC Controller...")
    initialize_signaling(client, coordinator)
    log_info("WebRTC Controller initialized successfully.")


def get_client():
    """
    Create the Socket.IO client used for signaling.

    Reconnection is disabled: the relay gives every connection a new member
    ID, so a dropped connection means leaving the call.
    """
    import socketio
    from signal_relay.tools.logger import log_error, log_warning

    client = socketio.AsyncClient(reconnection=False)

    @client.event
    async def connect():
        log_info(f"Connected to signaling server with ID: {client.get_sid()}")

    @client.event
    async def connect_error(data):
        log_error(f"Socket.IO connection error: {data}")

    @client.event
    async def disconnect(reason=None):
        log_warning(f"Disconnected from signaling server ({reason})")

    return client
