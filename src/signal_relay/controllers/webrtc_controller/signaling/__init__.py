"""
WebRTC Signaling Module

Routes relay events (existing members, peer joined, relayed signals,
peer left) from the Socket.IO client to the RoomCoordinator.
"""

from .members_handler import init as init_members_handler
from .relay_handler import init as init_relay_handler
from .peer_left_handler import init as init_peer_left_handler


def initialize_signaling(client, coordinator):
    """
    Initialize all signaling handlers.

    Args:
        client: Socket.IO client
        coordinator: RoomCoordinator instance
    """
    init_members_handler(client, coordinator)
    init_relay_handler(client, coordinator)
    init_peer_left_handler(client, coordinator)
