"""
WebRTC Peer Left Handler

Tears down the peer link of a member that left the room.
"""

from signal_relay.tools.logger import log_info, log_warning
from signal_relay.tools.topics import PEER_LEFT


def init(client, coordinator):
    """
    Initialize the peer-left handler.

    Args:
        client: Socket.IO client
        coordinator: RoomCoordinator instance
    """
    log_info(f"Registering topic: {PEER_LEFT}")

    @client.on(PEER_LEFT)
    async def handle_peer_left(member_id):
        if not isinstance(member_id, str):
            log_warning(f"Ignoring {PEER_LEFT} with invalid member id: {member_id!r}")
            return

        await coordinator.handle_peer_left(member_id)
