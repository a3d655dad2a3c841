"""
WebRTC Members Handler

Handles the membership snapshot sent to a joiner and the announcement of
newcomers sent to everyone else. Both end in one peer link per member.
"""

from signal_relay.tools.logger import log_info, log_warning
from signal_relay.tools.topics import EXISTING_MEMBERS, PEER_JOINED
from signal_relay.tools.contract_validation import (
    StringType,
    ListType,
    validate_contract_with_error_response,
)


EXISTING_MEMBERS_CONTRACT = {
    "member_ids": ListType(StringType),
}

PEER_JOINED_CONTRACT = {
    "member_id": StringType,
    "display_name": StringType,
    "existing_member_ids": ListType(StringType),
}


def init(client, coordinator):
    """
    Initialize the existing-members and peer-joined handlers.

    Args:
        client: Socket.IO client
        coordinator: RoomCoordinator instance
    """
    log_info(f"Registering topics: {EXISTING_MEMBERS}, {PEER_JOINED}")

    @client.on(EXISTING_MEMBERS)
    async def handle_existing_members(member_ids):
        """Initiate towards every member that was in the room before us."""
        message = {"member_ids": member_ids}
        is_valid, error_response = validate_contract_with_error_response(
            EXISTING_MEMBERS_CONTRACT, message
        )
        if not is_valid:
            log_warning(f"Ignoring {EXISTING_MEMBERS}: {error_response['error']}")
            return

        await coordinator.handle_existing_members(member_ids)

    @client.on(PEER_JOINED)
    async def handle_peer_joined(member_id, display_name, existing_member_ids):
        """Record the newcomer's name and set up a link to it."""
        message = {
            "member_id": member_id,
            "display_name": display_name,
            "existing_member_ids": existing_member_ids,
        }
        is_valid, error_response = validate_contract_with_error_response(
            PEER_JOINED_CONTRACT, message
        )
        if not is_valid:
            log_warning(f"Ignoring {PEER_JOINED}: {error_response['error']}")
            return

        await coordinator.handle_peer_joined(member_id, display_name, existing_member_ids)
