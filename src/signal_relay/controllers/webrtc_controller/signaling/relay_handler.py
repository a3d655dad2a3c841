"""
WebRTC Relay Handler

Hands offers, answers and ICE candidates relayed by the server to the
peer link for the sender.
"""

from signal_relay.tools.logger import log_info, log_debug, log_warning
from signal_relay.tools.topics import RELAY
from signal_relay.tools.contract_validation import (
    StringType,
    DictType,
    validate_contract_with_error_response,
)


MESSAGE_CONTRACT = {
    "from": StringType,
    "data": DictType,
}


def init(client, coordinator):
    """
    Initialize the relay handler.

    Args:
        client: Socket.IO client
        coordinator: RoomCoordinator instance
    """
    log_info(f"Registering topic: {RELAY}")

    @client.on(RELAY)
    async def handle_relay(message):
        is_valid, error_response = validate_contract_with_error_response(
            MESSAGE_CONTRACT, message
        )
        if not is_valid:
            log_warning(f"Ignoring {RELAY}: {error_response['error']}")
            return

        log_debug(f"Received signal from {message['from']}")
        await coordinator.handle_relay(message["from"], message["data"])
