from signal_relay.tools.logger import *
from signal_relay.tools.topics import RELAY
from signal_relay.tools.contract_validation import DictType, StringType
from signal_relay.tools.signal_payload import SignalPayloadError, signal_kind
from signal_relay.use_cases.room_membership import relay_signal
from . import topic, validate_message

NAME = RELAY

MESSAGE_TYPE = {
    "to": StringType,
    "from": StringType,
    "data": DictType,
}


@topic(NAME)
def init(server, registry):
    """
    Handle the 'relay' topic: forward {from, data} to the 'to' connection.
    """

    @server.on(NAME)
    @validate_message(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        try:
            signal_kind(message["data"])
        except SignalPayloadError as e:
            log_warning(f"Rejected relay payload from {sid}: {e}")
            return {"action": NAME, "status": "error", "error": str(e)}

        await relay_signal(
            server, registry, sid, message["to"], message["from"], message["data"]
        )
