from signal_relay.tools.logger import *
from signal_relay.tools.topics import RELAY


async def relay_signal(server, registry, sid, to, from_id, data):
    """
    Forward a signaling payload to a single connection.

    The payload is delivered only when the sender is who it claims to be
    and the target shares a room with it. Anything else is dropped
    without telling the sender.

    Returns:
        bool: True if the payload was forwarded
    """
    if from_id != sid:
        log_warning(f"Dropping relay from {sid} claiming to be {from_id}")
        return False

    if to == sid:
        log_debug(f"Dropping relay from {sid} addressed to itself")
        return False

    if not registry.share_room(sid, to):
        log_debug(f"Dropping relay from {sid}: {to} is not a roommate")
        return False

    await server.emit(RELAY, {"from": from_id, "data": data}, to=to)
    log_debug(f"Relayed signal {sid} -> {to}")
    return True
