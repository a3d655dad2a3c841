from signal_relay.tools.logger import *
from signal_relay.tools.topics import PEER_LEFT


async def leave_rooms(server, registry, sid):
    """
    Remove a connection from every room it belongs to.

    Empty rooms are discarded; otherwise the remaining members are told
    the connection left.

    Returns:
        list: IDs of the rooms the connection left
    """
    left = registry.remove_member(sid)

    for room_id, remaining in left.items():
        await server.leave_room(sid, room_id)

        if not remaining:
            log_info(f"Room {room_id} is now empty and deleted.")
            continue

        await server.emit(PEER_LEFT, sid, room=room_id, skip_sid=sid)
        log_info(
            f"User {sid} left room {room_id}. Remaining users: {len(remaining)}"
        )

    return list(left)
