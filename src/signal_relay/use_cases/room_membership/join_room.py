from signal_relay.tools.logger import *
from signal_relay.tools.topics import EXISTING_MEMBERS, PEER_JOINED
from .leave_room import leave_rooms


async def join_room(server, registry, sid, room_id, display_name):
    """
    Register a connection as a member of a room.

    Flow:
    1. Leave any other room the connection is in
    2. Add the connection to the room (created on first join)
    3. Tell the other members about the newcomer
    4. Tell the newcomer who was already there

    Returns:
        list: IDs of the members that were already in the room
    """
    current_room = registry.room_of(sid)
    if current_room is not None and current_room != room_id:
        log_info(f"User {sid} switching from room {current_room} to {room_id}")
        await leave_rooms(server, registry, sid)

    created = not registry.has_room(room_id)
    existing = registry.add_member(room_id, sid, display_name)
    await server.enter_room(sid, room_id)

    if created:
        log_info(f"Room {room_id} created")
    log_info(f"User {display_name} ({sid}) joined room: {room_id}")

    await server.emit(
        PEER_JOINED, (sid, display_name, existing), room=room_id, skip_sid=sid
    )
    await server.emit(EXISTING_MEMBERS, existing, to=sid)

    return existing
