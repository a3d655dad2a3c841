from signal_relay.tools.logger import *
from signal_relay.tools.topics import LEAVE
from signal_relay.use_cases.room_membership import leave_rooms
from . import topic

NAME = LEAVE


@topic(NAME)
def init(server, registry):
    """
    Handle the 'leave' topic: leave the current room but keep the connection.
    """

    @server.on(NAME)
    async def callback(sid, *args):
        rooms = await leave_rooms(server, registry, sid)
        if not rooms:
            log_debug(f"User {sid} asked to leave but is not in a room")
        return {"action": NAME, "status": "success", "rooms": rooms}
