from signal_relay.tools.logger import *
from signal_relay.use_cases.room_membership import leave_rooms
from . import topic

NAME = "disconnect"


@topic(NAME)
def init(server, registry):
    """
    Handle the 'disconnect' topic: a lost connection is an implicit leave.
    """

    @server.on(NAME)
    async def callback(sid, reason=None):
        log_info(f"User disconnected: {sid} ({reason})")
        await leave_rooms(server, registry, sid)
