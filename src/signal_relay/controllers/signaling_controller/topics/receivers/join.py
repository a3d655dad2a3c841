from signal_relay.tools.logger import *
from signal_relay.tools.topics import JOIN
from signal_relay.tools.contract_validation import NonEmptyStringType
from signal_relay.use_cases.room_membership import join_room
from . import topic, validate_message

NAME = JOIN

MESSAGE_TYPE = {
    "room_id": NonEmptyStringType,
    "display_name": NonEmptyStringType,
}


@topic(NAME)
def init(server, registry):
    """
    Handle the 'join' topic: join(roomId, displayName).
    """

    @server.on(NAME)
    @validate_message(MESSAGE_TYPE, NAME)
    async def callback(sid, message):
        existing = await join_room(
            server, registry, sid, message["room_id"], message["display_name"]
        )
        return {"action": NAME, "status": "success", "existing_members": existing}
