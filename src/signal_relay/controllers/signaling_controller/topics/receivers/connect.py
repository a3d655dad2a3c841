from signal_relay.tools.logger import *
from . import topic

NAME = "connect"


@topic(NAME)
def init(server, registry):
    """
    Handle the 'connect' topic to log new connections.
    """

    @server.on(NAME)
    async def callback(sid, environ, auth=None):
        log_info(f"User connected: {sid}")
