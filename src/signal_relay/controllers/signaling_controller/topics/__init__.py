from .receivers.connect import init as init_connect
from .receivers.join import init as init_join
from .receivers.relay import init as init_relay
from .receivers.leave import init as init_leave
from .receivers.disconnect import init as init_disconnect


def initialize_all(server, registry):

    # Initialize all topic receivers
    init_connect(server, registry)
    init_join(server, registry)
    init_relay(server, registry)
    init_leave(server, registry)
    init_disconnect(server, registry)
