"""
Signaling Controller

Hosts the Socket.IO relay: room joins, targeted signal relay and leave
announcements. Room membership lives in a RoomRegistry owned by the
caller, so every server instance has its own table.
"""

from .topics import initialize_all
from signal_relay.tools.logger import *
from signal_relay.tools.room_registry import RoomRegistry
from aiohttp import web
import socketio
import logging


class KeepaliveFilter(logging.Filter):
    """Filter to suppress ping/pong keepalive log messages from socketio/engineio."""

    def filter(self, record):
        message = record.getMessage().lower()
        if "packet ping" in message or "packet pong" in message:
            return False
        if '"ping"' in message or '"pong"' in message:
            return False
        return True


def _configure_socketio_logging():
    """Configure socketio and engineio loggers to filter keepalive messages."""
    keepalive_filter = KeepaliveFilter()

    for logger_name in ["socketio", "engineio", "socketio.server", "engineio.server"]:
        logger = logging.getLogger(logger_name)
        logger.addFilter(keepalive_filter)


def init(server, registry):
    """
    Initialize the Signaling controller by registering necessary topics.
    """
    log_info("Initializing Signaling Controller...")

    initialize_all(server, registry)

    log_info("Signaling Controller initialized successfully.")


def get_server(cors_allowed_origins="*", debug=False):
    _configure_socketio_logging()

    return socketio.AsyncServer(
        async_mode="aiohttp",
        cors_allowed_origins=cors_allowed_origins,
        logger=debug,
        engineio_logger=debug,
    )


def create_app(registry=None, cors_allowed_origins="*", debug=False):
    """
    Build an aiohttp application with the relay attached.

    Returns:
        tuple: (web.Application, socketio.AsyncServer, RoomRegistry)
    """
    if registry is None:
        registry = RoomRegistry()

    server = get_server(cors_allowed_origins, debug)
    init(server, registry)

    app = web.Application()
    server.attach(app)
    return app, server, registry
