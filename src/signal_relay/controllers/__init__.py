from .signaling_controller import create_app
from .webrtc_controller import (
    init as init_webrtc_controller,
    get_client as get_webrtc_client,
    RoomCoordinator,
    NEGOTIATION_TIMEOUT_SECONDS,
)
from signal_relay.tools.logger import *
from aiohttp import web
import asyncio
import signal

MUTE_SIGNAL = signal.SIGUSR1


async def main_signaling_task(host, port, registry=None, cors_allowed_origins="*", debug=False):
    """
    Run the signaling relay until cancelled.
    """
    app, _, registry = create_app(registry, cors_allowed_origins, debug)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    log_info(f"Server listening on port {port}")
    log_info(f"Signaling endpoint at http://{host}:{port}/socket.io/")

    try:
        await asyncio.Event().wait()
    finally:
        log_info(f"Shutting down with {registry.room_count()} active rooms")
        await runner.cleanup()


def install_mute_toggle(local_media, signum=MUTE_SIGNAL):
    """
    Toggle the microphone whenever the process receives signum.

    Returns:
        Callable removing the handler again
    """
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signum, local_media.toggle_mute)
    log_info(f"Send {signal.Signals(signum).name} to process to toggle mute")
    return lambda: loop.remove_signal_handler(signum)


async def main_call_task(server_url, room_id, display_name, local_media, configuration=None, negotiation_timeout=NEGOTIATION_TIMEOUT_SECONDS):
    """
    Join a room through the relay and stay in the call until disconnected.

    Local media is acquired before connecting; MediaAccessError propagates.
    If the relay cannot be reached the media is released and the
    connection error propagates.
    """
    local_media.acquire()

    client = get_webrtc_client()
    coordinator = RoomCoordinator(
        client,
        local_media,
        configuration=configuration,
        negotiation_timeout=negotiation_timeout,
    )
    init_webrtc_controller(client, coordinator)

    try:
        await client.connect(server_url)
    except Exception:
        local_media.release()
        raise
    log_info(f"Connected to signaling server at {server_url}")

    remove_mute_toggle = install_mute_toggle(local_media)
    try:
        await coordinator.join(room_id, display_name)
        await client.wait()
    finally:
        remove_mute_toggle()
        await coordinator.leave_call()
