## Call client entry point: join a room and exchange audio with its members
from signal_relay.controllers import main_call_task
from signal_relay.controllers.webrtc_controller import (
    ICE_SERVERS,
    NEGOTIATION_TIMEOUT_SECONDS,
    build_configuration,
)
from signal_relay.controllers.webrtc_controller.media import LocalMedia, MediaAccessError
from signal_relay.tools.logger import *
from signal_relay.tools.utils import generate_room_id
import argparse
import asyncio
import os
import socketio
import sys

DEFAULT_SERVER_URL = "http://localhost:3000"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Join a WebRTC audio room. Send SIGUSR1 to toggle the microphone mute.")
    parser.add_argument(
        "--server",
        default=os.getenv("SIGNAL_SERVER_URL", DEFAULT_SERVER_URL),
        help="Signaling relay URL",
    )
    parser.add_argument("--room", help="Room ID (a new one is generated when omitted)")
    parser.add_argument("--name", required=True, help="Display name shown to other members")
    parser.add_argument(
        "--audio-source",
        help="FFmpeg audio input, e.g. 'default' with --audio-format pulse, or a file",
    )
    parser.add_argument("--audio-format", help="FFmpeg input format for --audio-source")
    parser.add_argument(
        "--stun",
        action="append",
        help=f"STUN server URL, repeatable (default {ICE_SERVERS[0]})",
    )
    parser.add_argument(
        "--negotiation-timeout",
        type=float,
        default=NEGOTIATION_TIMEOUT_SECONDS,
        help="Seconds a peer may take to finish negotiating",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Set the logging level (use -l or --log-level)",
    )
    parser.add_argument(
        "--log-dir",
        default=os.getenv("SIGNAL_RELAY_LOG_DIR"),
        help="Also write log files to this directory",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    set_log_level(args.log_level)
    if args.log_dir:
        enable_file_logging(args.log_dir)

    room_id = args.room or generate_room_id()
    if not args.room:
        log_info(f"A unique room ID is generated: {room_id}")

    local_media = LocalMedia(args.audio_source, format=args.audio_format)

    try:
        asyncio.run(
            main_call_task(
                args.server,
                room_id,
                args.name,
                local_media,
                configuration=build_configuration(args.stun),
                negotiation_timeout=args.negotiation_timeout,
            )
        )
    except MediaAccessError as e:
        log_critical(f"Error accessing microphone: {e}")
        sys.exit(1)
    except socketio.exceptions.ConnectionError as e:
        log_error(f"Could not connect to signaling server {args.server}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        log_warning("Keyboard interrupt received. Leaving the call.")


if __name__ == "__main__":
    main()
