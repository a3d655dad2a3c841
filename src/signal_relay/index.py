## Signaling relay entry point
from signal_relay.controllers import main_signaling_task
from signal_relay.tools.logger import *
import argparse
import asyncio
import os

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="WebRTC signaling relay")
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", DEFAULT_HOST),
        help="Interface to listen on",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=os.getenv("PORT", str(DEFAULT_PORT)),
        help="Port to listen on (defaults to $PORT or 3000)",
    )
    parser.add_argument(
        "--cors-origin",
        action="append",
        dest="cors_origins",
        help="Allowed CORS origin, repeatable (defaults to any origin)",
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

    try:
        asyncio.run(
            main_signaling_task(
                args.host,
                args.port,
                cors_allowed_origins=args.cors_origins or "*",
                debug=args.log_level == "DEBUG",
            )
        )
    except KeyboardInterrupt:
        log_warning("Keyboard interrupt received. Shutting down.")


if __name__ == "__main__":
    main()
