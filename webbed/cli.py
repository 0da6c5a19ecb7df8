"""Command-line entry point for the webbed static file server."""

import logging
import signal
import sys
from typing import Optional

from webbed.bootstrap.config import build_settings, parse_cli_args
from webbed.bootstrap.logging_setup import configure_logging
from webbed.domain.correlation_id import CorrelationLoggerAdapter
from webbed.lifecycle.state import ServerLifecycle
from webbed.transport.accept_loop import run_server

SERVER_LOGGER = CorrelationLoggerAdapter(logging.getLogger("webbed.server"), {})


def main(argv: Optional[list[str]] = None) -> None:
    """Parse arguments, install signal handlers and serve until told to stop."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level, args.log_destination)
    settings = build_settings(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal", extra={"event": "signal", "signal": signum}
        )
        lifecycle.begin_draining()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting static file server",
        extra={
            "event": "server_starting",
            "host": settings.host,
            "port": settings.port,
            "directory": settings.base_directory.as_posix(),
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "socket_timeout": settings.socket_timeout,
            "shutdown_grace_seconds": settings.shutdown_grace_seconds,
        },
    )
    run_server(settings, lifecycle)
