"""Listening socket creation."""

import logging
import socket
import sys

from webbed.bootstrap.config import ServerSettings
from webbed.domain.correlation_id import CorrelationLoggerAdapter

SOCKET_LOGGER = CorrelationLoggerAdapter(logging.getLogger("webbed.socket"), {})


def create_server_socket(settings: ServerSettings) -> socket.socket:
    """Bind the listening socket, exiting the process when the bind fails."""
    try:
        server_socket = socket.create_server((settings.host, settings.port))
    except OSError as error:
        SOCKET_LOGGER.critical(
            "Failed to bind listening socket",
            extra={
                "event": "bind_failed",
                "host": settings.host,
                "port": settings.port,
                "error": str(error),
                "errno": error.errno,
            },
        )
        print(f"Server error: {error}", file=sys.stderr)
        sys.exit(1)
    server_socket.settimeout(0.5)
    return server_socket
