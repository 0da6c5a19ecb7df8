"""Worker thread logic for handling individual client connections."""

import logging
import socket
import threading
from dataclasses import dataclass
from typing import Optional

from webbed.domain.correlation_id import CorrelationLoggerAdapter, request_scope
from webbed.domain.http_types import HttpRequest
from webbed.domain.response_builders import bad_request_response
from webbed.lifecycle.state import ServerLifecycle
from webbed.pipeline.io import receive_request, send_response
from webbed.pipeline.router import route_request
from webbed.transport.context import WorkerContext

WORKER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("webbed.transport.worker"), {}
)


def _read_request(
    client_socket: socket.socket,
    buffer: bytes,
    client_addr_str: str,
) -> tuple[Optional[HttpRequest], bytes]:
    """Read the next request, answering unparseable input with 400."""

    try:
        request, buffer = receive_request(client_socket, buffer)
    except (ValueError, UnicodeDecodeError):
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={"event": "malformed_request", "client": client_addr_str},
        )
        send_response(client_socket, bad_request_response())
        return None, b""

    if request is None and WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        WORKER_LOGGER.debug(
            "Client disconnected",
            extra={"event": "client_disconnected", "client": client_addr_str},
        )
    return request, buffer


@dataclass
class _WorkerResources:
    thread: threading.Thread
    client_socket: socket.socket
    client_addr_str: str


def _cleanup_worker(
    lifecycle: Optional[ServerLifecycle],
    resources: _WorkerResources,
) -> None:
    if lifecycle is not None:
        lifecycle.cleanup_worker(resources.thread)

    try:
        resources.client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    resources.client_socket.close()

    WORKER_LOGGER.debug(
        "Socket closed",
        extra={"event": "socket_closed", "client": resources.client_addr_str},
    )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve requests on a client socket until the connection is closed."""
    buffer = b""
    lifecycle = context.lifecycle
    current_thread = threading.current_thread()
    client_socket.settimeout(context.settings.socket_timeout)
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    resources = _WorkerResources(current_thread, client_socket, client_addr_str)

    try:
        while lifecycle is None or not lifecycle.is_draining():
            with request_scope():
                request, buffer = _read_request(client_socket, buffer, client_addr_str)
                if request is None:
                    break
                response = route_request(request, context.settings)
                send_response(client_socket, response)

            if response.close_connection:
                break
    except (ConnectionError, TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        _cleanup_worker(lifecycle, resources)
