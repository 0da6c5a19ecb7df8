"""Main connection acceptance loop."""

import logging
import socket
import threading

from webbed.bootstrap.config import ServerSettings
from webbed.bootstrap.socket_factory import create_server_socket
from webbed.domain.correlation_id import CorrelationLoggerAdapter
from webbed.lifecycle.state import ServerLifecycle
from webbed.transport.context import WorkerContext
from webbed.transport.worker import handle_client

ACCEPT_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("webbed.transport.accept"), {}
)


def _handle_accepted_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    handler_context: WorkerContext,
) -> None:
    """Start a worker thread for a newly accepted connection.

    The thread is registered before it starts so a shutdown that begins
    right after accept still waits for it.
    """
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )

    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, handler_context),
        daemon=True,
    )
    if handler_context.lifecycle is not None:
        handler_context.lifecycle.register_worker(thread)
    thread.start()


def run_server(settings: ServerSettings, lifecycle: ServerLifecycle) -> None:
    """Create the listening socket and dispatch connections until drained."""

    server_socket = create_server_socket(settings)
    host, port = server_socket.getsockname()[:2]

    print(f"Listening on http://{host}:{port}", flush=True)
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={
            "event": "server_listening",
            "host": host,
            "port": port,
            "directory": settings.base_directory.as_posix(),
        },
    )

    handler_context = WorkerContext(settings=settings, lifecycle=lifecycle)

    try:
        while not lifecycle.is_draining():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.is_draining():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue

            _handle_accepted_client(client_socket, client_address, handler_context)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "shutdown_grace_seconds": settings.shutdown_grace_seconds,
            },
        )
        lifecycle.wait_for_workers(settings.shutdown_grace_seconds)
        ACCEPT_LOGGER.info(
            "Server shutdown complete", extra={"event": "server_stopped"}
        )
