"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


LISTEN_HOST = "127.0.0.1"
DEFAULT_PORT = 5000
DEFAULT_DIRECTORY = "."
DEFAULT_SOCKET_TIMEOUT = _env_int("WEBBED_SOCKET_TIMEOUT", 60)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("WEBBED_SHUTDOWN_GRACE_SECONDS", 30)

HEADER_DELIMITER = b"\r\n\r\n"
MAX_HEADER_BYTES = 64 * 1024
MAX_BODY_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class ServerSettings:
    """Process-wide configuration fixed at startup."""

    base_directory: Path
    port: int
    host: str = LISTEN_HOST
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS


def _port(value: str) -> int:
    """argparse type accepting TCP port numbers only."""
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port number: {value!r}") from exc
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(
        prog="webbed", description="Serve a directory over HTTP on localhost"
    )
    parser.add_argument(
        "-p",
        "--port",
        type=_port,
        default=DEFAULT_PORT,
        help="Sets the port to use",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=DEFAULT_DIRECTORY,
        help="Sets the directory to serve files from",
    )
    default_log_level = os.getenv("WEBBED_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("WEBBED_LOG_DESTINATION", "stdout")
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> ServerSettings:
    """Resolve parsed arguments into immutable server settings."""
    return ServerSettings(
        base_directory=Path.cwd() / args.directory,
        port=args.port,
    )
