"""HTTP Input/Output operations."""

import logging
import socket
import urllib.parse
from typing import Optional, Tuple

from webbed.bootstrap.config import HEADER_DELIMITER, MAX_BODY_BYTES, MAX_HEADER_BYTES
from webbed.domain.correlation_id import (
    CorrelationLoggerAdapter,
    adopt_request_id,
    get_correlation_id,
)
from webbed.domain.http_types import HttpRequest, HttpResponse, RequestLine

IO_LOGGER = CorrelationLoggerAdapter(logging.getLogger("webbed.io"), {})


def parse_headers(lines: list[str]) -> dict[str, str]:
    """Convert raw header lines into a lowercase-keyed dictionary."""
    parsed = {}
    for line in lines:
        if ":" in line:
            name, value = line.split(":", 1)
            parsed[name.strip().lower()] = value.strip()
    return parsed


def parse_request_line(request_line: str) -> RequestLine:
    """Split the request line, decoding the path and dropping any query."""
    try:
        method, target, version = request_line.split(" ", 2)
    except ValueError as exc:
        raise ValueError("Invalid request line") from exc
    if not version.startswith("HTTP/"):
        raise ValueError("Invalid HTTP version")

    if target.startswith("/"):
        # origin-form; urlsplit would read a leading "//" as a network location
        raw_path = target.split("?", 1)[0].split("#", 1)[0]
    else:
        raw_path = urllib.parse.urlsplit(target).path
    path = urllib.parse.unquote(raw_path)
    if not path.startswith("/"):
        raise ValueError("Request target must be an absolute path")
    return RequestLine(method.upper(), path, version)


def determine_content_length(headers: dict[str, str]) -> int:
    """Validate and return the declared Content-Length for the request."""
    header_value = headers.get("content-length")
    if header_value is None:
        return 0
    try:
        content_length = int(header_value)
    except ValueError as exc:
        raise ValueError("Invalid Content-Length") from exc
    if content_length < 0:
        raise ValueError("Negative Content-Length")
    if content_length > MAX_BODY_BYTES:
        raise ValueError("Request body too large")
    return content_length


def receive_request(
    client_socket: socket.socket, buffer: bytes
) -> Tuple[Optional[HttpRequest], bytes]:
    """Read bytes from the socket until a complete request is available."""
    while HEADER_DELIMITER not in buffer:
        if len(buffer) > MAX_HEADER_BYTES:
            raise ValueError("Request header block too large")
        chunk = client_socket.recv(4096)
        if not chunk:
            return None, b""
        buffer += chunk

    header_block, remainder = buffer.split(HEADER_DELIMITER, 1)
    header_lines = header_block.decode("iso-8859-1").split("\r\n")
    method, path, version = parse_request_line(header_lines[0])
    headers = parse_headers(header_lines[1:])

    incoming_correlation_id = headers.get("x-request-id")
    if incoming_correlation_id and not adopt_request_id(incoming_correlation_id):
        IO_LOGGER.debug(
            "Ignoring unusable X-Request-ID header",
            extra={"event": "request_id_rejected"},
        )

    content_length = determine_content_length(headers)

    while len(remainder) < content_length:
        chunk = client_socket.recv(4096)
        if not chunk:
            return None, b""
        remainder += chunk

    body = remainder[:content_length]
    leftover = remainder[content_length:]
    IO_LOGGER.debug("Parsed request", extra={"method": method, "path": path})
    return HttpRequest(method, path, headers, body, version), leftover


def serialize_response(response: HttpResponse) -> bytes:
    """Render status line, headers and (unless omitted) body as wire bytes."""
    headers = dict(response.headers)

    correlation_id = get_correlation_id()
    if correlation_id:
        headers["X-Request-ID"] = correlation_id

    headers["Content-Length"] = str(len(response.body))
    if response.close_connection:
        headers["Connection"] = "close"
    header_lines = [response.status_line]
    header_lines.extend(f"{name}: {value}" for name, value in headers.items())
    header_block = "\r\n".join(header_lines).encode("latin-1") + HEADER_DELIMITER
    if response.omit_body:
        return header_block
    return header_block + response.body


def send_response(client_socket: socket.socket, response: HttpResponse) -> None:
    """Serialize and send the HTTP response over the socket."""
    client_socket.sendall(serialize_response(response))
    IO_LOGGER.debug(
        "Sent response",
        extra={"event": "response_sent", "bytes_out": len(response.body)},
    )
