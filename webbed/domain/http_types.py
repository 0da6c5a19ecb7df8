"""Request, response and resolution value types shared across layers."""

from dataclasses import dataclass
from typing import NamedTuple, Optional

HTTP_1_0 = "HTTP/1.0"
HTTP_1_1 = "HTTP/1.1"


class RequestLine(NamedTuple):
    """Method, decoded path and protocol version from the first request line."""

    method: str
    path: str
    version: str


@dataclass
class HttpRequest:
    """A parsed request; the body is read so the connection stays in sync."""

    method: str
    path: str
    headers: dict[str, str]
    body: bytes
    version: str = HTTP_1_1


@dataclass(frozen=True)
class ResponseDescriptor:
    """Transport-independent outcome of resolving a request path."""

    status: int
    content_type: Optional[str]
    body: bytes


@dataclass
class HttpResponse:
    """Status line, headers and payload ready for serialization."""

    status_line: str
    headers: dict[str, str]
    body: bytes
    close_connection: bool
    omit_body: bool = False


def connection_tokens(headers: dict[str, str]) -> set[str]:
    """Return the lowercased comma-separated options of the Connection header."""
    value = headers.get("connection", "")
    return {token.strip().lower() for token in value.split(",") if token.strip()}


def should_close(headers: dict[str, str], version: str = HTTP_1_1) -> bool:
    """Apply HTTP/1.1 persistence or HTTP/1.0 close-by-default semantics."""
    tokens = connection_tokens(headers)
    if version == HTTP_1_0:
        return "keep-alive" not in tokens
    return "close" in tokens
