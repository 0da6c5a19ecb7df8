"""Pure HTTP response builders."""

from http import HTTPStatus

from webbed.domain.http_types import (
    HttpRequest,
    HttpResponse,
    ResponseDescriptor,
    should_close,
)

PLAIN_TEXT = "text/plain"
NOT_FOUND_BODY = b"Not Found"
INTERNAL_ERROR_BODY = b"Internal Server Error"
BAD_REQUEST_BODY = b"Bad Request"


def status_line(status: int) -> str:
    """Render the HTTP/1.1 status line for a numeric status code."""
    return f"HTTP/1.1 {status} {HTTPStatus(status).phrase}"


def ok_descriptor(body: bytes, content_type: str) -> ResponseDescriptor:
    """Return a 200 descriptor carrying the given payload."""
    return ResponseDescriptor(HTTPStatus.OK, content_type, body)


def not_found_descriptor() -> ResponseDescriptor:
    """Return the plain-text 404 descriptor."""
    return ResponseDescriptor(HTTPStatus.NOT_FOUND, PLAIN_TEXT, NOT_FOUND_BODY)


def internal_error_descriptor() -> ResponseDescriptor:
    """Return the plain-text 500 descriptor; details stay in the logs."""
    return ResponseDescriptor(
        HTTPStatus.INTERNAL_SERVER_ERROR, PLAIN_TEXT, INTERNAL_ERROR_BODY
    )


def to_http_response(
    descriptor: ResponseDescriptor, request: HttpRequest
) -> HttpResponse:
    """Wrap a descriptor for the wire, honoring the caller's connection preference."""
    headers = {}
    if descriptor.content_type is not None:
        headers["Content-Type"] = descriptor.content_type
    return HttpResponse(
        status_line(descriptor.status),
        headers,
        descriptor.body,
        should_close(request.headers, request.version),
        omit_body=request.method == "HEAD",
    )


def bad_request_response() -> HttpResponse:
    """Produce a 400 response that always closes the connection."""
    return HttpResponse(
        status_line(HTTPStatus.BAD_REQUEST),
        {"Content-Type": PLAIN_TEXT},
        BAD_REQUEST_BODY,
        True,
    )
