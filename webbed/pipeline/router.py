"""Hand every request to the file resolver and record the access log entry."""

import logging
import time

from webbed.bootstrap.config import ServerSettings
from webbed.domain.correlation_id import CorrelationLoggerAdapter
from webbed.domain.http_types import HttpRequest, HttpResponse
from webbed.domain.response_builders import to_http_response
from webbed.handlers.file_handler import resolve

ROUTER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("webbed.pipeline.router"), {}
)


def route_request(request: HttpRequest, settings: ServerSettings) -> HttpResponse:
    """Resolve the request path, regardless of method, into a wire response."""
    started_ns = time.monotonic_ns()
    descriptor = resolve(settings.base_directory, request.path)
    response = to_http_response(descriptor, request)
    ROUTER_LOGGER.info(
        "Request served",
        extra={
            "event": "request_served",
            "method": request.method,
            "path": request.path,
            "status_code": int(descriptor.status),
            "bytes_in": len(request.body),
            "bytes_out": len(descriptor.body),
            "duration_ms": round((time.monotonic_ns() - started_ns) / 1_000_000, 3),
        },
    )
    return response
