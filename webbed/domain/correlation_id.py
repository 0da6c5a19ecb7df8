"""Per-request correlation IDs carried in a context variable."""

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, MutableMapping, Optional

LOGGER_PREFIX = "webbed."
MAX_REQUEST_ID_LENGTH = 128

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


def adopt_request_id(value: str) -> bool:
    """Use a client-supplied X-Request-ID if it is short printable ASCII."""
    if not value or len(value) > MAX_REQUEST_ID_LENGTH:
        return False
    if not all("!" <= char <= "~" for char in value):
        return False
    set_correlation_id(value)
    return True


@contextmanager
def request_scope() -> Iterator[str]:
    """Bind a fresh correlation ID for the duration of one request."""
    correlation_id = generate_correlation_id()
    set_correlation_id(correlation_id)
    try:
        yield correlation_id
    finally:
        clear_correlation_id()


def component_name(logger_name: str) -> str:
    """Strip the project prefix so `webbed.handlers.file` logs as `handlers.file`."""
    if logger_name.startswith(LOGGER_PREFIX):
        return logger_name[len(LOGGER_PREFIX) :]
    return logger_name


class CorrelationLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter adding correlation_id and component to every record."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["correlation_id"] = get_correlation_id() or "-"
        extra["component"] = component_name(self.logger.name)
        kwargs["extra"] = extra
        return msg, kwargs
