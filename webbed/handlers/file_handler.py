"""Static file resolution: request path to file, index document or listing."""

import logging
import mimetypes
import os
from pathlib import Path

from webbed.domain.correlation_id import CorrelationLoggerAdapter
from webbed.domain.http_types import ResponseDescriptor
from webbed.domain.response_builders import (
    PLAIN_TEXT,
    internal_error_descriptor,
    not_found_descriptor,
    ok_descriptor,
)
from webbed.domain.sandbox import ForbiddenPath, ensure_within, join_request_path

FILE_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("webbed.handlers.file"), {}
)

INDEX_DOCUMENT = "index.html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for_path(filepath: Path) -> str:
    """Guess the content type from the file name, defaulting to octet-stream."""
    mime_type, _ = mimetypes.guess_type(filepath.name)
    return mime_type or DEFAULT_CONTENT_TYPE


def directory_listing(directory: Path) -> ResponseDescriptor:
    """List the entry names of a directory, one per line, in enumeration order."""
    try:
        with os.scandir(directory) as entries:
            names = [entry.name for entry in entries]
    except FileNotFoundError:
        FILE_LOGGER.info(
            "Directory vanished before listing",
            extra={"event": "file_not_found", "path": directory.as_posix()},
        )
        return not_found_descriptor()
    except OSError as error:
        FILE_LOGGER.error(
            "Failed to read directory",
            extra={
                "event": "directory_listing_failed",
                "path": directory.as_posix(),
                "error": str(error),
                "error_type": type(error).__name__,
                "errno": error.errno,
            },
        )
        return internal_error_descriptor()

    body = "".join(f"{name}\n" for name in names).encode("utf-8", "replace")
    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "Directory listing generated",
            extra={
                "event": "directory_listed",
                "path": directory.as_posix(),
                "entries": len(names),
            },
        )
    return ok_descriptor(body, PLAIN_TEXT)


def read_file(requested: Path, canonical: Path) -> ResponseDescriptor:
    """Read a whole file; any I/O failure is reported as Not Found."""
    try:
        payload = canonical.read_bytes()
    except OSError as error:
        FILE_LOGGER.info(
            "File not found",
            extra={
                "event": "file_not_found",
                "path": canonical.as_posix(),
                "error_type": type(error).__name__,
            },
        )
        return not_found_descriptor()

    content_type = content_type_for_path(requested)
    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File read complete",
            extra={
                "event": "file_read_complete",
                "path": canonical.as_posix(),
                "bytes_out": len(payload),
            },
        )
    return ok_descriptor(payload, content_type)


def resolve(base_directory: Path, request_path: str) -> ResponseDescriptor:
    """Map a decoded request path beneath base_directory onto a response.

    Directories are answered with their index document when one exists and
    with a plain-text listing otherwise. A trailing slash after anything
    other than a directory is Not Found. Targets whose canonical location
    falls outside the base directory are reported as Not Found.
    """
    requested = join_request_path(base_directory, request_path)
    try:
        canonical = ensure_within(base_directory, requested)
        if os.path.isdir(canonical):
            if not os.path.exists(canonical / INDEX_DOCUMENT):
                return directory_listing(canonical)
            requested = requested / INDEX_DOCUMENT
            canonical = ensure_within(base_directory, canonical / INDEX_DOCUMENT)
        elif request_path.endswith("/"):
            # a trailing slash only ever names a directory
            return not_found_descriptor()
    except ForbiddenPath:
        FILE_LOGGER.warning(
            "Forbidden path access blocked",
            extra={"event": "forbidden_path", "path": request_path},
        )
        return not_found_descriptor()

    return read_file(requested, canonical)
