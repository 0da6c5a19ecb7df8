"""Filesystem sandbox utilities for safe path resolution."""

from pathlib import Path


class ForbiddenPath(Exception):
    """Raised when a requested path escapes the configured base directory."""


def join_request_path(base_directory: Path, request_path: str) -> Path:
    """Append every segment after the leading slash onto the base directory."""
    target = base_directory
    for segment in request_path.split("/")[1:]:
        target = target / segment
    return target


def ensure_within(base_directory: Path, target: Path) -> Path:
    """Return the canonical target, raising ForbiddenPath if it leaves the base."""
    if "\x00" in str(target):
        raise ForbiddenPath

    try:
        root = base_directory.resolve()
        canonical = target.resolve()
    except (OSError, RuntimeError) as exc:
        # RuntimeError is how older interpreters report symlink loops
        raise ForbiddenPath from exc

    if not (canonical == root or root in canonical.parents):
        raise ForbiddenPath
    return canonical
