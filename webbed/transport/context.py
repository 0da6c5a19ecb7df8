"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from webbed.bootstrap.config import ServerSettings
from webbed.lifecycle.state import ServerLifecycle


@dataclass(frozen=True)
class WorkerContext:
    """Read-only dependencies handed to every connection worker."""

    settings: ServerSettings
    lifecycle: Optional[ServerLifecycle] = None
