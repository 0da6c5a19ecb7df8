"""Server lifecycle state and worker thread tracking."""

import logging
import threading
import time

from webbed.domain.correlation_id import CorrelationLoggerAdapter

LIFECYCLE_LOGGER = CorrelationLoggerAdapter(logging.getLogger("webbed.lifecycle"), {})


class ServerLifecycle:
    """Tracks connection workers and the draining flag set by shutdown signals."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._draining_event = threading.Event()
        self._workers: set[threading.Thread] = set()

    def is_draining(self) -> bool:
        """Check if the server stopped accepting new work."""
        return self._draining_event.is_set()

    def begin_draining(self) -> None:
        """Signal the accept loop and workers to wind down."""
        self._draining_event.set()
        LIFECYCLE_LOGGER.info(
            "Beginning graceful shutdown", extra={"event": "shutdown_started"}
        )

    def register_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.discard(thread)

    def active_worker_count(self) -> int:
        """Return the number of currently tracked worker threads."""
        with self._lock:
            return len(self._workers)

    def wait_for_workers(self, timeout: float) -> bool:
        """Join live workers until none remain or the timeout elapses."""
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                self._workers = {w for w in self._workers if w.is_alive()}
                active_workers = list(self._workers)
            if not active_workers:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                LIFECYCLE_LOGGER.warning(
                    "Shutdown timeout exceeded",
                    extra={
                        "event": "shutdown_timeout",
                        "remaining_workers": len(active_workers),
                    },
                )
                return False
            for worker in active_workers:
                worker.join(timeout=min(0.1, remaining))
                if time.monotonic() >= deadline:
                    break
