"""Metrics and error reporting sink.

depot does not own a metrics backend.  Components report through the
``Instrumentation`` protocol; ``LoggingInstrumentation`` is the default
and ``RecordingInstrumentation`` keeps everything in memory for tests and
for callers that export metrics themselves.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

WAREHOUSE_OPERATION_TOTAL = "warehouse_operation_total"
WAREHOUSE_OPERATION_LATENCY = "warehouse_operation_latency_seconds"


@runtime_checkable
class Instrumentation(Protocol):
    def increment_counter(self, metric: str, tags: dict[str, str]) -> None:
        ...

    def capture_duration(
        self, metric: str, seconds: float, tags: dict[str, str]
    ) -> None:
        ...

    def capture_non_fatal_error(self, exc: BaseException, message: str) -> None:
        ...


class LoggingInstrumentation:
    """Writes every observation to the log."""

    def increment_counter(self, metric: str, tags: dict[str, str]) -> None:
        logger.debug("counter %s %s", metric, tags)

    def capture_duration(
        self, metric: str, seconds: float, tags: dict[str, str]
    ) -> None:
        logger.debug("duration %s %.6fs %s", metric, seconds, tags)

    def capture_non_fatal_error(self, exc: BaseException, message: str) -> None:
        logger.error("%s: %s", message, exc)


class RecordingInstrumentation:
    """Keeps counters, durations and non-fatal errors in memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.counters: list[tuple[str, dict[str, str]]] = []
        self.durations: list[tuple[str, float, dict[str, str]]] = []
        self.errors: list[tuple[BaseException, str]] = []

    def increment_counter(self, metric: str, tags: dict[str, str]) -> None:
        with self._lock:
            self.counters.append((metric, dict(tags)))

    def capture_duration(
        self, metric: str, seconds: float, tags: dict[str, str]
    ) -> None:
        with self._lock:
            self.durations.append((metric, seconds, dict(tags)))

    def capture_non_fatal_error(self, exc: BaseException, message: str) -> None:
        logger.error("%s: %s", message, exc)
        with self._lock:
            self.errors.append((exc, message))

    def count(self, metric: str, **tags: str) -> int:
        """Number of counter increments of *metric* whose tags include *tags*."""
        return sum(
            1
            for name, recorded in self.counters
            if name == metric and all(recorded.get(k) == v for k, v in tags.items())
        )
