"""Bounded randomized retry for rate-limited warehouse calls."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

from depot.errors import BackendError, PermanentBackendError, TransientBackendError
from depot.instrumentation import Instrumentation, LoggingInstrumentation
from depot.models.config import RetrySettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_MARKER = "Exceeded rate limits"


def is_rate_limited(exc: BaseException) -> bool:
    return RATE_LIMIT_MARKER in str(exc)


class RateLimitRetry:
    """Runs a callable, retrying it while the backend reports rate limiting.

    Each failed attempt with a rate-limit message sleeps a random duration
    in ``[0, max_sleep_ms)`` before trying again, up to
    ``max_attempts`` attempts in total.  Other ``BackendError``s are not
    retried.

    Parameters
    ----------
    settings:
        Attempt budget and sleep cap.
    sleep:
        Sleep primitive taking seconds; injectable so tests run without delay.
        An ``InterruptedError`` raised while sleeping is reported as a
        non-fatal error and the next attempt proceeds.
    rng:
        Source of randomness for the jitter.
    """

    def __init__(
        self,
        settings: RetrySettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        instrumentation: Instrumentation | None = None,
    ) -> None:
        self.settings = settings or RetrySettings()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._instrumentation = instrumentation or LoggingInstrumentation()

    def backoff_seconds(self) -> float:
        if self.settings.max_sleep_ms <= 0:
            return 0.0
        return self._rng.randrange(self.settings.max_sleep_ms) / 1000.0

    def call(self, fn: Callable[[], T], description: str = "call") -> T:
        """Invoke *fn* under the retry policy and return its result.

        Raises
        ------
        TransientBackendError
            When every attempt was rate limited; the last backend error is
            chained as ``__cause__``.
        PermanentBackendError
            On the first backend error that is not a rate-limit signal.
        """
        attempts = self.settings.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return fn()
            except BackendError as exc:
                logger.warning("%s failed (attempt %d/%d): %s", description, attempt, attempts, exc)
                if not is_rate_limited(exc):
                    raise PermanentBackendError(f"{description} failed: {exc}") from exc
                if attempt == attempts:
                    raise TransientBackendError(
                        f"{description} still rate limited after {attempts} attempts: {exc}",
                        attempts=attempts,
                    ) from exc
                self._pause()
        raise AssertionError("unreachable")  # pragma: no cover

    def _pause(self) -> None:
        seconds = self.backoff_seconds()
        logger.info("Waiting for %d milliseconds", int(seconds * 1000))
        try:
            self._sleep(seconds)
        except InterruptedError as exc:
            self._instrumentation.capture_non_fatal_error(exc, "Sleep interrupted")
