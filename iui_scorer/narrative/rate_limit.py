"""
Minimum-interval rate limiter for narrative calls.

``acquire()`` is non-blocking: a call that arrives too early is refused with
``RateLimitedError``.  ``augment()`` relies on this so a throttled provider
never holds up a caller that already has its scoring result.

Batch callers that want a narrative for every record call ``wait()`` first;
it sleeps until the next ``acquire()`` will be accepted.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from iui_scorer.narrative.provider import RateLimitedError


class RateLimiter:
    """Allow at most one call per ``min_interval`` seconds.

    Attributes:
        min_interval: Seconds required between two accepted calls.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}.")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: Optional[float] = None
        self._lock = threading.Lock()

    def remaining(self) -> float:
        """Seconds until the next call would be accepted (0.0 if now)."""
        with self._lock:
            if self._last_call is None:
                return 0.0
            return max(0.0, self.min_interval - (self._clock() - self._last_call))

    def acquire(self) -> None:
        """Record a call, or raise ``RateLimitedError`` if it is too soon."""
        with self._lock:
            now = self._clock()
            if self._last_call is not None:
                elapsed = now - self._last_call
                if elapsed < self.min_interval:
                    raise RateLimitedError(
                        f"Narrative requests are limited to one every "
                        f"{self.min_interval:g}s; retry in "
                        f"{self.min_interval - elapsed:.1f}s."
                    )
            self._last_call = now

    def wait(self) -> float:
        """Block until ``acquire()`` would succeed.

        Does not record a call.

        Returns:
            Total seconds slept.
        """
        slept = 0.0
        while (delay := self.remaining()) > 0:
            self._sleep(delay)
            slept += delay
        return slept
