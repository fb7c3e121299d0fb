"""Rolling-window admission control for outbound AI calls."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most ``max_requests`` calls in any trailing ``window_seconds``.

    Keeps the timestamps of recent admissions; a slot frees up as soon as
    the oldest admission ages out of the window, so capacity returns
    continuously instead of at a fixed boundary. One instance is shared by
    every caller in the process; ``try_acquire`` never blocks.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._admitted: deque[float] = deque()
        self._lock = threading.Lock()

    def _evict(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._admitted and self._admitted[0] <= cutoff:
            self._admitted.popleft()

    def try_acquire(self) -> bool:
        """Take a slot if one is free. Returns False when the window is full."""
        with self._lock:
            now = self._clock()
            self._evict(now)
            if len(self._admitted) >= self.max_requests:
                logger.warning(
                    "Rate limit reached: %d requests in %.0fs",
                    self.max_requests,
                    self.window_seconds,
                )
                return False
            self._admitted.append(now)
            return True

    def remaining(self) -> int:
        with self._lock:
            self._evict(self._clock())
            return self.max_requests - len(self._admitted)
