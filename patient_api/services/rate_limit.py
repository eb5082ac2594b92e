"""
Sliding-window rate limiter keyed by client address.

Each client keeps the timestamps of its recent hits; a hit is allowed when
fewer than ``limit`` of them fall inside the trailing ``window`` seconds.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable


class SlidingWindowRateLimiter:
    PRUNE_THRESHOLD = 1024

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> float | None:
        """
        Record a request from ``key``.

        Returns None when allowed, otherwise the number of seconds until the
        oldest hit in the window expires.
        """
        now = self._clock()
        cutoff = now - self.window
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.limit:
                return hits[0] + self.window - now
            hits.append(now)
            if len(self._hits) > self.PRUNE_THRESHOLD:
                self._prune(cutoff)
            return None

    def _prune(self, cutoff: float) -> None:
        # Drop clients whose newest hit has left the window
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
