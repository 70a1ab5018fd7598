"""In-memory sliding-window rate limiter for the chat endpoint."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List

WINDOW_SECONDS = 60.0
MAX_REQUESTS = 10
CLEANUP_THRESHOLD = 100


class RateLimiter:
    """Allows ``max_requests`` per key within a sliding window.

    Stale keys are pruned lazily once more than ``CLEANUP_THRESHOLD`` are
    tracked, so no background timer is needed.
    """

    def __init__(
        self,
        max_requests: int = MAX_REQUESTS,
        window_seconds: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, List[float]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._requests)

    def is_allowed(self, key: str) -> bool:
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if len(self._requests) > CLEANUP_THRESHOLD:
                for other in list(self._requests):
                    valid = [t for t in self._requests[other] if t > cutoff]
                    if valid:
                        self._requests[other] = valid
                    else:
                        del self._requests[other]

            timestamps = [t for t in self._requests.get(key, []) if t > cutoff]
            if len(timestamps) >= self.max_requests:
                self._requests[key] = timestamps
                return False
            timestamps.append(now)
            self._requests[key] = timestamps
            return True
