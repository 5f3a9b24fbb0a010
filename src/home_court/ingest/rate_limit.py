"""Simple rate limiter for game-log requests."""

from __future__ import annotations

import threading
import time


class RateLimiter:
    """Interval limiter using a requests-per-minute target, safe to share across threads."""

    def __init__(self, *, rpm: int) -> None:
        self.rpm = max(1, int(rpm))
        self._interval = 60.0 / float(self.rpm)
        self._next_ts = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        with self._lock:
            now = time.monotonic()
            start = max(now, self._next_ts)
            self._next_ts = start + self._interval
        remaining = start - now
        if remaining > 0:
            time.sleep(remaining)
