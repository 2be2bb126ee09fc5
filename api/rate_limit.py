"""
Per-client fixed-window rate limiting.

Each client address gets max_requests per window_s. The window starts at
the client's first request and resets wholesale once it has elapsed.
Requests past the quota never reach a handler.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

# Sweep stale windows once the table grows past this many clients
_SWEEP_THRESHOLD = 10_000


class RateLimitExceeded(Exception):
    """Client is over quota for the current window."""

    def __init__(self, retry_after_s: float):
        self.retry_after_s = retry_after_s
        super().__init__(RATE_LIMIT_MESSAGE)


class FixedWindowRateLimiter:

    def __init__(
        self,
        max_requests: int = 15,
        window_s: float = 60.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        if max_requests < 1 or window_s <= 0:
            raise ValueError("max_requests must be >= 1 and window_s > 0")
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock or time.monotonic
        self._windows: Dict[str, Tuple[float, int]] = {}  # key → (window_start, count)

    def hit(self, key: str) -> None:
        """
        Count one request for key.

        Raises:
            RateLimitExceeded: key is over quota in its current window
        """
        now = self._clock()
        if len(self._windows) > _SWEEP_THRESHOLD:
            self._sweep(now)

        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_s:
            start, count = now, 0

        if count >= self.max_requests:
            retry_after = self.window_s - (now - start)
            logger.warning(f"Rate limit exceeded for {key}")
            raise RateLimitExceeded(retry_after_s=max(retry_after, 0.0))

        self._windows[key] = (start, count + 1)

    def remaining(self, key: str) -> int:
        now = self._clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_s:
            return self.max_requests
        return max(self.max_requests - count, 0)

    def _sweep(self, now: float) -> None:
        self._windows = {
            k: v for k, v in self._windows.items() if now - v[0] < self.window_s
        }


def client_key(request: Request) -> str:
    """Rate-limit key: the client address."""
    return request.client.host if request.client else "unknown"
