"""
Fixed-window, per-IP rate limiting.
"""

import threading
import time
from functools import wraps
from typing import Callable, Dict, Optional, Tuple

from flask import request
from werkzeug.exceptions import TooManyRequests

GENERAL_LIMIT_MESSAGE = "Too many requests, please try again later."
FORM_LIMIT_MESSAGE = "Too many submissions, please try again later."


class RateLimitExceeded(TooManyRequests):
    """Raised when a client goes over its window budget."""

    def __init__(self, message: str, retry_after: int):
        super().__init__(description=message)
        self.retry_after = retry_after


class RateLimiter:
    """Counts hits per key inside a fixed time window."""

    def __init__(self, limit: int, window_seconds: int, message: str = GENERAL_LIMIT_MESSAGE,
                 clock: Callable[[], float] = time.time, sweep_threshold: int = 1024):
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._next_sweep = sweep_threshold
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> int:
        """Count one hit for ``key``; return the remaining budget or raise."""
        now = self._clock()
        with self._lock:
            if len(self._hits) >= self._next_sweep:
                self._sweep(now)
            count, reset = self._hits.get(key, (0, now + self.window_seconds))
            if now > reset:
                count = 0
                reset = now + self.window_seconds
            count += 1
            self._hits[key] = (count, reset)
            if count > self.limit:
                raise RateLimitExceeded(self.message, retry_after=max(1, int(reset - now)))
            return self.limit - count

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has ended. Caller holds the lock."""
        self._hits = {key: hit for key, hit in self._hits.items() if hit[1] >= now}
        # Next sweep once the map doubles past the live keys
        self._next_sweep = max(self.sweep_threshold, 2 * len(self._hits))

    def tracked_keys(self) -> int:
        """Number of keys currently holding a window."""
        with self._lock:
            return len(self._hits)

    def reset(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def client_ip() -> str:
    """Client address; in production ProxyFix has already applied X-Forwarded-For."""
    return request.remote_addr or "unknown"


def rate_limited(limiter: RateLimiter, scope: str) -> Callable:
    """Decorator applying ``limiter`` to a view, keyed by scope and client IP."""
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            limiter.check(f"{scope}:{client_ip()}")
            return f(*args, **kwargs)
        return decorated_function
    return decorator
