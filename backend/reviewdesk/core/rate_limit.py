"""
Request rate limiting.

Handlers depend on the ``RateLimiter`` interface; the app installs one
instance per scope on ``app.state.rate_limiters``. The in-memory implementation keeps
per-process counters with a fixed window and is only correct for a single
instance deployment; multi-instance deployments need a shared store behind
the same interface.
"""

import threading
import time
from typing import Callable, Optional, Protocol


class RateLimiter(Protocol):
    def check(self, key: str) -> bool:
        """Count one request for ``key``; False once the window's budget is spent."""
        ...


def rate_limit_key(ip: str, path: str, user_id: Optional[str] = None) -> str:
    return f"{ip}:{user_id}:{path}" if user_id else f"{ip}:{path}"


class InMemoryRateLimiter:
    """Fixed-window counter keyed by arbitrary strings."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}  # key -> (count, reset_at)
        self._next_sweep = 0.0
        self._lock = threading.Lock()

    def _cleanup_expired(self, now: float) -> None:
        # At most one full sweep per window
        if now < self._next_sweep:
            return
        self._windows = {k: v for k, v in self._windows.items() if v[1] > now}
        self._next_sweep = now + self.window_seconds

    def check(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            current = self._windows.get(key)

            if current is None or now >= current[1]:
                self._cleanup_expired(now)
                self._windows[key] = (1, now + self.window_seconds)
                return True

            count, reset_at = current
            if count >= self.max_requests:
                return False

            self._windows[key] = (count + 1, reset_at)
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._next_sweep = 0.0


class AllowAllRateLimiter:
    """Limiter used when rate limiting is disabled."""

    def check(self, key: str) -> bool:
        return True
