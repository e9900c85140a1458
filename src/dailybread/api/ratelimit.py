"""Fixed-window rate limiter for outbound API requests."""

import time
from typing import Callable


class RateLimiter:
    """Admits at most ``max_requests`` acquisitions per ``window`` seconds.

    The window starts on the first acquisition after the previous window
    expired. Denied requests are not queued; callers decide what to do.
    """

    def __init__(
        self,
        max_requests: int = 50,
        window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self.remaining = max_requests
        self.reset_time = 0.0

    def try_acquire(self) -> bool:
        """Consume one slot if available. Returns False when denied."""
        now = self._clock()
        if now > self.reset_time:
            self.remaining = self.max_requests
            self.reset_time = now + self.window

        if self.remaining <= 0:
            return False

        self.remaining -= 1
        return True

    def seconds_until_reset(self) -> float:
        return max(0.0, self.reset_time - self._clock())
