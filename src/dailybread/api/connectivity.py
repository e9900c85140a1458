"""Network reachability checks."""

import asyncio
import logging
import socket
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class NetworkMonitor:
    """Reports whether the device can reach the network.

    A TCP connect to a well-known host is used as the probe and its result
    is cached for ``ttl`` seconds. The connect runs in a worker thread so
    the event loop keeps serving other tasks. ``set_override`` pins the
    answer.
    """

    def __init__(
        self,
        host: str = "1.1.1.1",
        port: int = 53,
        timeout: float = 2.0,
        ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.ttl = ttl
        self._clock = clock
        self._override: Optional[bool] = None
        self._last_result: Optional[bool] = None
        self._checked_at = 0.0

    def set_override(self, online: Optional[bool]) -> None:
        """Force online/offline, or pass None to resume probing."""
        self._override = online

    async def is_online(self) -> bool:
        if self._override is not None:
            return self._override

        now = self._clock()
        if self._last_result is not None and now - self._checked_at < self.ttl:
            return self._last_result

        self._last_result = await asyncio.to_thread(self._probe)
        self._checked_at = now
        return self._last_result

    def _probe(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.info("Network probe to %s:%s failed: %s", self.host, self.port, e)
            return False


class StaticNetwork:
    """Connectivity stub with a fixed, settable state."""

    def __init__(self, online: bool = True):
        self.online = online

    async def is_online(self) -> bool:
        return self.online
