"""Request queue with FIFO batching and request coalescing.

Concurrent requests for the same endpoint share a single in-flight future.
Queued requests are dispatched in batches of ``batch_size``; each batch runs
concurrently and the queue pauses ``delay`` seconds before the next one.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

SendFunc = Callable[[str], Awaitable[Any]]
SleepFunc = Callable[[float], Awaitable[Any]]


class RequestQueue:
    """Coalescing FIFO dispatcher owned by a single API client."""

    def __init__(
        self,
        send: SendFunc,
        batch_size: int = 10,
        delay: float = 0.1,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the queue.

        Args:
            send: Coroutine performing one request for an endpoint
            batch_size: Maximum requests dispatched together
            delay: Pause in seconds between consecutive batches
            sleep: Sleep coroutine, injectable for tests
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._send = send
        self.batch_size = batch_size
        self.delay = delay
        self._sleep = sleep
        self._pending: dict[str, asyncio.Future] = {}
        self._queue: deque[tuple[str, asyncio.Future]] = deque()
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def queued(self) -> int:
        """Requests waiting for a batch slot."""
        return len(self._queue)

    @property
    def in_flight(self) -> int:
        """Distinct endpoints that have not settled yet."""
        return len(self._pending)

    @property
    def is_processing(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    async def enqueue(self, endpoint: str) -> Any:
        """Request endpoint, sharing the result with identical pending calls."""
        future = self._pending.get(endpoint)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self._pending[endpoint] = future
            future.add_done_callback(lambda f, key=endpoint: self._settled(key, f))
            self._queue.append((endpoint, future))
            logger.debug("Queued %s (queue size: %d)", endpoint, len(self._queue))
            self._ensure_draining()
        else:
            logger.debug("Request already pending for %s, sharing result", endpoint)

        # A cancelled caller must not cancel the shared request
        return await asyncio.shield(future)

    async def close(self) -> None:
        """Stop dispatching and cancel every unsettled request."""
        if self._drain_task is not None:
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
            self._drain_task = None
        while self._queue:
            _, future = self._queue.popleft()
            future.cancel()

    def _settled(self, endpoint: str, future: asyncio.Future) -> None:
        if self._pending.get(endpoint) is future:
            del self._pending[endpoint]

    def _ensure_draining(self) -> None:
        if not self.is_processing:
            self._drain_task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._queue:
            size = min(self.batch_size, len(self._queue))
            batch = [self._queue.popleft() for _ in range(size)]
            logger.debug("Processing batch of %d requests", len(batch))

            await asyncio.gather(
                *(self._dispatch(endpoint, future) for endpoint, future in batch),
                return_exceptions=True,
            )

            if self._queue:
                await self._sleep(self.delay)

    async def _dispatch(self, endpoint: str, future: asyncio.Future) -> None:
        try:
            result = await self._send(endpoint)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
