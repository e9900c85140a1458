"""Key/value persistence adapter.

Values are stored as JSON text in the ``kv_store`` table. Reads go through a
short-lived in-process cache of already-deserialized values so hot keys
(the passage cache, reading progress) are not re-parsed on every access.
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Optional

from .sqlite import Database, get_db

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 5.0  # seconds


class StorageError(Exception):
    """Raised when a stored value cannot be decoded or encoded."""

    pass


class KeyValueStore:
    """JSON blob store with a per-instance read cache."""

    def __init__(
        self,
        db: Optional[Database] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the store.

        Args:
            db: Database instance (uses global if not provided)
            cache_ttl: Seconds a deserialized value stays in the read cache
            clock: Monotonic clock, injectable for tests
        """
        self.db = db or get_db()
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, tuple[float, Any]] = {}

    def _decode(self, key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt value for key '{key}': {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default.

        Callers that mutate the returned object must write it back with
        :meth:`set`; the object is shared with the read cache.
        """
        now = self._clock()
        cached = self._cache.get(key)
        if cached is not None and cached[0] > now:
            return cached[1]

        raw = self.db.read_value(key)
        if raw is None:
            self._cache.pop(key, None)
            return default

        try:
            value = self._decode(key, raw)
        except StorageError as e:
            logger.warning("%s; treating as missing", e)
            return default

        self._cache[key] = (now + self.cache_ttl, value)
        return value

    def set(self, key: str, value: Any) -> None:
        """Serialize and store value under key."""
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize value for key '{key}': {e}") from e
        self.db.write_value(key, raw)
        self._cache[key] = (self._clock() + self.cache_ttl, value)

    def remove(self, key: str) -> None:
        self.multi_remove([key])

    def multi_remove(self, keys: list[str]) -> None:
        """Remove several keys at once."""
        for key in keys:
            self._cache.pop(key, None)
        self.db.delete_values(list(keys))

    def keys(self, prefix: Optional[str] = None) -> list[str]:
        return self.db.list_keys(prefix)

    def size_of(self, keys: Optional[list[str]] = None) -> int:
        """Stored size in characters of the given keys."""
        return self.db.total_size(keys)

    def clear_cache(self) -> None:
        self._cache.clear()


class DebouncedWriter:
    """Coalesces rapid writes to the same key.

    Each ``schedule`` call replaces the pending value and restarts the key's
    timer, so only the last value written inside the window reaches the
    database. Outside a running event loop writes happen immediately.
    """

    def __init__(self, store: KeyValueStore, delay: float = 1.0):
        self.store = store
        self.delay = delay
        self._pending: dict[str, Any] = {}
        self._handles: dict[str, asyncio.TimerHandle] = {}

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def get(self, key: str, default: Any = None) -> Any:
        """Read a key, preferring a value that has not been flushed yet."""
        if key in self._pending:
            return self._pending[key]
        return self.store.get(key, default)

    def schedule(self, key: str, value: Any, delay: Optional[float] = None) -> None:
        """Queue value for key, resetting that key's timer."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._cancel(key)
            self._pending.pop(key, None)
            self.store.set(key, value)
            return

        self._cancel(key)
        self._pending[key] = value
        self._handles[key] = loop.call_later(
            self.delay if delay is None else delay, self._write, key
        )

    def discard(self, key: str) -> None:
        """Drop a pending write without persisting it."""
        self._cancel(key)
        self._pending.pop(key, None)

    def flush(self) -> None:
        """Write every pending value now."""
        for key in list(self._pending):
            self._cancel(key)
            self._write(key)

    def _cancel(self, key: str) -> None:
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def _write(self, key: str) -> None:
        self._handles.pop(key, None)
        if key not in self._pending:
            return
        value = self._pending.pop(key)
        try:
            self.store.set(key, value)
        except Exception:
            logger.exception("Debounced write for '%s' failed", key)
            raise
