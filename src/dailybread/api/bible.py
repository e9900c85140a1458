"""API.Bible client for scripture content.

API.Bible (scripture.api.bible) provides:
- Bible translations and their metadata
- Books and chapters per translation
- Chapter passages and single verses
- Full-text search

Requires an API key sent in the ``api-key`` header. Every call is admitted
by a fixed-window rate limiter, checked against network connectivity and
dispatched through a coalescing request queue.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol
from urllib.parse import quote, urlencode

import requests

from ..config import DEFAULT_BIBLE_API_URL, Config, get_config
from .connectivity import NetworkMonitor
from .errors import (
    LIMITER_DENIED_MESSAGE,
    BibleAPIError,
    ErrorCode,
    error_from_status,
)
from .queue import RequestQueue
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)


class Connectivity(Protocol):
    async def is_online(self) -> bool: ...


@dataclass
class PassageResult:
    """A chapter passage returned by the API."""

    bible_id: str
    book_id: str
    chapter_number: int
    content: str
    reference: str
    verse_count: int = 0

    @classmethod
    def from_api(cls, bible_id: str, book_id: str, chapter: int, data: dict) -> "PassageResult":
        return cls(
            bible_id=bible_id,
            book_id=book_id,
            chapter_number=chapter,
            content=data.get("content") or "",
            reference=data.get("reference") or f"{book_id} {chapter}",
            verse_count=data.get("verseCount") or 0,
        )


class BibleAPIClient:
    """Client for the API.Bible REST API."""

    BASE_URL = DEFAULT_BIBLE_API_URL

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        limiter: Optional[RateLimiter] = None,
        network: Optional[Connectivity] = None,
        cooldown: float = 0.5,
        batch_size: int = 10,
        queue_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize client.

        Args:
            api_key: API.Bible key
            base_url: API root, defaults to the public v1 endpoint
            timeout: Request timeout in seconds
            limiter: Rate limiter (50 requests/minute if not provided)
            network: Connectivity check (socket probe if not provided)
            cooldown: Delay in seconds applied before every request
            batch_size: Requests dispatched together by the queue
            queue_delay: Pause in seconds between queue batches
            sleep: Sleep coroutine, injectable for tests
        """
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.limiter = limiter or RateLimiter()
        self.network = network or NetworkMonitor()
        self.cooldown = cooldown
        self._sleep = sleep
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": "DailyBread/1.0",
            "Content-Type": "application/json",
        })
        if api_key:
            self._session.headers["api-key"] = api_key
        self.queue = RequestQueue(
            self._request,
            batch_size=batch_size,
            delay=queue_delay,
            sleep=sleep,
        )

    @classmethod
    def from_config(cls, config: Optional[Config] = None, **overrides: Any) -> "BibleAPIClient":
        """Build a client from application configuration."""
        config = config or get_config()
        kwargs: dict[str, Any] = {
            "api_key": config.bible_api_key,
            "base_url": config.bible_api_url,
            "timeout": config.api_timeout,
            "limiter": RateLimiter(max_requests=config.rate_limit_per_minute),
            "cooldown": config.request_cooldown,
            "batch_size": config.batch_size,
            "queue_delay": config.queue_delay,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    async def is_online(self) -> bool:
        return await self.network.is_online()

    async def close(self) -> None:
        await self.queue.close()
        self._session.close()

    # ========================================================================
    # Transport
    # ========================================================================

    async def _request(self, endpoint: str) -> dict:
        """Admit, then perform one GET. Used by the request queue."""
        if not self.limiter.try_acquire():
            raise BibleAPIError(ErrorCode.RATE_LIMIT_EXCEEDED, LIMITER_DENIED_MESSAGE)

        if not await self.network.is_online():
            raise BibleAPIError(
                ErrorCode.OFFLINE,
                "You are currently offline. Please check your internet connection.",
            )

        await self._sleep(self.cooldown)
        return await asyncio.to_thread(self._get, endpoint)

    def _get(self, endpoint: str) -> dict:
        """Make GET request with error handling."""
        url = f"{self.base_url}{endpoint}"
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise BibleAPIError(
                ErrorCode.TIMEOUT,
                f"Request timed out after {self.timeout:g} seconds. "
                "Please check your internet connection and try again.",
            )
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 0
            raise error_from_status(status, _error_body(e.response))
        except requests.exceptions.RequestException as e:
            raise BibleAPIError(ErrorCode.UNKNOWN_ERROR, f"Request failed: {e}")
        except ValueError as e:
            raise BibleAPIError(ErrorCode.UNKNOWN_ERROR, f"Invalid JSON response: {e}")

    async def request(self, endpoint: str) -> dict:
        """Queue a request for an endpoint path and return the JSON body."""
        return await self.queue.enqueue(endpoint)

    # ========================================================================
    # Bibles, Books and Chapters
    # ========================================================================

    async def get_bibles(self) -> list[dict]:
        data = await self.request("/bibles")
        return data.get("data") or []

    async def get_bible(self, bible_id: str) -> dict:
        data = await self.request(f"/bibles/{bible_id}")
        return data.get("data") or {}

    async def get_books(self, bible_id: str) -> list[dict]:
        data = await self.request(f"/bibles/{bible_id}/books")
        return data.get("data") or []

    async def get_chapters(self, bible_id: str, book_id: str) -> list[dict]:
        data = await self.request(f"/bibles/{bible_id}/books/{book_id}/chapters")
        return data.get("data") or []

    # ========================================================================
    # Passages, Verses and Search
    # ========================================================================

    async def get_passage(self, bible_id: str, book_id: str, chapter: int) -> PassageResult:
        """Fetch a whole chapter as a passage."""
        data = await self.request(f"/bibles/{bible_id}/passages/{book_id}.{chapter}")
        return PassageResult.from_api(bible_id, book_id, chapter, data.get("data") or {})

    async def get_verse(self, bible_id: str, book_id: str, chapter: int, verse: int) -> dict:
        data = await self.request(f"/bibles/{bible_id}/verses/{book_id}.{chapter}.{verse}")
        return data.get("data") or {}

    async def search(
        self,
        bible_id: str,
        query: str,
        limit: int = 20,
        book_ids: Optional[list[str]] = None,
    ) -> dict:
        """Full-text search within a translation.

        Args:
            bible_id: Translation to search
            query: Search text
            limit: Maximum results to return
            book_ids: Restrict the search to these books

        Returns:
            The ``data`` object of the response (``verses``, ``total``, ...)
        """
        params = {"query": query, "limit": limit}
        if book_ids:
            params["bookIds"] = ",".join(book_ids)
        data = await self.request(f"/bibles/{bible_id}/search?{urlencode(params, quote_via=quote)}")
        return data.get("data") or {}


def _error_body(response: Optional[requests.Response]) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return None
