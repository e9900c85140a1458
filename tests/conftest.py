"""Pytest configuration and shared fixtures.

Provides an in-memory database, a controllable clock and sleep, and a fake
Bible API client for exercising the library without the network.
"""

import asyncio
from typing import Generator, Optional

import pytest

from dailybread.api.bible import PassageResult
from dailybread.api.errors import BibleAPIError
from dailybread.bible.library import BibleLibrary
from dailybread.bible.static import get_static_book
from dailybread.config import Config, reset_config
from dailybread.db.sqlite import Database, reset_db
from dailybread.db.storage import KeyValueStore

START_TIME = 1_700_000_000.0
DAY = 24 * 60 * 60


# ============================================================================
# Time Fixtures
# ============================================================================


class FakeClock:
    """Settable clock returning seconds."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory test database."""
    reset_db()
    reset_config()
    database = Database(":memory:")
    database.create_tables()
    yield database
    reset_db()
    reset_config()


@pytest.fixture
def store(db: Database) -> KeyValueStore:
    return KeyValueStore(db)


@pytest.fixture
def config(monkeypatch, tmp_path) -> Config:
    """Configuration with default cache lifetimes and no API keys."""
    monkeypatch.setenv("DAILYBREAD_DB_PATH", str(tmp_path / "test.db"))
    for name in ("BIBLE_API_KEY", "DEEPSEEK_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    return Config.from_env()


# ============================================================================
# Fake Bible API Client
# ============================================================================


class FakeBibleClient:
    """Stands in for BibleAPIClient; records every call."""

    def __init__(self, online: bool = True):
        self.online = online
        self.calls: list[tuple] = []
        self.passage_failures: dict[object, BibleAPIError] = {}
        self.books: list[dict] = []
        self.books_error: Optional[BibleAPIError] = None
        self.chapters: dict[str, list[dict]] = {}
        self.bibles: list[dict] = [{"id": "bible-1", "name": "Test Bible"}]
        self.bibles_error: Optional[BibleAPIError] = None
        self.bible_info: dict = {}
        self.search_data: dict = {}
        self.verse_data: dict = {}
        self.closed = False

    async def is_online(self) -> bool:
        return self.online

    @property
    def passage_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "passage"]

    async def get_passage(self, bible_id: str, book_id: str, chapter: int) -> PassageResult:
        self.calls.append(("passage", bible_id, book_id, chapter))
        error = self.passage_failures.get((book_id, chapter)) or self.passage_failures.get("*")
        if error is not None:
            raise error
        book = get_static_book(book_id)
        name = book.name if book else book_id
        return PassageResult(
            bible_id=bible_id,
            book_id=book_id,
            chapter_number=chapter,
            content=f"{name} {chapter} text #{len(self.passage_calls)}",
            reference=f"{name} {chapter}",
            verse_count=3,
        )

    async def get_bibles(self) -> list[dict]:
        self.calls.append(("bibles",))
        if self.bibles_error is not None:
            raise self.bibles_error
        return self.bibles

    async def get_bible(self, bible_id: str) -> dict:
        self.calls.append(("bible", bible_id))
        if self.bibles_error is not None:
            raise self.bibles_error
        return self.bible_info

    async def get_books(self, bible_id: str) -> list[dict]:
        self.calls.append(("books", bible_id))
        if self.books_error is not None:
            raise self.books_error
        return self.books

    async def get_chapters(self, bible_id: str, book_id: str) -> list[dict]:
        self.calls.append(("chapters", bible_id, book_id))
        return self.chapters.get(book_id, [])

    async def get_verse(self, bible_id: str, book_id: str, chapter: int, verse: int) -> dict:
        self.calls.append(("verse", bible_id, book_id, chapter, verse))
        return self.verse_data

    async def search(self, bible_id, query, limit=20, book_ids=None) -> dict:
        self.calls.append(("search", bible_id, query, limit, book_ids))
        return self.search_data

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeBibleClient:
    return FakeBibleClient()


@pytest.fixture
def library(fake_client, store, config, clock, fake_sleep) -> BibleLibrary:
    """Library wired to the fake client, in-memory store and fake time."""
    return BibleLibrary(
        fake_client,
        store=store,
        config=config,
        clock=clock,
        sleep=fake_sleep,
    )


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from dailybread.cli import app
    return app
