"""Offline-first Bible library.

Sits between callers and the API client:
- Passages are served from a time-boxed cache (stale-while-revalidate)
- Book and chapter navigation always starts from the bundled static table
- Books can be downloaded for offline reading
- Reading progress, recent chapters and bookmarks are kept locally

All state lives in the key/value store; hot keys are written through a
debounced writer.
"""

import asyncio
import logging
import re
import time
from datetime import date
from typing import Any, Awaitable, Callable, Optional

from ..api.bible import BibleAPIClient, PassageResult
from ..api.errors import NO_CACHED_PASSAGE_MESSAGE, BibleAPIError, ErrorCode
from ..config import Config, get_config
from ..db.storage import DebouncedWriter, KeyValueStore
from .schemas import (
    BibleStats,
    BookInfo,
    Bookmark,
    CachedPassage,
    ChapterInfo,
    CleanupResult,
    DownloadResult,
    OfflineBook,
    OfflineChapter,
    OfflinePassage,
    OfflineStats,
    OverallProgress,
    Passage,
    PassageComparison,
    PassageSource,
    ReadingProgress,
    RecentChapter,
    SearchResult,
    Verse,
)
from .static import (
    DAILY_VERSES,
    FALLBACK_BIBLES,
    STATIC_BOOKS,
    VerseOfTheDay,
    get_static_book,
    static_chapters,
)

logger = logging.getLogger(__name__)

CACHED_PASSAGES_KEY = "bible_cached_passages"
BOOKMARKS_KEY = "bible_bookmarks"
READING_PROGRESS_KEY = "bible_reading_progress"
RECENT_CHAPTERS_KEY = "bible_recent_chapters"
OFFLINE_BOOKS_KEY = "bible_offline_books"
OFFLINE_CHAPTERS_KEY = "bible_offline_chapters"
OFFLINE_PASSAGES_KEY = "bible_offline_passages"

DAY_MS = 24 * 60 * 60 * 1000
RECENT_LIMIT = 10
RECENT_RETAINED = 50
BOOKMARK_MAX_LENGTH = 200
STATE_WRITE_DELAY = 1.0
PASSAGE_WRITE_DELAY = 2.0
DOWNLOAD_DELAY = 0.2

_PASSAGE_ID = re.compile(r"^([1-3]?[A-Z]{2,3})-(\S+)$")
_CHAPTER_SUFFIX = re.compile(r"\.(\d+)$")

UpdateCallback = Callable[[list], None]


def parse_passage_id(passage_id: str) -> tuple[str, int]:
    """Split ``"GEN-1"`` into ``("GEN", 1)``.

    Raises:
        ValueError: If the id is malformed or the chapter is not positive
    """
    match = _PASSAGE_ID.match(passage_id.strip().upper())
    if not match:
        raise ValueError(f"Invalid passage ID format: {passage_id!r}")
    book_id, chapter_text = match.groups()
    try:
        chapter = int(chapter_text)
    except ValueError:
        raise ValueError(f"Invalid chapter number: {chapter_text}")
    if chapter <= 0:
        raise ValueError(f"Invalid chapter number: {chapter_text}")
    return book_id, chapter


def cache_key(bible_id: str, book_id: str, chapter: int) -> str:
    return f"{bible_id}-{book_id}-{chapter}"


def truncate_content(content: str, limit: int = BOOKMARK_MAX_LENGTH) -> str:
    if len(content) <= limit:
        return content
    return content[: limit - 3] + "..."


def chapter_number_of(chapter: dict, index: int) -> Optional[int]:
    """Best-effort chapter number for an API chapter entry.

    Tries ``chapterNumber``, then a numeric ``number``, then a ``.N`` id
    suffix, then the list position. Intro entries (non-numeric ``number``)
    have no chapter number.
    """
    value = chapter.get("chapterNumber")
    if isinstance(value, int) and value > 0:
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)

    number = chapter.get("number")
    if isinstance(number, str):
        if number.isdigit():
            return int(number)
        if number:
            return None

    match = _CHAPTER_SUFFIX.search(str(chapter.get("id") or ""))
    if match:
        return int(match.group(1))

    return index + 1


def merge_books(bible_id: str, api_books: list[dict]) -> list[BookInfo]:
    """Overlay API metadata on the static book table.

    Apocryphal books are excluded; chapter counts stay static.
    """
    by_id = {
        book.get("id"): book
        for book in api_books
        if book.get("isApocryphal") is not True
    }
    merged = []
    for static in STATIC_BOOKS:
        api_book = by_id.get(static.id, {})
        merged.append(
            BookInfo(
                id=static.id,
                name=api_book.get("name") or static.name,
                order=static.order,
                chapters=static.chapters,
                testament=static.testament,
                abbreviation=api_book.get("abbreviation"),
                bible_id=bible_id,
            )
        )
    return merged


def merge_chapters(book_id: str, api_chapters: list[dict]) -> list[ChapterInfo]:
    """Merge API chapter entries into the static chapter range.

    Numbers outside 1..N (N from the static table) are dropped, duplicates
    keep their first occurrence and missing numbers are filled from static.
    """
    static = {
        entry["chapterNumber"]: ChapterInfo(
            id=entry["id"],
            book_id=book_id,
            chapter_number=entry["chapterNumber"],
            reference=entry["reference"],
        )
        for entry in static_chapters(book_id)
    }
    if not static:
        return []

    from_api: dict[int, ChapterInfo] = {}
    for index, chapter in enumerate(api_chapters):
        number = chapter_number_of(chapter, index)
        if number is None or number not in static or number in from_api:
            continue
        from_api[number] = ChapterInfo(
            id=chapter.get("id") or static[number].id,
            book_id=book_id,
            chapter_number=number,
            reference=chapter.get("reference") or static[number].reference,
            number_of_verses=chapter.get("numberOfVerses") or 0,
        )

    return [from_api.get(number, static[number]) for number in sorted(static)]


def _notify(callback: Optional[UpdateCallback], items: list) -> None:
    if callback is not None:
        callback(list(items))


class BibleLibrary:
    """Offline-first access to Bible content and local reading state."""

    def __init__(
        self,
        client: BibleAPIClient,
        store: Optional[KeyValueStore] = None,
        config: Optional[Config] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        download_delay: float = DOWNLOAD_DELAY,
    ):
        """Initialize the library.

        Args:
            client: Bible API client
            store: Key/value store (global database if not provided)
            config: Configuration for cache lifetimes (global if not provided)
            clock: Wall clock in seconds, injectable for tests
            sleep: Sleep coroutine, injectable for tests
            download_delay: Pause between chapters during offline download
        """
        config = config or get_config()
        self.client = client
        self.store = store or KeyValueStore()
        self.writer = DebouncedWriter(self.store, delay=STATE_WRITE_DELAY)
        self.passage_expiry_ms = int(config.passage_expiry_days * DAY_MS)
        self.refresh_after_ms = int(config.refresh_after_days * DAY_MS)
        self.passage_gc_ms = int(config.passage_gc_days * DAY_MS)
        self.offline_gc_ms = int(config.offline_gc_days * DAY_MS)
        self.cleanup_interval = config.cleanup_interval_hours * 3600
        self.download_delay = download_delay
        self._clock = clock
        self._sleep = sleep
        self._refreshing: dict[str, asyncio.Task] = {}
        self._background: set[asyncio.Task] = set()
        self._cleanup_task: Optional[asyncio.Task] = None
        self._bibles: list[dict] = []

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _persist(self, key: str, value: Any) -> None:
        """Write immediately, superseding any pending debounced write."""
        self.writer.discard(key)
        self.store.set(key, value)

    # ========================================================================
    # Passages
    # ========================================================================

    def _cached_passages(self) -> dict[str, dict]:
        return self.writer.get(CACHED_PASSAGES_KEY) or {}

    def _offline_passages(self) -> dict[str, dict]:
        return self.store.get(OFFLINE_PASSAGES_KEY) or {}

    async def get_passage(self, bible_id: str, passage_id: str) -> Passage:
        """Get a chapter passage, preferring local data.

        Args:
            bible_id: Translation ID
            passage_id: Passage ID in ``BOOK-CHAPTER`` form, e.g. ``"GEN-1"``

        Returns:
            The passage; ``source`` tells where it came from

        Raises:
            ValueError: If passage_id is malformed
            BibleAPIError: If nothing local exists and the fetch fails
        """
        passage = await self._load_passage(bible_id, passage_id)
        self._record_view(bible_id, passage.book_id, passage.chapter_number)
        return passage

    async def _load_passage(self, bible_id: str, passage_id: str) -> Passage:
        book_id, chapter = parse_passage_id(passage_id)
        normalized_id = f"{book_id}-{chapter}"
        key = cache_key(bible_id, book_id, chapter)
        now = self._now_ms()
        online = await self.client.is_online()

        cached = self._cached_passages().get(key)
        if cached is not None:
            age = now - cached["timestamp"]
            if age < self.passage_expiry_ms:
                if online and age >= self.refresh_after_ms:
                    self._schedule_refresh(bible_id, book_id, chapter)
                return self._from_cache(normalized_id, cached, PassageSource.CACHE)

        snapshot = self._offline_passages().get(key)

        if not online:
            if snapshot is not None:
                logger.info("Offline: serving saved passage %s", key)
                return self._from_snapshot(normalized_id, snapshot)
            if cached is not None:
                logger.info("Offline: serving expired cache entry %s", key)
                return self._from_cache(normalized_id, cached, PassageSource.STALE)
            raise BibleAPIError(ErrorCode.OFFLINE, NO_CACHED_PASSAGE_MESSAGE)

        try:
            result = await self.client.get_passage(bible_id, book_id, chapter)
        except BibleAPIError as e:
            if snapshot is not None:
                logger.warning("Fetch of %s failed (%s); using saved passage", key, e.code.value)
                return self._from_snapshot(normalized_id, snapshot)
            if cached is not None:
                logger.warning("Fetch of %s failed (%s); using expired cache", key, e.code.value)
                return self._from_cache(normalized_id, cached, PassageSource.STALE)
            raise

        entry = self._cache_result(result)
        return self._from_cache(normalized_id, entry, PassageSource.NETWORK, result.verse_count)

    def _cache_result(self, result: PassageResult) -> dict:
        entry = CachedPassage(
            content=result.content,
            timestamp=self._now_ms(),
            bible_id=result.bible_id,
            book_id=result.book_id,
            chapter_number=result.chapter_number,
            reference=result.reference,
        ).model_dump()
        passages = dict(self._cached_passages())
        passages[cache_key(result.bible_id, result.book_id, result.chapter_number)] = entry
        self.writer.schedule(CACHED_PASSAGES_KEY, passages, delay=PASSAGE_WRITE_DELAY)
        return entry

    @staticmethod
    def _from_cache(
        passage_id: str,
        entry: dict,
        source: PassageSource,
        verse_count: int = 0,
    ) -> Passage:
        return Passage(
            id=passage_id,
            bible_id=entry["bible_id"],
            book_id=entry["book_id"],
            chapter_number=entry["chapter_number"],
            content=entry["content"],
            reference=entry.get("reference") or f"{entry['book_id']} {entry['chapter_number']}",
            verse_count=verse_count,
            source=source,
            timestamp=entry["timestamp"],
        )

    @staticmethod
    def _from_snapshot(passage_id: str, snapshot: dict) -> Passage:
        return Passage(
            id=passage_id,
            bible_id=snapshot["bible_id"],
            book_id=snapshot["book_id"],
            chapter_number=snapshot["chapter_number"],
            content=snapshot["content"],
            reference=snapshot.get("reference") or f"{snapshot['book_id']} {snapshot['chapter_number']}",
            verse_count=snapshot.get("verse_count") or 0,
            source=PassageSource.OFFLINE,
            timestamp=snapshot["saved_at"],
        )

    # ========================================================================
    # Background Refresh
    # ========================================================================

    @property
    def background_tasks(self) -> set[asyncio.Task]:
        return set(self._background)

    def _schedule_refresh(self, bible_id: str, book_id: str, chapter: int) -> None:
        key = cache_key(bible_id, book_id, chapter)
        if key in self._refreshing:
            return
        task = asyncio.get_running_loop().create_task(
            self._refresh(bible_id, book_id, chapter)
        )
        self._refreshing[key] = task
        self._background.add(task)

        def _done(t: asyncio.Task) -> None:
            self._background.discard(t)
            if self._refreshing.get(key) is t:
                del self._refreshing[key]

        task.add_done_callback(_done)

    async def _refresh(self, bible_id: str, book_id: str, chapter: int) -> None:
        try:
            result = await self.client.get_passage(bible_id, book_id, chapter)
        except BibleAPIError as e:
            logger.warning(
                "Background refresh of %s failed: %s",
                cache_key(bible_id, book_id, chapter),
                e.message,
            )
            return
        self._cache_result(result)
        logger.debug("Refreshed %s", cache_key(bible_id, book_id, chapter))

    async def wait_for_background(self) -> None:
        """Wait until every scheduled background refresh has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ========================================================================
    # Bibles, Books and Chapters
    # ========================================================================

    async def fetch_bibles(self) -> list[dict]:
        """List available translations, falling back to bundled data."""
        try:
            bibles = await self.client.get_bibles()
        except BibleAPIError as e:
            if not e.falls_back_to_static:
                raise
            logger.warning("Using fallback Bible list: %s", e.message)
            bibles = [dict(bible) for bible in FALLBACK_BIBLES]
        self._bibles = bibles
        return bibles

    def static_books(self, bible_id: Optional[str] = None) -> list[BookInfo]:
        return [
            BookInfo(
                id=book.id,
                name=book.name,
                order=book.order,
                chapters=book.chapters,
                testament=book.testament,
                bible_id=bible_id,
            )
            for book in STATIC_BOOKS
        ]

    async def list_books(
        self,
        bible_id: str,
        on_update: Optional[UpdateCallback] = None,
    ) -> list[BookInfo]:
        """List books, static first and then enhanced from the API.

        Args:
            bible_id: Translation ID
            on_update: Called with each successive list (static, then enhanced)

        Returns:
            The final book list
        """
        if not await self.client.is_online():
            saved = self.offline_books(bible_id)
            if saved:
                books = [
                    BookInfo(
                        id=book.id,
                        name=book.name,
                        order=getattr(get_static_book(book.id), "order", 0),
                        chapters=book.chapters,
                        testament=getattr(get_static_book(book.id), "testament", None),
                        bible_id=bible_id,
                    )
                    for book in saved
                ]
                books.sort(key=lambda b: b.order)
            else:
                books = self.static_books(bible_id)
            _notify(on_update, books)
            return books

        static = self.static_books(bible_id)
        _notify(on_update, static)

        try:
            api_books = await self.client.get_books(bible_id)
        except BibleAPIError as e:
            logger.warning("API books unavailable, using static data: %s", e.message)
            return static

        books = merge_books(bible_id, api_books)
        _notify(on_update, books)
        return books

    def static_chapters(self, book_id: str) -> list[ChapterInfo]:
        return merge_chapters(book_id, [])

    async def list_chapters(
        self,
        bible_id: str,
        book_id: str,
        on_update: Optional[UpdateCallback] = None,
    ) -> list[ChapterInfo]:
        """List chapters of a book, static first and then enhanced."""
        book_id = book_id.upper()
        if not await self.client.is_online():
            saved = self.offline_chapters(book_id=book_id, bible_id=bible_id)
            if saved:
                chapters = [
                    ChapterInfo(
                        id=chapter.id,
                        book_id=book_id,
                        chapter_number=chapter.chapter_number,
                        reference=chapter.reference,
                    )
                    for chapter in sorted(saved, key=lambda c: c.chapter_number)
                ]
            else:
                chapters = self.static_chapters(book_id)
            _notify(on_update, chapters)
            return chapters

        static = self.static_chapters(book_id)
        _notify(on_update, static)

        try:
            api_chapters = await self.client.get_chapters(bible_id, book_id)
        except BibleAPIError as e:
            logger.warning("API chapters unavailable, using static data: %s", e.message)
            return static

        if not api_chapters:
            return static

        chapters = merge_chapters(book_id, api_chapters)
        _notify(on_update, chapters)
        return chapters

    # ========================================================================
    # Reading Progress and Recent Chapters
    # ========================================================================

    def reading_progress(self, book_id: Optional[str] = None) -> Any:
        """Progress for one book, or a dict of all books if book_id is None."""
        raw = self.writer.get(READING_PROGRESS_KEY) or {}
        if book_id is not None:
            entry = raw.get(book_id.upper())
            return ReadingProgress(**entry) if entry else None
        return {key: ReadingProgress(**value) for key, value in raw.items()}

    def update_reading_progress(self, book_id: str, chapter: int, verse: int = 1) -> None:
        progress = dict(self.writer.get(READING_PROGRESS_KEY) or {})
        progress[book_id.upper()] = ReadingProgress(
            last_chapter=chapter,
            last_verse=verse,
            timestamp=self._now_ms(),
        ).model_dump(exclude_none=True)
        self.writer.schedule(READING_PROGRESS_KEY, progress)

    def overall_reading_progress(self) -> OverallProgress:
        """Chapters read against the total of every book started."""
        completed = 0
        total = 0
        for book_id, progress in self.reading_progress().items():
            book = get_static_book(book_id)
            if book is None:
                continue
            total += book.chapters
            completed += progress.last_chapter
        percentage = round(completed / total * 100) if total else 0
        return OverallProgress(completed=completed, total=total, percentage=percentage)

    def recent_chapters(self) -> list[RecentChapter]:
        raw = self.writer.get(RECENT_CHAPTERS_KEY) or []
        entries = [RecentChapter(**item) for item in raw]
        entries.sort(key=lambda r: r.timestamp, reverse=True)
        return entries

    def add_recent_chapter(self, bible_id: str, book_id: str, chapter: int) -> None:
        book = get_static_book(book_id)
        entry = RecentChapter(
            book_id=book_id,
            chapter_number=chapter,
            book_name=book.name if book else book_id,
            bible_id=bible_id,
            timestamp=self._now_ms(),
        ).model_dump()
        others = [
            item
            for item in self.writer.get(RECENT_CHAPTERS_KEY) or []
            if not (item["book_id"] == book_id and item["chapter_number"] == chapter)
        ]
        self.writer.schedule(RECENT_CHAPTERS_KEY, [entry, *others][:RECENT_LIMIT])

    def _record_view(self, bible_id: str, book_id: str, chapter: int) -> None:
        self.update_reading_progress(book_id, chapter, 1)
        self.add_recent_chapter(bible_id, book_id, chapter)

    async def sync_offline_progress(self) -> int:
        """Stamp ``last_synced`` on all progress entries when online."""
        if not await self.client.is_online():
            return 0
        now = self._now_ms()
        progress = {
            book_id: {**entry, "last_synced": now}
            for book_id, entry in (self.writer.get(READING_PROGRESS_KEY) or {}).items()
        }
        self.writer.schedule(READING_PROGRESS_KEY, progress)
        return len(progress)

    # ========================================================================
    # Bookmarks
    # ========================================================================

    def bookmarks(self) -> list[Bookmark]:
        return [Bookmark(**item) for item in self.writer.get(BOOKMARKS_KEY) or []]

    def add_bookmark(self, reference: str, content: str, bible_id: str) -> Bookmark:
        now = self._now_ms()
        bookmark = Bookmark(
            id=f"{reference}-{now}",
            reference=reference,
            content=truncate_content(content),
            timestamp=now,
            bible_id=bible_id,
        )
        existing = self.writer.get(BOOKMARKS_KEY) or []
        self.writer.schedule(BOOKMARKS_KEY, [bookmark.model_dump(), *existing])
        return bookmark

    def remove_bookmark(self, bookmark_id: str) -> bool:
        existing = self.writer.get(BOOKMARKS_KEY) or []
        remaining = [item for item in existing if item["id"] != bookmark_id]
        if len(remaining) == len(existing):
            return False
        self.writer.schedule(BOOKMARKS_KEY, remaining)
        return True

    def is_bookmarked(self, reference: str) -> bool:
        return any(item["reference"] == reference for item in self.writer.get(BOOKMARKS_KEY) or [])

    def toggle_bookmark(self, reference: str, content: str, bible_id: str) -> bool:
        """Add or remove a bookmark. Returns True if now bookmarked."""
        for item in self.writer.get(BOOKMARKS_KEY) or []:
            if item["reference"] == reference:
                self.remove_bookmark(item["id"])
                return False
        self.add_bookmark(reference, content, bible_id)
        return True

    # ========================================================================
    # Offline Storage
    # ========================================================================

    def offline_books(self, bible_id: Optional[str] = None) -> list[OfflineBook]:
        books = [OfflineBook(**item) for item in self.store.get(OFFLINE_BOOKS_KEY) or []]
        if bible_id is not None:
            books = [b for b in books if b.bible_id == bible_id]
        return books

    def offline_chapters(
        self,
        book_id: Optional[str] = None,
        bible_id: Optional[str] = None,
    ) -> list[OfflineChapter]:
        chapters = [OfflineChapter(**item) for item in self.store.get(OFFLINE_CHAPTERS_KEY) or []]
        if book_id is not None:
            chapters = [c for c in chapters if c.book_id == book_id.upper()]
        if bible_id is not None:
            chapters = [c for c in chapters if c.bible_id == bible_id]
        return chapters

    def save_book_for_offline(self, book: BookInfo, bible_id: str) -> bool:
        """Record book metadata for offline use. Returns False if already saved."""
        books = list(self.store.get(OFFLINE_BOOKS_KEY) or [])
        if any(b["id"] == book.id and b["bible_id"] == bible_id for b in books):
            return False
        books.append(
            OfflineBook(
                id=book.id,
                name=book.name,
                chapters=book.chapters,
                bible_id=bible_id,
                saved_at=self._now_ms(),
            ).model_dump()
        )
        self.store.set(OFFLINE_BOOKS_KEY, books)
        logger.info("Book saved for offline access: %s", book.name)
        return True

    def save_chapter_for_offline(self, chapter: ChapterInfo, bible_id: str) -> bool:
        chapters = list(self.store.get(OFFLINE_CHAPTERS_KEY) or [])
        if any(c["id"] == chapter.id and c["bible_id"] == bible_id for c in chapters):
            return False
        chapters.append(
            OfflineChapter(
                id=chapter.id,
                book_id=chapter.book_id,
                chapter_number=chapter.chapter_number,
                reference=chapter.reference,
                bible_id=bible_id,
                saved_at=self._now_ms(),
            ).model_dump()
        )
        self.store.set(OFFLINE_CHAPTERS_KEY, chapters)
        return True

    def _save_passage_snapshot(self, passage: Passage) -> None:
        snapshots = dict(self._offline_passages())
        snapshots[cache_key(passage.bible_id, passage.book_id, passage.chapter_number)] = (
            OfflinePassage(
                content=passage.content,
                reference=passage.reference,
                verse_count=passage.verse_count,
                bible_id=passage.bible_id,
                book_id=passage.book_id,
                chapter_number=passage.chapter_number,
                saved_at=self._now_ms(),
            ).model_dump()
        )
        self.store.set(OFFLINE_PASSAGES_KEY, snapshots)

    def is_book_available_offline(self, book_id: str, bible_id: str) -> bool:
        return any(
            b.id == book_id.upper() and b.bible_id == bible_id
            for b in self.offline_books()
        )

    async def download_book_for_offline(
        self,
        book_id: str,
        bible_id: str,
        on_progress: Optional[Callable[[float], None]] = None,
    ) -> DownloadResult:
        """Fetch and save every chapter of a book for offline reading.

        Chapters are fetched one at a time. A failed chapter is logged and
        skipped; the download carries on with the next one.

        Args:
            book_id: Book ID, e.g. ``"JHN"``
            bible_id: Translation ID
            on_progress: Called with the fraction (0..1) of chapters attempted

        Returns:
            DownloadResult with downloaded and total chapter counts
        """
        book_id = book_id.upper()
        static = get_static_book(book_id)
        if static is None:
            raise ValueError(f"Unknown book: {book_id}")

        books = await self.list_books(bible_id)
        book = next((b for b in books if b.id == book_id), None) or BookInfo(
            id=static.id,
            name=static.name,
            order=static.order,
            chapters=static.chapters,
            testament=static.testament,
            bible_id=bible_id,
        )
        self.save_book_for_offline(book, bible_id)

        chapters = await self.list_chapters(bible_id, book_id)
        result = DownloadResult(total=len(chapters))
        logger.info("Starting download of %s (%d chapters)", book.name, result.total)

        for attempted, chapter in enumerate(chapters, start=1):
            passage_id = f"{book_id}-{chapter.chapter_number}"
            try:
                passage = await self._load_passage(bible_id, passage_id)
            except BibleAPIError as e:
                logger.warning("Failed to download %s: %s", passage_id, e.message)
            else:
                self._save_passage_snapshot(passage)
                self.save_chapter_for_offline(chapter, bible_id)
                result.downloaded += 1

            if on_progress is not None:
                on_progress(attempted / result.total)

            if attempted < result.total:
                await self._sleep(self.download_delay)

        logger.info(
            "Download of %s finished: %d/%d chapters",
            book.name,
            result.downloaded,
            result.total,
        )
        return result

    def remove_book_from_offline(self, book_id: str, bible_id: str) -> bool:
        """Drop a book, its chapters, snapshots and cached passages."""
        book_id = book_id.upper()
        books = self.store.get(OFFLINE_BOOKS_KEY) or []
        kept_books = [b for b in books if not (b["id"] == book_id and b["bible_id"] == bible_id)]
        self.store.set(OFFLINE_BOOKS_KEY, kept_books)

        chapters = self.store.get(OFFLINE_CHAPTERS_KEY) or []
        self.store.set(
            OFFLINE_CHAPTERS_KEY,
            [c for c in chapters if not (c["book_id"] == book_id and c["bible_id"] == bible_id)],
        )

        def _other_book(entry: dict) -> bool:
            return not (entry["book_id"] == book_id and entry["bible_id"] == bible_id)

        snapshots = self._offline_passages()
        self.store.set(
            OFFLINE_PASSAGES_KEY,
            {key: value for key, value in snapshots.items() if _other_book(value)},
        )
        passages = self._cached_passages()
        self._persist(
            CACHED_PASSAGES_KEY,
            {key: value for key, value in passages.items() if _other_book(value)},
        )
        logger.info("Removed %s from offline storage", book_id)
        return len(kept_books) != len(books)

    def offline_stats(self) -> OfflineStats:
        books = self.offline_books()
        chapters = self.offline_chapters()
        return OfflineStats(
            total_books=len({b.id for b in books}),
            total_chapters=len({(c.book_id, c.chapter_number) for c in chapters}),
            total_passages=len(self._cached_passages()),
            storage_size=self.store.size_of([
                OFFLINE_BOOKS_KEY,
                OFFLINE_CHAPTERS_KEY,
                OFFLINE_PASSAGES_KEY,
                CACHED_PASSAGES_KEY,
            ]),
        )

    # ========================================================================
    # Cache Maintenance
    # ========================================================================

    def clear_old_cache(self) -> CleanupResult:
        """Purge expired passages, stale offline data and old recent entries."""
        now = self._now_ms()
        result = CleanupResult()

        passages = self._cached_passages()
        kept = {k: v for k, v in passages.items() if now - v["timestamp"] < self.passage_gc_ms}
        if len(kept) != len(passages):
            result.passages_removed = len(passages) - len(kept)
            self._persist(CACHED_PASSAGES_KEY, kept)

        recent = self.writer.get(RECENT_CHAPTERS_KEY) or []
        if len(recent) > RECENT_RETAINED:
            trimmed = sorted(recent, key=lambda r: r["timestamp"], reverse=True)[:RECENT_RETAINED]
            result.recent_trimmed = len(recent) - len(trimmed)
            self._persist(RECENT_CHAPTERS_KEY, trimmed)

        books = self.store.get(OFFLINE_BOOKS_KEY) or []
        kept_books = [b for b in books if now - b["saved_at"] < self.offline_gc_ms]
        if len(kept_books) != len(books):
            result.books_removed = len(books) - len(kept_books)
            self.store.set(OFFLINE_BOOKS_KEY, kept_books)

        chapters = self.store.get(OFFLINE_CHAPTERS_KEY) or []
        kept_chapters = [c for c in chapters if now - c["saved_at"] < self.offline_gc_ms]
        if len(kept_chapters) != len(chapters):
            result.chapters_removed = len(chapters) - len(kept_chapters)
            self.store.set(OFFLINE_CHAPTERS_KEY, kept_chapters)

        snapshots = self._offline_passages()
        kept_snapshots = {
            k: v for k, v in snapshots.items() if now - v["saved_at"] < self.offline_gc_ms
        }
        if len(kept_snapshots) != len(snapshots):
            result.snapshots_removed = len(snapshots) - len(kept_snapshots)
            self.store.set(OFFLINE_PASSAGES_KEY, kept_snapshots)

        logger.info("Cache cleanup removed %d entries", result.total)
        return result

    def start_cleanup(self) -> asyncio.Task:
        """Run clear_old_cache every cleanup interval until stopped."""
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.get_running_loop().create_task(self._cleanup_loop())
        return self._cleanup_task

    async def stop_cleanup(self) -> None:
        if self._cleanup_task is None:
            return
        self._cleanup_task.cancel()
        try:
            await self._cleanup_task
        except asyncio.CancelledError:
            pass
        self._cleanup_task = None

    async def _cleanup_loop(self) -> None:
        while True:
            await self._sleep(self.cleanup_interval)
            try:
                self.clear_old_cache()
            except Exception:
                logger.exception("Scheduled cache cleanup failed")

    def flush(self) -> None:
        """Persist any debounced writes now."""
        self.writer.flush()

    async def close(self) -> None:
        await self.stop_cleanup()
        await self.wait_for_background()
        self.flush()

    # ========================================================================
    # Search, Verses and Other Content
    # ========================================================================

    async def search_verses(
        self,
        bible_id: str,
        query: str,
        limit: int = 20,
        book_ids: Optional[list[str]] = None,
        chapter_range: Optional[tuple[int, int]] = None,
        verse_range: Optional[tuple[int, int]] = None,
    ) -> list[SearchResult]:
        """Search a translation, optionally filtering by chapter/verse range."""
        try:
            data = await self.client.search(bible_id, query, limit=limit, book_ids=book_ids)
        except BibleAPIError as e:
            logger.warning("Search for %r failed: %s", query, e.message)
            return []

        results = []
        for verse in data.get("verses") or []:
            parsed = _parse_reference(verse.get("reference") or "")
            if parsed is None:
                continue
            book_name, chapter, number = parsed
            if chapter_range and not chapter_range[0] <= chapter <= chapter_range[1]:
                continue
            if verse_range and not verse_range[0] <= number <= verse_range[1]:
                continue
            results.append(
                SearchResult(
                    id=verse.get("id", ""),
                    bible_id=bible_id,
                    book_id=verse.get("bookId") or book_name,
                    chapter_number=chapter,
                    verse_number=number,
                    text=verse.get("text", ""),
                    reference=verse["reference"],
                )
            )
        return results

    async def get_verse(self, bible_id: str, verse_id: str) -> Optional[Verse]:
        """Fetch a single verse by ``BOOK-CHAPTER-VERSE`` id."""
        parts = verse_id.split("-")
        if len(parts) != 3 or not parts[1].isdigit() or not parts[2].isdigit():
            raise ValueError(f"Invalid verse ID format: {verse_id!r}")
        book_id, chapter, number = parts[0].upper(), int(parts[1]), int(parts[2])

        try:
            data = await self.client.get_verse(bible_id, book_id, chapter, number)
        except BibleAPIError as e:
            logger.warning("Could not fetch verse %s: %s", verse_id, e.message)
            return None
        if not data:
            return None
        return Verse(
            id=verse_id,
            bible_id=bible_id,
            book_id=book_id,
            chapter_number=chapter,
            verse_number=number,
            text=data.get("content") or data.get("text") or "",
            reference=data.get("reference"),
        )

    async def compare_passages(self, passage_id: str, bible_ids: list[str]) -> list[PassageComparison]:
        """Fetch the same passage from several translations concurrently."""
        book_id, chapter = parse_passage_id(passage_id)

        async def _one(bible_id: str) -> PassageComparison:
            try:
                passage = await self._load_passage(bible_id, f"{book_id}-{chapter}")
            except BibleAPIError as e:
                logger.info("Comparison failed for %s: %s", bible_id, e.message)
                return PassageComparison(
                    bible_id=bible_id,
                    reference=f"{book_id} {chapter}",
                    content="Failed to load content",
                    error=e.message,
                )
            return PassageComparison(
                bible_id=bible_id,
                reference=passage.reference,
                content=passage.content or "Content not available",
            )

        return list(await asyncio.gather(*(_one(bible_id) for bible_id in bible_ids)))

    async def bible_stats(self, bible_id: str) -> Optional[BibleStats]:
        try:
            data = await self.client.get_bible(bible_id)
        except BibleAPIError as e:
            if not e.falls_back_to_static:
                logger.warning("Could not load stats for %s: %s", bible_id, e.message)
                return None
            data = next((b for b in FALLBACK_BIBLES if b["id"] == bible_id), None)
            if data is None:
                return None
        return BibleStats(
            bible_id=bible_id,
            name=data.get("name") or "Unknown Translation",
            books=data.get("numberOfBooks") or 0,
            chapters=data.get("totalNumberOfChapters") or 0,
            verses=data.get("totalNumberOfVerses") or 0,
        )

    @staticmethod
    def verse_of_the_day(today: Optional[date] = None) -> VerseOfTheDay:
        """Pick the day's verse from the bundled list by day of year."""
        today = today or date.today()
        day_of_year = today.timetuple().tm_yday
        return DAILY_VERSES[day_of_year % len(DAILY_VERSES)]


def _parse_reference(reference: str) -> Optional[tuple[str, int, int]]:
    """Split ``"1 John 4:19"`` into ``("1 John", 4, 19)``."""
    book, _, location = reference.rpartition(" ")
    chapter, _, verse = location.partition(":")
    if not book or not chapter.isdigit() or not verse.split("-")[0].isdigit():
        return None
    return book, int(chapter), int(verse.split("-")[0])
