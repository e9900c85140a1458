"""Schemas for Bible content, reading state and offline storage."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PassageSource(str, Enum):
    """Where a returned passage came from."""

    CACHE = "cache"
    NETWORK = "network"
    OFFLINE = "offline"
    STALE = "stale"


# --- Books and Chapters ---


class BookInfo(BaseModel):
    """A book of a translation, static numbering merged with API metadata."""

    id: str
    name: str
    order: int
    chapters: int
    testament: Optional[str] = None
    abbreviation: Optional[str] = None
    bible_id: Optional[str] = None


class ChapterInfo(BaseModel):
    """A chapter entry used for navigation."""

    id: str
    book_id: str
    chapter_number: int = Field(ge=1)
    reference: Optional[str] = None
    number_of_verses: int = 0


# --- Passages ---


class Passage(BaseModel):
    """A chapter of text as shown to the reader."""

    id: str  # passage id, e.g. "GEN-1"
    bible_id: str
    book_id: str
    chapter_number: int
    content: str
    reference: str
    verse_count: int = 0
    source: PassageSource = PassageSource.NETWORK
    timestamp: int = 0  # epoch ms the content was fetched


class CachedPassage(BaseModel):
    """Stored cache entry, keyed by ``bibleId-bookId-chapter``."""

    content: str
    timestamp: int
    bible_id: str
    book_id: str
    chapter_number: int
    reference: str


class OfflinePassage(BaseModel):
    """Passage snapshot saved for offline reading."""

    content: str
    reference: str
    verse_count: int = 0
    bible_id: str
    book_id: str
    chapter_number: int
    saved_at: int


# --- Reading State ---


class ReadingProgress(BaseModel):
    """Last position read within a book."""

    last_chapter: int
    last_verse: int = 1
    timestamp: int
    last_synced: Optional[int] = None


class RecentChapter(BaseModel):
    book_id: str
    chapter_number: int
    book_name: str
    bible_id: str
    timestamp: int


class Bookmark(BaseModel):
    id: str
    reference: str
    content: str = Field(max_length=200)
    timestamp: int
    bible_id: str


class OverallProgress(BaseModel):
    completed: int
    total: int
    percentage: float


# --- Offline Sets ---


class OfflineBook(BaseModel):
    id: str
    name: str
    chapters: int
    bible_id: str
    saved_at: int


class OfflineChapter(BaseModel):
    id: str
    book_id: str
    chapter_number: int
    reference: Optional[str] = None
    bible_id: str
    saved_at: int


# --- Results ---


@dataclass
class DownloadResult:
    """Outcome of downloading a book for offline use."""

    downloaded: int = 0
    total: int = 0

    @property
    def complete(self) -> bool:
        return self.total > 0 and self.downloaded == self.total


@dataclass
class OfflineStats:
    total_books: int = 0
    total_chapters: int = 0
    total_passages: int = 0
    storage_size: int = 0  # characters of stored JSON


@dataclass
class CleanupResult:
    passages_removed: int = 0
    books_removed: int = 0
    chapters_removed: int = 0
    snapshots_removed: int = 0
    recent_trimmed: int = 0

    @property
    def total(self) -> int:
        return (
            self.passages_removed
            + self.books_removed
            + self.chapters_removed
            + self.snapshots_removed
            + self.recent_trimmed
        )


@dataclass
class SearchResult:
    id: str
    bible_id: str
    book_id: str
    chapter_number: int
    verse_number: int
    text: str
    reference: str


@dataclass
class Verse:
    id: str
    bible_id: str
    book_id: str
    chapter_number: int
    verse_number: int
    text: str
    reference: Optional[str] = None


@dataclass
class PassageComparison:
    """One translation's rendering of a passage, or why it failed."""

    bible_id: str
    reference: str
    content: str
    error: Optional[str] = None


@dataclass
class BibleStats:
    bible_id: str
    name: str
    books: int
    chapters: int
    verses: int
