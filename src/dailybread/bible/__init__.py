"""Bible content module.

Offline-first passage, book and chapter access on top of the API client,
plus local reading state (progress, recent chapters, bookmarks).
"""

from .library import BibleLibrary, merge_books, merge_chapters, parse_passage_id
from .schemas import (
    BookInfo,
    Bookmark,
    ChapterInfo,
    CleanupResult,
    DownloadResult,
    OfflineStats,
    OverallProgress,
    Passage,
    PassageSource,
    ReadingProgress,
    RecentChapter,
)
from .static import DAILY_VERSES, FALLBACK_BIBLES, KJV_BIBLE_ID, STATIC_BOOKS, get_static_book

__all__ = [
    "BibleLibrary",
    "merge_books",
    "merge_chapters",
    "parse_passage_id",
    "BookInfo",
    "Bookmark",
    "ChapterInfo",
    "CleanupResult",
    "DownloadResult",
    "OfflineStats",
    "OverallProgress",
    "Passage",
    "PassageSource",
    "ReadingProgress",
    "RecentChapter",
    "DAILY_VERSES",
    "FALLBACK_BIBLES",
    "KJV_BIBLE_ID",
    "STATIC_BOOKS",
    "get_static_book",
]
