"""Tests for the offline-first Bible library."""

import asyncio
from datetime import date

import pytest

from dailybread.api.errors import NO_CACHED_PASSAGE_MESSAGE, BibleAPIError, ErrorCode
from dailybread.bible.library import (
    CACHED_PASSAGES_KEY,
    OFFLINE_BOOKS_KEY,
    RECENT_CHAPTERS_KEY,
    BibleLibrary,
    chapter_number_of,
    merge_chapters,
    parse_passage_id,
    truncate_content,
)
from dailybread.bible.schemas import PassageSource
from dailybread.bible.static import DAILY_VERSES, FALLBACK_BIBLES, STATIC_BOOKS

BIBLE = "bible-1"
DAY = 24 * 60 * 60


class TestPassageIds:
    """Tests for passage id parsing."""

    def test_parse(self):
        assert parse_passage_id("GEN-1") == ("GEN", 1)
        assert parse_passage_id("1jn-4") == ("1JN", 4)

    @pytest.mark.parametrize("bad", ["GEN", "GEN-0", "GEN--1", "GEN-x", "", "GENESIS-1"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_passage_id(bad)

    def test_get_passage_rejects_bad_id(self, library, fake_client):
        with pytest.raises(ValueError):
            asyncio.run(library.get_passage(BIBLE, "JHN-0"))
        assert fake_client.calls == []


class TestGetPassage:
    """Tests for cache, refresh and offline behavior."""

    def test_first_view_fetches_and_caches(self, library, fake_client):
        passage = asyncio.run(library.get_passage(BIBLE, "JHN-3"))

        assert passage.source == PassageSource.NETWORK
        assert passage.content == "John 3 text #1"
        assert passage.reference == "John 3"
        assert passage.verse_count == 3
        assert len(fake_client.passage_calls) == 1

    def test_fresh_cache_skips_network(self, library, fake_client, clock):
        async def scenario():
            first = await library.get_passage(BIBLE, "JHN-3")
            clock.advance(DAY / 2)
            second = await library.get_passage(BIBLE, "JHN-3")
            return first, second

        first, second = asyncio.run(scenario())

        assert second.source == PassageSource.CACHE
        assert second.content == first.content
        assert len(fake_client.passage_calls) == 1
        assert library.background_tasks == set()

    def test_stale_entry_served_then_refreshed(self, library, fake_client, clock):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            clock.advance(2 * DAY)
            stale = await library.get_passage(BIBLE, "JHN-3")
            await library.wait_for_background()
            refreshed = await library.get_passage(BIBLE, "JHN-3")
            return stale, refreshed

        stale, refreshed = asyncio.run(scenario())

        assert stale.source == PassageSource.CACHE
        assert stale.content == "John 3 text #1"
        assert refreshed.source == PassageSource.CACHE
        assert refreshed.content == "John 3 text #2"
        assert len(fake_client.passage_calls) == 2

    def test_refresh_is_deduplicated(self, library, fake_client, clock):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            clock.advance(2 * DAY)
            await library.get_passage(BIBLE, "JHN-3")
            await library.get_passage(BIBLE, "JHN-3")
            await library.wait_for_background()

        asyncio.run(scenario())

        assert len(fake_client.passage_calls) == 2

    def test_refresh_failure_is_swallowed(self, library, fake_client, clock):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            clock.advance(2 * DAY)
            fake_client.passage_failures["*"] = BibleAPIError(ErrorCode.SERVER_ERROR)
            passage = await library.get_passage(BIBLE, "JHN-3")
            await library.wait_for_background()
            return passage

        passage = asyncio.run(scenario())

        assert passage.content == "John 3 text #1"

    def test_no_refresh_when_offline(self, library, fake_client, clock):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            clock.advance(2 * DAY)
            fake_client.online = False
            passage = await library.get_passage(BIBLE, "JHN-3")
            return passage

        passage = asyncio.run(scenario())

        assert passage.source == PassageSource.CACHE
        assert len(fake_client.passage_calls) == 1

    def test_offline_without_data_raises(self, library, fake_client):
        fake_client.online = False

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(library.get_passage(BIBLE, "GEN-1"))

        assert exc.value.code == ErrorCode.OFFLINE
        assert exc.value.message == NO_CACHED_PASSAGE_MESSAGE
        assert fake_client.calls == []

    def test_offline_serves_expired_cache(self, library, fake_client, clock):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            clock.advance(8 * DAY)
            fake_client.online = False
            return await library.get_passage(BIBLE, "JHN-3")

        passage = asyncio.run(scenario())

        assert passage.source == PassageSource.STALE
        assert passage.content == "John 3 text #1"

    def test_fetch_failure_prefers_offline_snapshot(self, library, fake_client, clock):
        async def scenario():
            await library.download_book_for_offline("JUD", BIBLE)
            clock.advance(8 * DAY)
            fake_client.passage_failures["*"] = BibleAPIError(ErrorCode.TIMEOUT)
            return await library.get_passage(BIBLE, "JUD-1")

        passage = asyncio.run(scenario())

        assert passage.source == PassageSource.OFFLINE
        assert passage.content == "Jude 1 text #1"

    def test_fetch_failure_without_fallback_raises(self, library, fake_client):
        fake_client.passage_failures["*"] = BibleAPIError(ErrorCode.SERVER_ERROR)

        with pytest.raises(BibleAPIError) as exc:
            asyncio.run(library.get_passage(BIBLE, "JHN-3"))

        assert exc.value.code == ErrorCode.SERVER_ERROR

    def test_cache_write_is_debounced_then_flushed(self, library, store):
        async def scenario():
            await library.get_passage(BIBLE, "JHN-3")
            assert store.get(CACHED_PASSAGES_KEY) is None
            library.flush()

        asyncio.run(scenario())

        assert list(store.get(CACHED_PASSAGES_KEY)) == [f"{BIBLE}-JHN-3"]


class TestReadingState:
    """Tests for progress, recent chapters and bookmarks."""

    def test_view_updates_progress_and_recent(self, library):
        asyncio.run(library.get_passage(BIBLE, "ROM-8"))

        progress = library.reading_progress("ROM")
        assert progress.last_chapter == 8
        assert progress.last_verse == 1

        recent = library.recent_chapters()
        assert [(r.book_id, r.chapter_number, r.book_name) for r in recent] == [("ROM", 8, "Romans")]
        assert recent[0].bible_id == BIBLE

    def test_recent_is_deduplicated_and_bounded(self, library, clock):
        async def scenario():
            for chapter in range(1, 13):
                await library.get_passage(BIBLE, f"PSA-{chapter}")
                clock.advance(1)
            await library.get_passage(BIBLE, "PSA-5")

        asyncio.run(scenario())

        recent = library.recent_chapters()
        assert len(recent) == 10
        assert recent[0].chapter_number == 5
        assert [r.chapter_number for r in recent].count(5) == 1

    def test_overall_progress(self, library):
        assert library.overall_reading_progress().model_dump() == {
            "completed": 0,
            "total": 0,
            "percentage": 0,
        }

        library.update_reading_progress("GEN", 25)  # of 50
        library.update_reading_progress("RUT", 4)  # of 4

        progress = library.overall_reading_progress()
        assert progress.completed == 29
        assert progress.total == 54
        assert progress.percentage == 54

    def test_bookmark_truncation_and_id(self, library, clock):
        bookmark = library.add_bookmark("John 3:16", "x" * 250, BIBLE)

        assert len(bookmark.content) == 200
        assert bookmark.content.endswith("...")
        assert bookmark.id == f"John 3:16-{int(clock.now * 1000)}"
        assert library.is_bookmarked("John 3:16")

    def test_short_bookmark_content_kept(self):
        assert truncate_content("short") == "short"

    def test_bookmarks_newest_first_and_toggle(self, library, clock):
        library.add_bookmark("Genesis 1:1", "In the beginning", BIBLE)
        clock.advance(1)
        library.add_bookmark("John 1:1", "In the beginning was the Word", BIBLE)

        assert [b.reference for b in library.bookmarks()] == ["John 1:1", "Genesis 1:1"]

        assert library.toggle_bookmark("John 1:1", "", BIBLE) is False
        assert not library.is_bookmarked("John 1:1")
        assert library.toggle_bookmark("Psalm 23:1", "The Lord is my shepherd", BIBLE) is True
        assert library.is_bookmarked("Psalm 23:1")

    def test_remove_unknown_bookmark(self, library):
        assert library.remove_bookmark("nope") is False

    def test_sync_offline_progress(self, library, fake_client, clock):
        library.update_reading_progress("GEN", 2)

        assert asyncio.run(library.sync_offline_progress()) == 1
        assert library.reading_progress("GEN").last_synced == int(clock.now * 1000)

        fake_client.online = False
        assert asyncio.run(library.sync_offline_progress()) == 0


class TestBooksAndChapters:
    """Tests for static-first navigation lists."""

    def test_books_static_then_enhanced(self, library, fake_client):
        fake_client.books = [
            {"id": "GEN", "name": "Genesis (API)", "abbreviation": "Gen"},
            {"id": "TOB", "name": "Tobit", "isApocryphal": True},
        ]
        updates = []

        books = asyncio.run(library.list_books(BIBLE, on_update=updates.append))

        assert len(updates) == 2
        assert len(updates[0]) == 66
        assert updates[0][0].name == "Genesis"
        assert len(books) == 66
        assert books[0].name == "Genesis (API)"
        assert books[0].abbreviation == "Gen"
        assert books[0].chapters == 50
        assert "TOB" not in {b.id for b in books}

    def test_books_api_error_keeps_static(self, library, fake_client):
        fake_client.books_error = BibleAPIError(ErrorCode.UNAUTHORIZED)

        books = asyncio.run(library.list_books(BIBLE))

        assert [b.id for b in books] == [b.id for b in STATIC_BOOKS]

    def test_books_offline_uses_saved_books(self, library, fake_client):
        asyncio.run(library.download_book_for_offline("JUD", BIBLE))
        fake_client.online = False

        books = asyncio.run(library.list_books(BIBLE))

        assert [b.id for b in books] == ["JUD"]

    @pytest.mark.parametrize(
        "entry,index,expected",
        [
            ({"chapterNumber": 4}, 0, 4),
            ({"number": "7"}, 0, 7),
            ({"number": "intro", "id": "GEN.intro"}, 0, None),
            ({"id": "GEN.12"}, 0, 12),
            ({}, 2, 3),
        ],
    )
    def test_chapter_number_of(self, entry, index, expected):
        assert chapter_number_of(entry, index) == expected

    def test_merge_chapters_clips_dedupes_and_fills(self):
        api = [
            {"id": "RUT.intro", "number": "intro"},
            {"id": "RUT.1", "number": "1", "reference": "Ruth 1 (API)", "numberOfVerses": 22},
            {"id": "RUT.1", "number": "1", "reference": "duplicate"},
            {"id": "RUT.3", "number": "3"},
            {"id": "RUT.9", "number": "9"},
        ]

        chapters = merge_chapters("RUT", api)

        assert [c.chapter_number for c in chapters] == [1, 2, 3, 4]
        assert chapters[0].reference == "Ruth 1 (API)"
        assert chapters[0].number_of_verses == 22
        assert chapters[1].reference == "Ruth 2"

    def test_list_chapters_static_first(self, library, fake_client):
        fake_client.chapters["OBA"] = [{"id": "OBA.1", "number": "1", "reference": "Obadiah 1"}]
        updates = []

        chapters = asyncio.run(library.list_chapters(BIBLE, "oba", on_update=updates.append))

        assert len(updates) == 2
        assert [c.chapter_number for c in chapters] == [1]

    def test_list_chapters_offline_uses_saved(self, library, fake_client):
        asyncio.run(library.download_book_for_offline("2JN", BIBLE))
        fake_client.online = False

        chapters = asyncio.run(library.list_chapters(BIBLE, "2JN"))

        assert [c.id for c in chapters] == ["2JN.1"]


class TestOfflineDownload:
    """Tests for book downloads and offline sets."""

    def test_download_book(self, library, fake_sleep):
        progress = []

        result = asyncio.run(library.download_book_for_offline("RUT", BIBLE, on_progress=progress.append))

        assert (result.downloaded, result.total) == (4, 4)
        assert result.complete
        assert progress == [0.25, 0.5, 0.75, 1.0]
        assert fake_sleep.calls == [0.2, 0.2, 0.2]
        assert library.is_book_available_offline("RUT", BIBLE)
        assert len(library.offline_chapters(book_id="RUT", bible_id=BIBLE)) == 4

    def test_download_does_not_move_reading_position(self, library):
        asyncio.run(library.download_book_for_offline("RUT", BIBLE))

        assert library.reading_progress("RUT") is None
        assert library.recent_chapters() == []

    def test_repeat_download_has_no_duplicates(self, library):
        async def scenario():
            await library.download_book_for_offline("RUT", BIBLE)
            await library.download_book_for_offline("RUT", BIBLE)

        asyncio.run(scenario())

        assert len(library.offline_books()) == 1
        assert len(library.offline_chapters()) == 4
        assert library.offline_stats().total_chapters == 4

    def test_failed_chapters_are_skipped(self, library, fake_client):
        fake_client.passage_failures[("RUT", 2)] = BibleAPIError(ErrorCode.SERVER_ERROR)

        result = asyncio.run(library.download_book_for_offline("RUT", BIBLE))

        assert (result.downloaded, result.total) == (3, 4)
        assert not result.complete
        assert sorted(c.chapter_number for c in library.offline_chapters()) == [1, 3, 4]

    def test_unknown_book(self, library):
        with pytest.raises(ValueError):
            asyncio.run(library.download_book_for_offline("XYZ", BIBLE))

    def test_offline_filters_by_bible(self, library):
        async def scenario():
            await library.download_book_for_offline("OBA", BIBLE)
            await library.download_book_for_offline("OBA", "bible-2")

        asyncio.run(scenario())

        assert len(library.offline_books()) == 2
        assert len(library.offline_books("bible-2")) == 1
        assert library.offline_stats().total_books == 1

    def test_remove_book(self, library):
        async def scenario():
            await library.download_book_for_offline("RUT", BIBLE)
            await library.get_passage(BIBLE, "RUT-1")
            await library.download_book_for_offline("OBA", BIBLE)

        asyncio.run(scenario())

        assert library.remove_book_from_offline("RUT", BIBLE) is True
        assert not library.is_book_available_offline("RUT", BIBLE)
        assert library.offline_chapters(book_id="RUT") == []
        assert all(v["book_id"] != "RUT" for v in library._cached_passages().values())
        assert library.is_book_available_offline("OBA", BIBLE)

    def test_stats(self, library):
        asyncio.run(library.download_book_for_offline("OBA", BIBLE))

        stats = library.offline_stats()

        assert stats.total_books == 1
        assert stats.total_chapters == 1
        assert stats.total_passages == 1
        assert stats.storage_size > 0


class TestCleanup:
    """Tests for cache garbage collection."""

    def test_expired_data_is_removed(self, library, clock):
        async def scenario():
            await library.download_book_for_offline("OBA", BIBLE)
            await library.get_passage(BIBLE, "JHN-1")
            library.flush()

        asyncio.run(scenario())
        clock.advance(31 * DAY)

        result = library.clear_old_cache()

        assert result.passages_removed == 2
        assert result.books_removed == 0
        assert library.offline_books() != []

        clock.advance(60 * DAY)
        result = library.clear_old_cache()

        assert result.books_removed == 1
        assert result.chapters_removed == 1
        assert result.snapshots_removed == 1
        assert library.offline_books() == []

    def test_recent_trimmed_to_fifty(self, library, store, clock):
        store.set(
            RECENT_CHAPTERS_KEY,
            [
                {
                    "book_id": "PSA",
                    "chapter_number": n,
                    "book_name": "Psalms",
                    "bible_id": BIBLE,
                    "timestamp": n,
                }
                for n in range(1, 61)
            ],
        )

        result = library.clear_old_cache()

        kept = store.get(RECENT_CHAPTERS_KEY)
        assert result.recent_trimmed == 10
        assert len(kept) == 50
        assert kept[0]["chapter_number"] == 60

    def test_nothing_to_clean(self, library):
        assert library.clear_old_cache().total == 0

    def test_periodic_cleanup(self, library, fake_sleep, store):
        store.set(OFFLINE_BOOKS_KEY, [
            {"id": "OBA", "name": "Obadiah", "chapters": 1, "bible_id": BIBLE, "saved_at": 0}
        ])

        async def scenario():
            library.start_cleanup()
            for _ in range(5):
                await asyncio.sleep(0)
            await library.stop_cleanup()

        asyncio.run(scenario())

        assert fake_sleep.calls[0] == 6 * 3600
        assert library.offline_books() == []


class TestContent:
    """Tests for search, verses, comparison and metadata."""

    def test_fetch_bibles_fallback(self, library, fake_client):
        fake_client.bibles_error = BibleAPIError(ErrorCode.UNAUTHORIZED)
        bibles = asyncio.run(library.fetch_bibles())
        assert [b["id"] for b in bibles] == [b["id"] for b in FALLBACK_BIBLES]

    def test_fetch_bibles_other_errors_propagate(self, library, fake_client):
        fake_client.bibles_error = BibleAPIError(ErrorCode.TIMEOUT)
        with pytest.raises(BibleAPIError):
            asyncio.run(library.fetch_bibles())

    def test_search_filters(self, library, fake_client):
        fake_client.search_data = {
            "verses": [
                {"id": "JHN.3.16", "bookId": "JHN", "reference": "John 3:16", "text": "For God so loved"},
                {"id": "JHN.15.12", "bookId": "JHN", "reference": "John 15:12", "text": "Love each other"},
                {"id": "1JN.4.19", "bookId": "1JN", "reference": "1 John 4:19", "text": "We love"},
            ]
        }

        results = asyncio.run(
            library.search_verses(BIBLE, "love", chapter_range=(3, 4), verse_range=(10, 20))
        )

        assert [(r.book_id, r.chapter_number, r.verse_number) for r in results] == [
            ("JHN", 3, 16),
            ("1JN", 4, 19),
        ]

    def test_search_error_returns_empty(self, library, fake_client, monkeypatch):
        async def failing(*args, **kwargs):
            raise BibleAPIError(ErrorCode.SERVER_ERROR)

        monkeypatch.setattr(fake_client, "search", failing)

        assert asyncio.run(library.search_verses(BIBLE, "love")) == []

    def test_get_verse(self, library, fake_client):
        fake_client.verse_data = {"content": "Jesus wept.", "reference": "John 11:35"}

        verse = asyncio.run(library.get_verse(BIBLE, "JHN-11-35"))

        assert verse.text == "Jesus wept."
        assert fake_client.calls[-1] == ("verse", BIBLE, "JHN", 11, 35)

    def test_get_verse_bad_id(self, library):
        with pytest.raises(ValueError):
            asyncio.run(library.get_verse(BIBLE, "JHN-11"))

    def test_compare_passages(self, library, fake_client):
        async def scenario():
            return await library.compare_passages("PSA-23", ["good", "bad"])

        original = fake_client.get_passage

        async def selective(bible_id, book_id, chapter):
            if bible_id == "bad":
                raise BibleAPIError(ErrorCode.FORBIDDEN)
            return await original(bible_id, book_id, chapter)

        fake_client.get_passage = selective
        results = asyncio.run(scenario())

        assert [r.bible_id for r in results] == ["good", "bad"]
        assert results[0].content.startswith("Psalms 23")
        assert results[1].content == "Failed to load content"
        assert results[1].error is not None

    def test_bible_stats(self, library, fake_client):
        fake_client.bible_info = {
            "name": "Test Bible",
            "numberOfBooks": 66,
            "totalNumberOfChapters": 1189,
            "totalNumberOfVerses": 31102,
        }

        stats = asyncio.run(library.bible_stats(BIBLE))

        assert (stats.name, stats.books, stats.chapters, stats.verses) == ("Test Bible", 66, 1189, 31102)

    def test_verse_of_the_day(self):
        assert BibleLibrary.verse_of_the_day(date(2024, 1, 1)) == DAILY_VERSES[1]
        assert BibleLibrary.verse_of_the_day(date(2024, 1, 30)) == DAILY_VERSES[0]
