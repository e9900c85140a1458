"""Local record stores for guest journal data.

Each store keeps its whole collection as one JSON array under a single
key. Every operation reads the collection, changes it and writes it back,
so concurrent writers resolve as last write wins.
"""

import logging
import random
import string
import time
from datetime import datetime, timezone
from operator import attrgetter
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..db.storage import KeyValueStore
from .schemas import (
    ChatMessage,
    Conversation,
    DreamEntry,
    GratitudeEntry,
    MoodEntry,
    Note,
    NoteCategory,
    Prayer,
    PrayerStats,
    PrayerStatus,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

GUEST_PRAYERS_KEY = "guest_prayers"
GUEST_MOODS_KEY = "guest_moods"
GUEST_DREAMS_KEY = "guest_dreams"
GUEST_NOTES_KEY = "guest_notes"
GUEST_USER_ID_KEY = "guest_user_id"
GUEST_CONVERSATIONS_KEY = "guest_ai_conversations"
GUEST_GRATITUDE_KEY = "guest_gratitude_entries"

_ID_ALPHABET = string.digits + string.ascii_lowercase
PREVIEW_LENGTH = 100

Changes = Union[BaseModel, dict[str, Any]]


def random_suffix(rng: random.Random, length: int = 9) -> str:
    return "".join(rng.choices(_ID_ALPHABET, k=length))


def _as_dict(data: Changes, exclude_unset: bool = False) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=exclude_unset)
    return dict(data)


class RecordStore(Generic[T]):
    """CRUD over one JSON collection of pydantic records.

    Subclasses set ``key``, ``prefix``, ``model`` and ``sort_field``.
    """

    key: str
    prefix: str
    model: type[T]
    sort_field = "created_at"

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the record store.

        Args:
            store: Key/value store (global database if not provided)
            clock: Wall clock in seconds, injectable for tests
            rng: Random source for id suffixes
        """
        self.store = store or KeyValueStore()
        self._clock = clock
        self._rng = rng or random.Random()

    def _now(self) -> Any:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    def _generate_id(self, prefix: Optional[str] = None) -> str:
        ms = int(self._clock() * 1000)
        return f"{prefix or self.prefix}_{ms}_{random_suffix(self._rng)}"

    def _stamp(self, fields: dict[str, Any], now: Any) -> dict[str, Any]:
        """Fill in id and timestamps for a new record."""
        return {**fields, "id": self._generate_id(), "created_at": now, "updated_at": now}

    # ========================================================================
    # Persistence
    # ========================================================================

    def _load(self) -> list[T]:
        records = []
        for item in self.store.get(self.key) or []:
            try:
                records.append(self.model.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping invalid %s record: %s", self.prefix, e)
        return records

    def _save(self, records: list[T]) -> None:
        self.store.set(self.key, [r.model_dump(mode="json") for r in records])

    # ========================================================================
    # CRUD
    # ========================================================================

    def get(self, record_id: str) -> Optional[T]:
        return next((r for r in self._load() if r.id == record_id), None)

    def create(self, data: Changes) -> T:
        """Create a record and prepend it to the collection.

        Args:
            data: Creation schema or field dict

        Returns:
            The stored record with id and timestamps
        """
        record = self.model.model_validate(self._stamp(_as_dict(data), self._now()))
        self._save([record, *self._load()])
        return record

    def update(self, record_id: str, changes: Changes) -> Optional[T]:
        """Apply a partial update. Returns None if the record does not exist."""
        records = self._load()
        for index, record in enumerate(records):
            if record.id != record_id:
                continue
            fields = _as_dict(changes, exclude_unset=True)
            fields.pop("id", None)
            fields.pop("created_at", None)
            merged = {**record.model_dump(), **fields, "updated_at": self._now()}
            updated = self.model.model_validate(merged)
            records[index] = updated
            self._save(records)
            return updated
        return None

    def delete(self, record_id: str) -> bool:
        records = self._load()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        return True

    def clear(self) -> None:
        self.store.remove(self.key)

    def count(self) -> int:
        return len(self._load())

    def list(self) -> list[T]:
        """All records, newest first by ``sort_field``."""
        return sorted(self._load(), key=attrgetter(self.sort_field), reverse=True)


class MoodStore(RecordStore[MoodEntry]):
    key = GUEST_MOODS_KEY
    prefix = "mood"
    model = MoodEntry

    def _now(self) -> int:
        return int(self._clock() * 1000)

    def by_date(self, entry_date: str) -> list[MoodEntry]:
        return [m for m in self.list() if m.entry_date == entry_date]

    def recent(self, limit: int = 10) -> list[MoodEntry]:
        return self.list()[:limit]


class DreamStore(RecordStore[DreamEntry]):
    key = GUEST_DREAMS_KEY
    prefix = "dream"
    model = DreamEntry

    def analyzed(self) -> list[DreamEntry]:
        return [d for d in self.list() if d.is_analyzed]


class NoteStore(RecordStore[Note]):
    key = GUEST_NOTES_KEY
    prefix = "note"
    model = Note
    sort_field = "updated_at"

    def search(self, query: str) -> list[Note]:
        """Case-insensitive match on title, content, tags and reference."""
        needle = query.lower().strip()
        if not needle:
            return self.list()

        def _matches(note: Note) -> bool:
            haystack = [note.title, note.content, note.bible_reference or "", *note.tags]
            return any(needle in text.lower() for text in haystack)

        return [n for n in self.list() if _matches(n)]

    def by_category(self, category: NoteCategory) -> list[Note]:
        return [n for n in self.list() if n.category == category]

    def favorites(self) -> list[Note]:
        return [n for n in self.list() if n.is_favorite]

    def by_tag(self, tag: str) -> list[Note]:
        tag = tag.lower()
        return [n for n in self.list() if tag in (t.lower() for t in n.tags)]

    def toggle_favorite(self, note_id: str) -> Optional[Note]:
        note = self.get(note_id)
        if note is None:
            return None
        return self.update(note_id, {"is_favorite": not note.is_favorite})


class GratitudeStore(RecordStore[GratitudeEntry]):
    key = GUEST_GRATITUDE_KEY
    prefix = "gratitude"
    model = GratitudeEntry

    def save(self, data: Changes) -> GratitudeEntry:
        """Create an entry, or replace the stored entry with the same id.

        Entries synced from elsewhere arrive with their id already set; a
        replaced entry keeps its original ``created_at``.
        """
        fields = _as_dict(data)
        entry_id = fields.pop("id", None)
        now = self._now()
        records = self._load()
        for index, record in enumerate(records):
            if record.id == entry_id:
                entry = self.model.model_validate(
                    {**fields, "id": entry_id, "created_at": record.created_at, "updated_at": now}
                )
                records[index] = entry
                self._save(records)
                return entry

        stamped = self._stamp(fields, now)
        if entry_id:
            stamped["id"] = entry_id
        entry = self.model.model_validate(stamped)
        self._save([entry, *records])
        return entry

    def favorites(self) -> list[GratitudeEntry]:
        return [g for g in self.list() if g.is_favorite]


class PrayerStore(RecordStore[Prayer]):
    key = GUEST_PRAYERS_KEY
    prefix = "prayer"
    model = Prayer

    def by_status(self, status: PrayerStatus) -> list[Prayer]:
        return [p for p in self.list() if p.status == status]

    def mark_answered(self, prayer_id: str, notes: Optional[str] = None) -> Optional[Prayer]:
        """Mark a prayer answered and bump its answered counter."""
        prayer = self.get(prayer_id)
        if prayer is None:
            return None
        return self.update(
            prayer_id,
            {
                "status": PrayerStatus.ANSWERED,
                "answered_at": self._now(),
                "answered_notes": notes,
                "answered_prayer_count": prayer.answered_prayer_count + 1,
            },
        )

    def record_prayed(self, prayer_id: str) -> Optional[Prayer]:
        prayer = self.get(prayer_id)
        if prayer is None:
            return None
        return self.update(
            prayer_id,
            {"prayer_count": prayer.prayer_count + 1, "last_prayed_at": self._now()},
        )

    def stats(self) -> PrayerStats:
        prayers = self._load()
        stats = PrayerStats(total=len(prayers))
        for prayer in prayers:
            setattr(stats, prayer.status.value, getattr(stats, prayer.status.value) + 1)
            stats.times_prayed += prayer.prayer_count
        if stats.total:
            stats.answer_rate = round(stats.answered / stats.total * 100, 1)
        return stats


class ConversationStore(RecordStore[Conversation]):
    key = GUEST_CONVERSATIONS_KEY
    prefix = "conv"
    model = Conversation
    sort_field = "last_message_time"

    def _stamp(self, fields: dict[str, Any], now: Any) -> dict[str, Any]:
        return {**super()._stamp(fields, now), "last_message_time": now}

    def add_message(
        self,
        conversation_id: str,
        text: str,
        is_user: bool,
        category: Optional[str] = None,
    ) -> Optional[Conversation]:
        """Append a message and refresh the conversation preview."""
        conversation = self.get(conversation_id)
        if conversation is None:
            logger.warning("Conversation not found: %s", conversation_id)
            return None
        now = self._now()
        message = ChatMessage(
            id=self._generate_id("msg"),
            text=text,
            is_user=is_user,
            timestamp=now,
            category=category,
        )
        return self.update(
            conversation_id,
            {
                "messages": [*conversation.model_dump()["messages"], message.model_dump()],
                "preview": text[:PREVIEW_LENGTH],
                "last_message_time": now,
            },
        )

    def message_count(self) -> int:
        return sum(len(c.messages) for c in self._load())
