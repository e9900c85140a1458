"""Guest journal module.

Local-only storage for moods, dreams, notes, prayers, gratitude entries and AI
conversations.
"""

from .guest import GuestSession
from .schemas import (
    Conversation,
    DreamCreate,
    DreamEntry,
    GratitudeCreate,
    GratitudeEntry,
    MoodCreate,
    MoodEntry,
    Note,
    NoteCategory,
    NoteCreate,
    Prayer,
    PrayerCreate,
    PrayerStats,
    PrayerStatus,
)
from .store import (
    ConversationStore,
    DreamStore,
    GratitudeStore,
    MoodStore,
    NoteStore,
    PrayerStore,
    RecordStore,
)

__all__ = [
    "GuestSession",
    "Conversation",
    "DreamCreate",
    "DreamEntry",
    "GratitudeCreate",
    "GratitudeEntry",
    "MoodCreate",
    "MoodEntry",
    "Note",
    "NoteCategory",
    "NoteCreate",
    "Prayer",
    "PrayerCreate",
    "PrayerStats",
    "PrayerStatus",
    "ConversationStore",
    "DreamStore",
    "GratitudeStore",
    "MoodStore",
    "NoteStore",
    "PrayerStore",
    "RecordStore",
]
