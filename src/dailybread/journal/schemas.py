"""Pydantic schemas for guest journal records."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# --- Moods ---


class MoodEntry(BaseModel):
    """A mood check-in. Timestamps are epoch milliseconds."""

    id: str
    entry_date: str  # YYYY-MM-DD
    mood_type: str
    intensity_rating: int = Field(5, ge=1, le=10)
    emoji: str = ""
    note: Optional[str] = None
    created_at: int
    updated_at: int
    mood_id: Optional[str] = None
    verse_reference: Optional[str] = None
    verse_text: Optional[str] = None
    verse_explanation: Optional[str] = None
    verse_application: Optional[str] = None
    verse_mood_alignment: Optional[str] = None


class MoodCreate(BaseModel):
    entry_date: str
    mood_type: str
    intensity_rating: int = Field(5, ge=1, le=10)
    emoji: str = ""
    note: Optional[str] = None
    mood_id: Optional[str] = None


# --- Dreams ---


class Significance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DreamSymbol(BaseModel):
    symbol: str
    meaning: str
    bible_verse: str = ""


class DreamEntry(BaseModel):
    """A recorded dream and, once analyzed, its interpretation."""

    id: str
    title: str
    description: str
    mood: str = ""
    date: str
    interpretation: Optional[str] = None
    biblical_insights: list[str] = Field(default_factory=list)
    spiritual_meaning: Optional[str] = None
    symbols: list[DreamSymbol] = Field(default_factory=list)
    prayer: Optional[str] = None
    significance: Optional[Significance] = None
    is_analyzed: bool = False
    created_at: datetime
    updated_at: datetime


class DreamCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    mood: str = ""
    date: Optional[str] = None  # ISO timestamp, defaults to now


# --- Notes ---


class NoteCategory(str, Enum):
    REFLECTION = "reflection"
    PRAYER = "prayer"
    STUDY = "study"
    JOURNAL = "journal"
    INSIGHT = "insight"
    GRATITUDE = "gratitude"
    OTHER = "other"


class Note(BaseModel):
    id: str
    user_id: str = ""
    title: str
    content: str
    category: NoteCategory = NoteCategory.REFLECTION
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True
    is_favorite: bool = False
    mood_rating: Optional[int] = None
    bible_reference: Optional[str] = None
    background_color: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NoteCreate(BaseModel):
    user_id: str = ""
    title: str = Field(..., min_length=1, max_length=200)
    content: str
    category: NoteCategory = NoteCategory.REFLECTION
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True
    is_favorite: bool = False
    mood_rating: Optional[int] = None
    bible_reference: Optional[str] = None
    background_color: Optional[str] = None


# --- Gratitude ---


class GratitudeEntry(BaseModel):
    id: str
    user_id: str = ""
    title: str
    content: str
    mood_rating: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True
    is_favorite: bool = False
    background_color: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class GratitudeCreate(BaseModel):
    id: Optional[str] = None  # kept when re-saving a synced entry
    user_id: str = ""
    title: str = Field(..., min_length=1, max_length=200)
    content: str
    mood_rating: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True
    is_favorite: bool = False
    background_color: Optional[str] = None


# --- Prayers ---


class PrayerStatus(str, Enum):
    ACTIVE = "active"
    ANSWERED = "answered"
    PAUSED = "paused"
    ARCHIVED = "archived"


class PrayerCategory(str, Enum):
    PERSONAL = "personal"
    FAMILY = "family"
    HEALTH = "health"
    WORK = "work"
    SPIRITUAL = "spiritual"
    COMMUNITY = "community"
    WORLD = "world"
    OTHER = "other"
    RELATIONSHIPS = "relationships"
    FINANCES = "finances"
    GRATITUDE = "gratitude"


class PrayerPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class PrayerFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class Prayer(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: PrayerStatus = PrayerStatus.ACTIVE
    category: PrayerCategory = PrayerCategory.PERSONAL
    priority: PrayerPriority = PrayerPriority.MEDIUM
    frequency: PrayerFrequency = PrayerFrequency.DAILY
    is_shared: bool = False
    is_community: bool = False
    answered_at: Optional[datetime] = None
    answered_notes: Optional[str] = None
    prayer_notes: Optional[str] = None
    gratitude_notes: Optional[str] = None
    reminder_time: Optional[str] = None
    reminder_frequency: Optional[PrayerFrequency] = None
    last_prayed_at: Optional[datetime] = None
    prayer_count: int = 0
    answered_prayer_count: int = 0
    created_at: datetime
    updated_at: datetime


class PrayerCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: PrayerCategory = PrayerCategory.PERSONAL
    priority: PrayerPriority = PrayerPriority.MEDIUM
    frequency: PrayerFrequency = PrayerFrequency.DAILY
    reminder_time: Optional[str] = None
    reminder_frequency: Optional[PrayerFrequency] = None


class PrayerStats(BaseModel):
    total: int = 0
    active: int = 0
    answered: int = 0
    paused: int = 0
    archived: int = 0
    times_prayed: int = 0
    answer_rate: float = 0.0  # percent of prayers answered


# --- AI Conversations ---


class ChatMessage(BaseModel):
    id: str
    text: str
    is_user: bool
    timestamp: datetime
    category: Optional[str] = None


class Conversation(BaseModel):
    id: str
    user_id: str = ""
    category: str = "general"
    title: str
    preview: str = ""
    last_message_time: datetime
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class ConversationCreate(BaseModel):
    user_id: str = ""
    category: str = "general"
    title: str = Field(..., min_length=1)
