"""Tests for the guest session."""

import random
import re

from dailybread.journal.guest import GuestSession
from dailybread.journal.schemas import (
    ConversationCreate,
    GratitudeCreate,
    MoodCreate,
    NoteCreate,
    PrayerCreate,
)
from dailybread.journal.store import GUEST_CONVERSATIONS_KEY, GUEST_GRATITUDE_KEY, GUEST_USER_ID_KEY


def test_user_id_is_created_once(store, clock):
    session = GuestSession(store, clock, random.Random(1))

    first = session.user_id()
    clock.advance(100)
    second = session.user_id()

    assert re.match(r"^guest_\d+_[0-9a-z]{9}$", first)
    assert first == second
    assert store.get(GUEST_USER_ID_KEY) == first


def test_stores_share_backing_store(store, clock):
    session = GuestSession(store, clock)
    session.notes.create(NoteCreate(title="Shared", content="store"))

    other = GuestSession(store, clock)

    assert [n.title for n in other.notes.list()] == ["Shared"]


def test_clear_all(store, clock):
    session = GuestSession(store, clock)
    session.user_id()
    session.moods.create(MoodCreate(entry_date="2024-01-01", mood_type="Grateful"))
    session.prayers.create(PrayerCreate(title="Peace"))
    session.notes.create(NoteCreate(title="Note", content="text"))
    session.conversations.create(ConversationCreate(title="Chat"))
    session.gratitude.create(GratitudeCreate(title="Sunrise", content="A quiet morning"))
    store.set("bible_bookmarks", [])

    session.clear_all()

    assert session.moods.count() == 0
    assert session.prayers.count() == 0
    assert session.notes.count() == 0
    assert store.get(GUEST_CONVERSATIONS_KEY) is None
    assert store.get(GUEST_GRATITUDE_KEY) is None
    assert session.gratitude.list() == []
    assert store.get(GUEST_USER_ID_KEY) is None
    assert store.keys() == ["bible_bookmarks"]
