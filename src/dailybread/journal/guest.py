"""Guest session: an anonymous local user and their journal stores."""

import logging
import random
import time
from typing import Callable, Optional

from ..db.storage import KeyValueStore
from .store import (
    GUEST_CONVERSATIONS_KEY,
    GUEST_DREAMS_KEY,
    GUEST_GRATITUDE_KEY,
    GUEST_MOODS_KEY,
    GUEST_NOTES_KEY,
    GUEST_PRAYERS_KEY,
    GUEST_USER_ID_KEY,
    ConversationStore,
    DreamStore,
    GratitudeStore,
    MoodStore,
    NoteStore,
    PrayerStore,
    random_suffix,
)

logger = logging.getLogger(__name__)

GUEST_KEYS = [
    GUEST_PRAYERS_KEY,
    GUEST_MOODS_KEY,
    GUEST_DREAMS_KEY,
    GUEST_NOTES_KEY,
    GUEST_USER_ID_KEY,
    GUEST_CONVERSATIONS_KEY,
    GUEST_GRATITUDE_KEY,
]


class GuestSession:
    """Bundles the guest stores over one key/value store."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.store = store or KeyValueStore()
        self._clock = clock
        self._rng = rng or random.Random()
        self.moods = MoodStore(self.store, clock, self._rng)
        self.dreams = DreamStore(self.store, clock, self._rng)
        self.notes = NoteStore(self.store, clock, self._rng)
        self.prayers = PrayerStore(self.store, clock, self._rng)
        self.conversations = ConversationStore(self.store, clock, self._rng)
        self.gratitude = GratitudeStore(self.store, clock, self._rng)

    def user_id(self) -> str:
        """Return the persisted guest id, creating it on first use."""
        guest_id = self.store.get(GUEST_USER_ID_KEY)
        if not guest_id:
            guest_id = f"guest_{int(self._clock() * 1000)}_{random_suffix(self._rng)}"
            self.store.set(GUEST_USER_ID_KEY, guest_id)
            logger.info("Created guest user %s", guest_id)
        return guest_id

    def clear_all(self) -> None:
        """Remove every guest record and the guest id."""
        self.store.multi_remove(GUEST_KEYS)
        logger.info("Cleared guest data")
