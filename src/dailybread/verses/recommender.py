"""Mood-aligned verse recommendations over the curated verse table."""

import random
from typing import Callable, Optional

from .data import (
    DEFAULT_INSIGHTS,
    DEFAULT_REASONS,
    FALLBACK_INSIGHT,
    FALLBACK_REASON,
    GENERAL_CATEGORIES,
    INSIGHTS,
    RANDOM_REASON,
    REASONS,
    VERSES,
    BibleVerse,
    VerseRecommendation,
)

BASE_SCORE = 5.0
MAX_SCORE = 10.0
FALLBACK_LIMIT = 5

_CATEGORY_BONUS: dict[str, Callable[[float], float]] = {
    "Peace": lambda i: max(0.0, (6 - i) * 0.5),  # favours low intensity
    "Comfort": lambda i: 2.0,
    "Joy": lambda i: max(0.0, (i - 4) * 0.3),
    "Strength": lambda i: max(0.0, (i - 5) * 0.4),
    "Hope": lambda i: 1.5,
    "Love": lambda i: 1.8,
    "Wisdom": lambda i: 1.2,
    "Courage": lambda i: max(0.0, (i - 6) * 0.3),
    "Faith": lambda i: 1.4,
    "Guidance": lambda i: 1.3,
    "Forgiveness": lambda i: 2.2,
    "Healing": lambda i: 2.0,
    "Provision": lambda i: 1.6,
    "Care": lambda i: 2.1,
    "Connection": lambda i: 1.9,
}
DEFAULT_BONUS = 1.0


def category_bonus(category: str, intensity: float) -> float:
    bonus = _CATEGORY_BONUS.get(category)
    value = bonus(intensity) if bonus else 0.0
    return value or DEFAULT_BONUS


def relevance_score(verse: BibleVerse, intensity: float) -> float:
    score = BASE_SCORE + intensity / 10 * 3.0 + category_bonus(verse.category, intensity)
    return min(MAX_SCORE, score)


def matches_mood(verse: BibleVerse, mood: str) -> bool:
    return any(mood in tag or tag in mood for tag in verse.mood_tags)


class VerseRecommender:
    """Ranks the verse table against a mood and intensity.

    Ordering depends only on the inputs. The random source only picks the
    reason and insight wording.
    """

    def __init__(self, rng: Optional[random.Random] = None, verses: tuple[BibleVerse, ...] = VERSES):
        self._rng = rng or random.Random()
        self.verses = verses

    def _reason(self, verse: BibleVerse) -> str:
        return self._rng.choice(REASONS.get(verse.category, DEFAULT_REASONS))

    def _insight(self, verse: BibleVerse) -> str:
        return self._rng.choice(INSIGHTS.get(verse.category, DEFAULT_INSIGHTS))

    def _rank(self, verses: list[BibleVerse], intensity: float, count: int) -> list[VerseRecommendation]:
        ranked = sorted(verses, key=lambda v: relevance_score(v, intensity), reverse=True)
        return [
            VerseRecommendation(
                verse=verse,
                relevance_score=relevance_score(verse, intensity),
                reason=self._reason(verse),
                insight=self._insight(verse),
            )
            for verse in ranked[:count]
        ]

    def recommend(self, mood: str, intensity: float = 5, count: int = 3) -> list[VerseRecommendation]:
        """Verses whose mood tags match the mood, best first.

        A tag matches when either string contains the other, ignoring case.
        With no match the general Peace/Comfort/Hope/Love verses are ranked.
        """
        normalized = mood.lower().strip()
        matching = [v for v in self.verses if matches_mood(v, normalized)]
        if not matching:
            matching = [v for v in self.verses if v.category in GENERAL_CATEGORIES]
        return self._rank(matching, intensity, count)

    def enhanced(self, mood: str, intensity: float = 5) -> Optional[VerseRecommendation]:
        recommendations = self.recommend(mood, intensity, 1)
        return recommendations[0] if recommendations else None

    def by_category(self, category: str, count: int = 5) -> list[VerseRecommendation]:
        wanted = category.lower()
        return self._rank([v for v in self.verses if v.category.lower() == wanted], 5, count)

    def random_verse(self) -> VerseRecommendation:
        verse = self._rng.choice(self.verses)
        return VerseRecommendation(
            verse=verse,
            relevance_score=7.0,
            reason=RANDOM_REASON,
            insight=self._insight(verse),
        )

    def search(self, query: str, count: int = 10) -> list[VerseRecommendation]:
        """Match text, reference or themes. An empty query gives the fallback set."""
        needle = query.lower().strip()
        if not needle:
            return self.fallback(count)
        matching = [
            v
            for v in self.verses
            if needle in v.text.lower()
            or needle in v.reference.lower()
            or any(needle in theme.lower() for theme in v.themes)
        ]
        return self._rank(matching, 5, count)

    def fallback(self, count: int = 3) -> list[VerseRecommendation]:
        return [
            VerseRecommendation(
                verse=verse,
                relevance_score=6.0,
                reason=FALLBACK_REASON,
                insight=FALLBACK_INSIGHT,
            )
            for verse in self.verses[: min(count, FALLBACK_LIMIT)]
        ]
