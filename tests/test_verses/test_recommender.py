"""Tests for mood-based verse recommendations."""

import random

import pytest

from dailybread.verses.data import (
    DEFAULT_REASONS,
    FALLBACK_INSIGHT,
    FALLBACK_REASON,
    RANDOM_REASON,
    REASONS,
    VERSES,
)
from dailybread.verses.recommender import (
    VerseRecommender,
    category_bonus,
    relevance_score,
)


@pytest.fixture
def recommender():
    return VerseRecommender(rng=random.Random(7))


def _ids(recommendations):
    return [r.verse.id for r in recommendations]


class TestScoring:
    """Tests for relevance scoring."""

    def test_category_bonus(self):
        assert category_bonus("Peace", 2) == 2.0
        assert category_bonus("Peace", 10) == 1.0
        assert category_bonus("Courage", 6) == 1.0
        assert category_bonus("Care", 5) == 2.1
        assert category_bonus("Unknown", 5) == 1.0

    def test_score_is_capped(self):
        strength = next(v for v in VERSES if v.category == "Strength")
        assert relevance_score(strength, 10) == 10.0

    def test_zero_bonus_uses_default(self):
        peace = next(v for v in VERSES if v.category == "Peace")
        strength = next(v for v in VERSES if v.category == "Strength")
        assert relevance_score(peace, 10) == pytest.approx(9.0)
        assert relevance_score(strength, 5) == pytest.approx(7.5)


class TestRecommend:
    """Tests for mood matching and ranking."""

    def test_anxious(self, recommender):
        results = recommender.recommend("anxious", 5, 3)

        assert _ids(results) == ["care_001", "peace_001"]
        assert results[0].relevance_score == pytest.approx(8.6)
        assert results[1].relevance_score == pytest.approx(7.0)

    def test_mood_is_normalized(self, recommender):
        assert _ids(recommender.recommend("  ANXIOUS ", 5)) == ["care_001", "peace_001"]

    def test_substring_match(self, recommender):
        ids = _ids(recommender.recommend("sadness", 5, 5))
        assert set(ids) == {"comfort_001", "joy_001"}

    def test_intensity_changes_order(self, recommender):
        results = recommender.recommend("tired", 10, 3)

        assert _ids(results) == ["strength_001", "joy_001"]
        assert results[0].relevance_score == 10.0
        assert results[1].relevance_score == pytest.approx(9.8)

    def test_no_match_uses_general_verses(self, recommender):
        results = recommender.recommend("bewildered-xyz", 5, 4)

        assert [r.verse.category for r in results] == ["Comfort", "Love", "Hope", "Peace"]
        assert [round(r.relevance_score, 1) for r in results] == [8.5, 8.3, 8.0, 7.0]

    def test_count_limits_results(self, recommender):
        assert len(recommender.recommend("worried", 5, 2)) == 2

    def test_reason_comes_from_category(self, recommender):
        result = recommender.enhanced("anxious", 5)
        assert result.reason in DEFAULT_REASONS

        peace = recommender.by_category("Peace")[0]
        assert peace.reason in REASONS["Peace"]
        assert peace.insight

    def test_ranking_is_deterministic(self):
        first = VerseRecommender(rng=random.Random(1)).recommend("worried", 5, 3)
        second = VerseRecommender(rng=random.Random(99)).recommend("worried", 5, 3)
        assert _ids(first) == _ids(second) == ["care_001", "provision_001", "peace_001"]


class TestLookups:
    """Tests for category, search, random and fallback."""

    def test_by_category(self, recommender):
        results = recommender.by_category("peace")
        assert _ids(results) == ["peace_001"]

    def test_search_reference(self, recommender):
        assert _ids(recommender.search("philippians")) == ["provision_001", "peace_001"]

    def test_search_theme(self, recommender):
        assert "care_001" in _ids(recommender.search("burdens"))

    def test_empty_search_falls_back(self, recommender):
        results = recommender.search("   ", count=10)

        assert len(results) == 5
        assert all(r.relevance_score == 6.0 for r in results)
        assert results[0].reason == FALLBACK_REASON
        assert results[0].insight == FALLBACK_INSIGHT

    def test_random_verse(self, recommender):
        result = recommender.random_verse()
        assert result.verse in VERSES
        assert result.relevance_score == 7.0
        assert result.reason == RANDOM_REASON
