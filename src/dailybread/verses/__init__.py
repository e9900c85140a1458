"""Verse recommendation module."""

from .data import VERSES, BibleVerse, VerseRecommendation
from .recommender import VerseRecommender, category_bonus, relevance_score

__all__ = [
    "VERSES",
    "BibleVerse",
    "VerseRecommendation",
    "VerseRecommender",
    "category_bonus",
    "relevance_score",
]
