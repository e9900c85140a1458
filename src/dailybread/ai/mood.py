"""Mood pattern analysis with scripture recommendations."""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from ..journal.schemas import MoodEntry
from ..verses.data import VerseRecommendation
from ..verses.recommender import VerseRecommender
from .client import AIClientError, CompletionClient

logger = logging.getLogger(__name__)

POSITIVE_MOODS = ("Happy", "Joyful", "Peaceful", "Grateful")
DEFAULT_MOOD = "Peaceful"
HISTORY_IN_PROMPT = 10
MAX_SCRIPTURES = 3

SCRIPTURE_PATTERN = re.compile(r"([1-3]?\s?[A-Za-z]+\s\d+:\d+)")

SYSTEM_PROMPT = """You are a Christian mental health and spiritual wellness AI assistant. Analyze mood patterns and provide:

1. OVERALL PATTERN: Identify emotional trends and patterns
2. SPIRITUAL INSIGHTS: Connect emotions to spiritual growth opportunities
3. BIBLICAL WISDOM: Provide relevant biblical perspectives
4. IMPROVEMENT SUGGESTIONS: Practical, faith-based suggestions
5. SCRIPTURE RECOMMENDATIONS: 2-3 relevant Bible verses with explanations
6. TREND PREDICTION: Gentle guidance on potential emotional patterns

Guidelines:
- Be compassionate and non-judgmental
- Use Scripture appropriately and contextually
- Focus on hope and growth
- Keep responses concise (max 3 paragraphs per section)
- Use modern, accessible language
- Emphasize God's grace and love
- Reference the specific mood patterns and verses provided"""

SUGGESTION_SYSTEM_PROMPT = (
    "You are a Christian wellness coach. Provide brief, practical mood improvement "
    "suggestions with spiritual elements. Keep responses to 1-2 sentences."
)

SECTION_DEFAULTS = (
    "Analyzing your mood patterns...",
    "Looking for spiritual connections...",
    "Seeking biblical wisdom...",
    "Preparing suggestions...",
    "Observing trends...",
)

SUGGESTION_NOT_CONFIGURED = (
    "Take a moment to breathe and connect with God. "
    "Consider reading a Psalm that matches your current mood."
)
SUGGESTION_EMPTY = "Take a moment to pray and reflect."
SUGGESTION_API_ERROR = "Take a moment to breathe and connect with God."
SUGGESTION_FAILED = "Practice gratitude and remember God's faithfulness in this moment."


@dataclass
class ScriptureReference:
    reference: str
    text: str
    relevance: str


DEFAULT_EXTRACTED_SCRIPTURE = ScriptureReference(
    reference="Philippians 4:6-7",
    text=(
        "Do not be anxious about anything, but in every situation, by prayer and "
        "petition, with thanksgiving, present your requests to God. And the peace of "
        "God, which transcends all understanding, will guard your hearts and your "
        "minds in Christ Jesus."
    ),
    relevance="Peace in anxiety",
)

BASIC_SCRIPTURES = (
    ScriptureReference(
        reference="Psalm 34:18",
        text="The Lord is close to the brokenhearted and saves those who are crushed in spirit.",
        relevance="Comfort in difficult emotions",
    ),
    ScriptureReference(
        reference="Philippians 4:4-7",
        text=(
            "Rejoice in the Lord always. I will say it again: Rejoice! "
            "Let your gentleness be evident to all. The Lord is near."
        ),
        relevance="Peace and rejoicing",
    ),
)


@dataclass
class MoodAnalysis:
    overall_pattern: str
    spiritual_insights: str
    biblical_wisdom: str
    improvement_suggestions: str
    recommended_scriptures: list[ScriptureReference]
    trend_prediction: str
    verse_recommendations: list[VerseRecommendation] = field(default_factory=list)
    from_ai: bool = False


def positivity_ratio(history: list[MoodEntry]) -> float:
    """Percentage of entries with a positive mood type."""
    if not history:
        return 0.0
    positive = sum(1 for entry in history if entry.mood_type in POSITIVE_MOODS)
    return positive / len(history) * 100


def extract_scriptures(text: str) -> list[ScriptureReference]:
    matches = SCRIPTURE_PATTERN.findall(text)
    if not matches:
        return [DEFAULT_EXTRACTED_SCRIPTURE]
    return [
        ScriptureReference(
            reference=match.strip(),
            text="Scripture text would be retrieved from Bible API",
            relevance="Relevant to your current emotional state",
        )
        for match in matches[:MAX_SCRIPTURES]
    ]


class MoodAnalyzer:
    """Analyzes mood history, with or without the AI."""

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        recommender: Optional[VerseRecommender] = None,
    ):
        self.client = client
        self.recommender = recommender or VerseRecommender()

    @property
    def ai_enabled(self) -> bool:
        return self.client is not None and self.client.is_configured

    def recommend_verses(
        self,
        history: list[MoodEntry],
        current_mood: Optional[str] = None,
    ) -> list[VerseRecommendation]:
        """Verses for the current mood, else the latest entry, else Peaceful."""
        mood = current_mood or (history[0].mood_type if history else DEFAULT_MOOD)
        return self.recommender.recommend(mood, intensity=5, count=3)

    def basic_analysis(
        self,
        history: list[MoodEntry],
        verses: list[VerseRecommendation],
    ) -> MoodAnalysis:
        percent = int(positivity_ratio(history) + 0.5)
        return MoodAnalysis(
            overall_pattern=(
                f"You've recorded {len(history)} mood entries with {percent}% positive moods."
            ),
            spiritual_insights=(
                "Every emotion is an opportunity for spiritual growth and connection with God."
            ),
            biblical_wisdom=(
                "The Psalms show us that God welcomes all our emotions - "
                "joy, sorrow, fear, and hope."
            ),
            improvement_suggestions=(
                "Consider journaling your feelings alongside Scripture. Practice gratitude daily."
            ),
            recommended_scriptures=list(BASIC_SCRIPTURES),
            trend_prediction=(
                "Continue tracking to see patterns emerge. "
                "Your awareness is the first step toward growth."
            ),
            verse_recommendations=verses,
        )

    def build_prompt(
        self,
        history: list[MoodEntry],
        current_mood: Optional[str],
        notes: Optional[str],
        verses: list[VerseRecommendation],
    ) -> str:
        lines = ["Analyze my mood patterns and provide spiritual guidance:", ""]
        if current_mood:
            lines.append(f"Current Mood: {current_mood}")
        if notes:
            lines.append(f"Current Notes: {notes}")

        if history:
            lines.append("")
            shown = history[:HISTORY_IN_PROMPT]
            lines.append(f"Mood History (last {len(shown)} entries):")
            for index, entry in enumerate(shown, start=1):
                day = datetime.fromtimestamp(entry.created_at / 1000, tz=timezone.utc).date()
                line = f"{index}. {entry.mood_type} - {day.isoformat()}"
                if entry.note:
                    line += f' - "{entry.note}"'
                lines.append(line)

        lines.append("")
        lines.append(
            "Please provide a comprehensive analysis with spiritual insights and practical suggestions."
        )
        prompt = "\n".join(lines)

        if verses:
            listed = "\n".join(
                f'{i}. {rec.verse.reference}: "{rec.verse.text}" ({rec.reason})'
                for i, rec in enumerate(verses, start=1)
            )
            prompt += (
                f"\n\nRecommended Scriptures:\n{listed}\n\n"
                "Please reference and build upon these scripture recommendations in your analysis."
            )
        return prompt

    def parse_analysis(self, text: str, verses: list[VerseRecommendation]) -> MoodAnalysis:
        """Map blank-line separated sections of a reply onto the analysis."""
        sections = text.split("\n\n")

        def section(index: int) -> str:
            if index < len(sections) and sections[index]:
                return sections[index]
            return SECTION_DEFAULTS[index]

        return MoodAnalysis(
            overall_pattern=section(0),
            spiritual_insights=section(1),
            biblical_wisdom=section(2),
            improvement_suggestions=section(3),
            recommended_scriptures=extract_scriptures(text),
            trend_prediction=section(4),
            verse_recommendations=verses,
            from_ai=True,
        )

    async def analyze(
        self,
        history: list[MoodEntry],
        current_mood: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MoodAnalysis:
        """Analyze mood history (newest first).

        Falls back to the basic analysis when the AI is not configured, fails
        or returns nothing. Verse recommendations are always attached.
        """
        verses = self.recommend_verses(history, current_mood)
        if not self.ai_enabled:
            return self.basic_analysis(history, verses)

        try:
            text = await self.client.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_prompt(history, current_mood, notes, verses)},
                ],
                temperature=0.7,
                max_tokens=1200,
            )
        except AIClientError as e:
            logger.warning("Mood analysis request failed: %s", e.message)
            return self.basic_analysis(history, verses)

        if not text.strip():
            return self.basic_analysis(history, verses)
        return self.parse_analysis(text, verses)

    async def real_time_suggestion(
        self,
        time_of_day: str,
        activities: Optional[list[str]] = None,
        location: Optional[str] = None,
        weather: Optional[str] = None,
    ) -> str:
        """A one or two sentence faith-based suggestion for the moment."""
        if not self.ai_enabled:
            return SUGGESTION_NOT_CONFIGURED

        prompt = (
            "Based on this context, suggest a quick mood improvement activity (1-2 sentences):\n"
            f"Time: {time_of_day}\n"
            f"Activities: {', '.join(activities) if activities else 'unknown'}\n"
            f"Location: {location or 'unknown'}\n"
            f"Weather: {weather or 'unknown'}\n\n"
            "Provide a brief, practical, faith-based suggestion."
        )
        try:
            text = await self.client.complete(
                [
                    {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.8,
                max_tokens=100,
            )
        except AIClientError as e:
            logger.warning("Real-time suggestion failed: %s", e.message)
            return SUGGESTION_API_ERROR if e.status is not None else SUGGESTION_FAILED
        return text.strip() or SUGGESTION_EMPTY
