"""Scripture suggestions for a mood check-in.

The completion API is asked for one verse with an explanation. When it is
not configured, fails, or answers without a reference and verse text, a
curated verse for the mood's category is used instead.
"""

import logging
import random
import re
from typing import Optional

from pydantic import BaseModel

from ..journal.schemas import MoodCreate, MoodEntry
from ..journal.store import MoodStore
from .client import AIClientError, CompletionClient
from .parsing import Parsed, parse_json_reply

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a Christian spiritual advisor with deep knowledge of the Bible. Your task is to recommend relevant Bible verses based on someone's current mood and emotional state.

Guidelines:
- Always provide accurate Bible verse references
- Choose verses that directly address the emotional state
- Provide helpful explanations and practical applications
- Be encouraging and compassionate
- Keep responses concise for mobile reading"""

PROMPT_TEMPLATE = """Based on the following mood information, recommend a Bible verse that would be encouraging and relevant:

Mood: {mood_type}
Intensity: {intensity}/10
Category: {category}
{context}
Please respond with a JSON object in this exact format (no markdown, just pure JSON):
{{
  "reference": "Book Chapter:Verse (e.g., Philippians 4:6-7)",
  "verse": "The full text of the verse",
  "explanation": "A brief explanation of why this verse is relevant to this mood (2-3 sentences)",
  "application": "A practical way to apply this verse today (1-2 sentences)",
  "moodAlignment": "How this verse specifically addresses the {mood_type} feeling (1 sentence)"
}}"""

DEFAULT_EXPLANATION = "This verse offers comfort and guidance for your current mood."
DEFAULT_APPLICATION = (
    "Take this scripture to heart and allow God's word to bring peace to your situation."
)
DEFAULT_CATEGORY = "challenging"

# Checked in order; the first category with a matching word wins.
MOOD_CATEGORY_WORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("positive", ("happy", "joyful", "grateful", "blessed", "excited", "loved", "proud")),
    ("calm", ("peaceful", "calm", "content", "prayerful")),
    ("energetic", ("motivated", "focused", "creative", "inspired", "accomplished")),
    (
        "challenging",
        ("sad", "anxious", "stressed", "angry", "frustrated", "tired", "lonely", "confused", "fearful"),
    ),
    ("curious", ("curious", "surprised", "hopeful")),
    ("spiritual", ("inspired", "connected", "faithful")),
)

_MOOD_PHRASE = re.compile(r"your .* mood", re.IGNORECASE)


class MoodScripture(BaseModel):
    """A verse chosen for a mood, with its explanation."""

    reference: str
    verse: str
    explanation: str
    application: str
    mood_alignment: str
    from_ai: bool = False

    def entry_fields(self) -> dict:
        """Fields to merge into a stored MoodEntry."""
        return {
            "verse_reference": self.reference,
            "verse_text": self.verse,
            "verse_explanation": self.explanation,
            "verse_application": self.application,
            "verse_mood_alignment": self.mood_alignment,
        }


FALLBACK_SCRIPTURES: dict[str, tuple[MoodScripture, ...]] = {
    "positive": (
        MoodScripture(
            reference="Psalm 118:24",
            verse="This is the day that the Lord has made; let us rejoice and be glad in it.",
            explanation="This verse reminds us that every day is a gift from God, worthy of celebration.",
            application="Start your day with gratitude, acknowledging God's blessings in your life.",
            mood_alignment="Perfect for your joyful spirit - celebrate God's goodness today!",
        ),
        MoodScripture(
            reference="James 1:17",
            verse=(
                "Every good and perfect gift is from above, coming down from the Father "
                "of the heavenly lights."
            ),
            explanation="All the good things in our lives ultimately come from God's loving hand.",
            application="Take a moment to thank God for the specific blessings you're experiencing.",
            mood_alignment="Your positive mood reflects God's goodness in your life.",
        ),
    ),
    "calm": (
        MoodScripture(
            reference="Psalm 46:10",
            verse=(
                "Be still, and know that I am God; I will be exalted among the nations, "
                "I will be exalted in the earth."
            ),
            explanation="In moments of peace, we can deeply connect with God's presence.",
            application="Use this peaceful moment to deepen your awareness of God's presence.",
            mood_alignment="Your calm spirit creates space for deeper communion with God.",
        ),
        MoodScripture(
            reference="Isaiah 26:3",
            verse=(
                "You will keep in perfect peace those whose minds are steadfast, because "
                "they trust in you."
            ),
            explanation="True peace comes from keeping our focus on God and trusting Him completely.",
            application="Continue to fix your thoughts on God to maintain this peaceful state.",
            mood_alignment="Your peaceful heart is a reflection of trust in the Lord.",
        ),
    ),
    "challenging": (
        MoodScripture(
            reference="Isaiah 41:10",
            verse=(
                "So do not fear, for I am with you; do not be dismayed, for I am your God. "
                "I will strengthen you and help you."
            ),
            explanation="God promises His presence and strength during our most difficult moments.",
            application="Remember that you are not alone - God is with you right now.",
            mood_alignment="In this challenging time, let God's promise of presence comfort you.",
        ),
        MoodScripture(
            reference="Psalm 34:18",
            verse="The Lord is close to the brokenhearted and saves those who are crushed in spirit.",
            explanation="God draws especially near to us when we're struggling emotionally.",
            application="Know that God is particularly close to you in this difficult moment.",
            mood_alignment="Your struggle is seen by God, and He is near to comfort you.",
        ),
    ),
    "energetic": (
        MoodScripture(
            reference="Colossians 3:23",
            verse=(
                "Whatever you do, work at it with all your heart, as working for the Lord, "
                "not for human masters."
            ),
            explanation="Our energy and motivation can be channeled into serving God.",
            application="Direct your energy toward activities that honor God today.",
            mood_alignment="Your motivated spirit can accomplish great things for God's glory.",
        ),
    ),
    "curious": (
        MoodScripture(
            reference="Proverbs 2:6",
            verse="For the Lord gives wisdom; from his mouth come knowledge and understanding.",
            explanation="God is the source of all true wisdom and understanding.",
            application="Seek God's wisdom as you explore and learn new things.",
            mood_alignment="Your curiosity is a gift - use it to seek deeper understanding of God.",
        ),
    ),
    "spiritual": (
        MoodScripture(
            reference="Psalm 63:1",
            verse=(
                "You, God, are my God, earnestly I seek you; I thirst for you, my whole "
                "being longs for you."
            ),
            explanation="A longing for God reflects a healthy spiritual hunger.",
            application="Nurture this spiritual hunger through prayer and Scripture reading.",
            mood_alignment="Your spiritual longing shows a heart that desires God above all.",
        ),
    ),
}


def mood_category(mood_type: str) -> str:
    """Map a mood name onto a scripture category."""
    lowered = mood_type.lower()
    for category, words in MOOD_CATEGORY_WORDS:
        if any(word in lowered for word in words):
            return category
    return DEFAULT_CATEGORY


def fallback_scripture(
    category: str,
    mood_type: str,
    rng: Optional[random.Random] = None,
) -> MoodScripture:
    """Pick a curated verse for the category and name the mood in its alignment."""
    choices = FALLBACK_SCRIPTURES.get(category) or FALLBACK_SCRIPTURES[DEFAULT_CATEGORY]
    scripture = (rng or random).choice(choices)
    alignment = _MOOD_PHRASE.sub(
        lambda _: f"your {mood_type} mood", scripture.mood_alignment, count=1
    )
    return scripture.model_copy(update={"mood_alignment": alignment})


class MoodScriptureGenerator:
    """Suggests a verse for a mood, via the AI when possible."""

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self._rng = rng or random.Random()

    async def generate(
        self,
        mood_type: str,
        intensity: int = 5,
        category: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MoodScripture:
        category = category or mood_category(mood_type)
        if self.client is None or not self.client.is_configured:
            logger.info("AI not configured; using curated scripture for %s", category)
            return fallback_scripture(category, mood_type, self._rng)

        prompt = PROMPT_TEMPLATE.format(
            mood_type=mood_type,
            intensity=intensity,
            category=category,
            context=f"Additional context: {notes}\n" if notes else "",
        )
        try:
            reply = await self.client.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=800,
            )
        except AIClientError as e:
            logger.warning("Mood scripture request failed: %s", e.message)
            return fallback_scripture(category, mood_type, self._rng)

        if not reply.strip():
            logger.warning("Mood scripture reply was empty")
            return fallback_scripture(category, mood_type, self._rng)

        result = parse_json_reply(reply)
        if not isinstance(result, Parsed):
            logger.warning("Could not parse mood scripture: %s", result.reason)
            return fallback_scripture(category, mood_type, self._rng)

        data = result.value
        if not data.get("reference") or not data.get("verse"):
            logger.warning("Mood scripture reply is missing reference or verse")
            return fallback_scripture(category, mood_type, self._rng)

        return MoodScripture(
            reference=str(data["reference"]),
            verse=str(data["verse"]),
            explanation=data.get("explanation") or DEFAULT_EXPLANATION,
            application=data.get("application") or DEFAULT_APPLICATION,
            mood_alignment=data.get("moodAlignment") or f"Specifically chosen for your {mood_type} mood",
            from_ai=True,
        )


class MoodService:
    """Records mood check-ins and attaches a suggested verse."""

    def __init__(
        self,
        store: Optional[MoodStore] = None,
        generator: Optional[MoodScriptureGenerator] = None,
    ):
        self.store = store or MoodStore()
        self.generator = generator or MoodScriptureGenerator()

    def add_mood(self, request: MoodCreate) -> MoodEntry:
        mood = self.store.create(request)
        logger.info("Mood saved: %s", mood.id)
        return mood

    async def add_mood_with_scripture(self, request: MoodCreate) -> MoodEntry:
        """Suggest a verse for the mood and save both in one entry."""
        scripture = await self.generator.generate(
            request.mood_type, request.intensity_rating, notes=request.note
        )
        return self.store.create({**request.model_dump(), **scripture.entry_fields()})

    async def attach_scripture(self, mood_id: str) -> Optional[MoodEntry]:
        """Suggest a verse for an existing entry. Returns None if it is gone."""
        mood = self.store.get(mood_id)
        if mood is None:
            return None
        scripture = await self.generator.generate(
            mood.mood_type, mood.intensity_rating, notes=mood.note
        )
        return self.store.update(mood_id, scripture.entry_fields())
