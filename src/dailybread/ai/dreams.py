"""Biblical dream interpretation.

Uses the completion API when it is configured and answers with valid JSON;
otherwise a keyword-based interpretation is built locally.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from ..journal.schemas import DreamCreate, DreamEntry, DreamSymbol, Significance
from ..journal.store import DreamStore
from .client import AIClientError, CompletionClient
from .parsing import Parsed, parse_json_reply

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a biblical dream interpreter. Always respond with valid JSON only."

PROMPT_TEMPLATE = """
Analyze this dream from a biblical and spiritual perspective:

Dream Title: "{title}"
Dream Description: "{description}"
Dream Mood: "{mood}"

Please provide a comprehensive spiritual interpretation in the following JSON format:

{{
  "interpretation": "Detailed spiritual interpretation of the dream",
  "biblicalInsights": ["Biblical insight 1", "Biblical insight 2", "Biblical insight 3"],
  "spiritualMeaning": "The deeper spiritual meaning and message",
  "symbols": [
    {{
      "symbol": "Symbol name",
      "meaning": "What this symbol represents spiritually",
      "bibleVerse": "Relevant Bible verse"
    }}
  ],
  "prayer": "A personalized prayer based on the dream",
  "significance": "low" or "medium" or "high"
}}

Focus on:
- Biblical symbolism and meaning
- Spiritual growth opportunities
- God's message through the dream
- Practical application for the dreamer's life
- Relevant Scripture references
- Encouragement and hope
"""

HIGH_SIGNIFICANCE_MOODS = ("fear", "anxious", "worried")


class DreamInterpretation(BaseModel):
    """Interpretation attached to a dream entry."""

    interpretation: str
    biblical_insights: list[str] = Field(default_factory=list)
    spiritual_meaning: str = ""
    symbols: list[DreamSymbol] = Field(default_factory=list)
    prayer: str = ""
    significance: Significance = Significance.MEDIUM
    from_ai: bool = False

    @classmethod
    def from_reply(cls, data: dict) -> "DreamInterpretation":
        """Build from the camelCase JSON the model is asked to return."""
        return cls(
            interpretation=data["interpretation"],
            biblical_insights=data.get("biblicalInsights") or [],
            spiritual_meaning=data.get("spiritualMeaning") or "",
            symbols=[
                DreamSymbol(
                    symbol=item.get("symbol", ""),
                    meaning=item.get("meaning", ""),
                    bible_verse=item.get("bibleVerse", ""),
                )
                for item in data.get("symbols") or []
                if isinstance(item, dict)
            ],
            prayer=data.get("prayer") or "",
            significance=data.get("significance") or Significance.MEDIUM,
            from_ai=True,
        )

    def entry_fields(self) -> dict:
        """Fields to merge into a stored DreamEntry."""
        fields = self.model_dump(exclude={"from_ai"})
        fields["is_analyzed"] = True
        return fields


def fallback_interpretation(title: str, description: str, mood: str) -> DreamInterpretation:
    """Keyword-driven interpretation used when the AI is unavailable."""
    lowered_title = title.lower()
    lowered_description = description.lower()

    if "water" in lowered_title or any(
        word in lowered_description for word in ("water", "ocean", "river")
    ):
        result = DreamInterpretation(
            interpretation=(
                f'Your dream about "{title}" involving water carries deep spiritual '
                "significance. Water in dreams often represents spiritual cleansing, "
                "renewal, and God's living water flowing through your life. The emotions "
                f"you felt ({mood}) during this dream are significant and may indicate "
                "your spiritual state."
            ),
            biblical_insights=[
                "Jesus offers living water that never runs dry (John 4:14)",
                "Baptism represents new life and spiritual renewal (Romans 6:4)",
                "God leads us beside quiet waters to restore our souls (Psalm 23:2)",
            ],
            spiritual_meaning=(
                "This dream suggests God is calling you to spiritual renewal and "
                "cleansing. The water represents His desire to wash away past burdens "
                "and refresh your spirit."
            ),
            symbols=[
                DreamSymbol(
                    symbol="Water",
                    meaning="Spiritual cleansing and renewal",
                    bible_verse="John 4:14 - Whoever drinks the water I give them will never thirst.",
                )
            ],
            prayer=(
                "Lord, cleanse me and renew my spirit. Help me to receive your living "
                "water and be refreshed in you. Wash away any burdens and restore my soul."
            ),
        )
    elif "fly" in lowered_title or "fly" in lowered_description:
        result = DreamInterpretation(
            interpretation=(
                f'Your dream about "{title}" involving flying carries powerful spiritual '
                "meaning. Flying dreams often represent spiritual freedom, rising above "
                "earthly concerns, and God's power to lift you above your circumstances. "
                f"Your emotional state ({mood}) during this dream reveals your spiritual "
                "condition."
            ),
            biblical_insights=[
                "We are seated with Christ in heavenly places (Ephesians 2:6)",
                "God gives us wings like eagles to soar (Isaiah 40:31)",
                "The Holy Spirit lifts us above our circumstances (Romans 8:11)",
            ],
            spiritual_meaning=(
                "This dream indicates God is calling you to rise above your "
                "circumstances and trust in His power to lift you up."
            ),
            symbols=[
                DreamSymbol(
                    symbol="Flying",
                    meaning="Spiritual freedom and elevation",
                    bible_verse=(
                        "Isaiah 40:31 - Those who hope in the Lord will renew their "
                        "strength and soar on wings like eagles."
                    ),
                )
            ],
            prayer=(
                "Father, help me to rise above my circumstances and trust in your power "
                "to lift me up. Give me wings like eagles to soar above my challenges."
            ),
        )
    else:
        result = DreamInterpretation(
            interpretation=(
                f'Your dream about "{title}" is a meaningful spiritual message from God. '
                "Dreams are one of the primary ways God communicates with His people, as "
                f"shown throughout Scripture. The emotions you experienced ({mood}) "
                "during this dream are significant and reveal the spiritual state of "
                "your heart. This dream appears to be God's way of speaking to you about "
                "your current life situation."
            ),
            biblical_insights=[
                "God speaks through dreams to His people (Joel 2:28)",
                "Dreams can reveal God's plans and purposes (Genesis 37:5-11)",
                "The Holy Spirit guides us even in our sleep (Psalm 16:7)",
            ],
            spiritual_meaning=(
                "This dream is God's way of speaking to you about your current season of "
                "life. The symbols and emotions suggest He is preparing you for spiritual "
                "growth and deeper relationship with Him."
            ),
            symbols=[
                DreamSymbol(
                    symbol="Dream emotions",
                    meaning="Your emotional state reflects your spiritual condition",
                    bible_verse=(
                        "Proverbs 15:13 - A happy heart makes the face cheerful, but "
                        "heartache crushes the spirit."
                    ),
                )
            ],
            prayer=(
                "Heavenly Father, thank you for speaking to me through this dream. Give "
                "me wisdom and understanding to discern your message. Help me apply any "
                "insights to my life and draw closer to you. In Jesus' name, Amen."
            ),
        )

    lowered_mood = mood.lower()
    if any(word in lowered_mood for word in HIGH_SIGNIFICANCE_MOODS):
        result.significance = Significance.HIGH
    return result


class DreamInterpreter:
    """Interprets dreams with the AI, falling back to keyword analysis."""

    def __init__(self, client: Optional[CompletionClient] = None):
        self.client = client

    async def interpret(self, title: str, description: str, mood: str = "") -> DreamInterpretation:
        if self.client is None or not self.client.is_configured:
            logger.info("AI not configured; using fallback dream interpretation")
            return fallback_interpretation(title, description, mood)

        prompt = PROMPT_TEMPLATE.format(title=title, description=description, mood=mood)
        try:
            reply = await self.client.complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
                max_tokens=2000,
            )
        except AIClientError as e:
            logger.warning("Dream interpretation request failed: %s", e.message)
            return fallback_interpretation(title, description, mood)

        result = parse_json_reply(reply)
        if not isinstance(result, Parsed):
            logger.warning("Could not parse dream interpretation: %s", result.reason)
            return fallback_interpretation(title, description, mood)

        try:
            return DreamInterpretation.from_reply(result.value)
        except (KeyError, ValidationError) as e:
            logger.warning("Dream interpretation reply has unexpected shape: %s", e)
            return fallback_interpretation(title, description, mood)


class DreamService:
    """Records dreams in the guest store and attaches interpretations."""

    def __init__(
        self,
        store: Optional[DreamStore] = None,
        interpreter: Optional[DreamInterpreter] = None,
    ):
        self.store = store or DreamStore()
        self.interpreter = interpreter or DreamInterpreter()

    def _fields(self, request: DreamCreate) -> dict:
        fields = request.model_dump()
        fields["date"] = request.date or datetime.now(timezone.utc).isoformat()
        return fields

    def get_dreams(self) -> list[DreamEntry]:
        return self.store.list()

    def add_dream(self, request: DreamCreate) -> DreamEntry:
        """Save a dream without interpreting it."""
        dream = self.store.create({**self._fields(request), "is_analyzed": False})
        logger.info("Dream saved: %s", dream.id)
        return dream

    async def add_and_interpret_dream(self, request: DreamCreate) -> DreamEntry:
        """Save the dream first, then interpret it and update the entry."""
        dream = self.add_dream(request)
        interpretation = await self.interpreter.interpret(
            request.title, request.description, request.mood
        )
        updated = self.store.update(dream.id, interpretation.entry_fields())
        if updated is None:
            raise ValueError("Failed to update dream with interpretation")
        return updated

    async def add_dream_fast(self, request: DreamCreate) -> DreamEntry:
        """Interpret first and save the dream once, already analyzed."""
        interpretation = await self.interpreter.interpret(
            request.title, request.description, request.mood
        )
        return self.store.create({**self._fields(request), **interpretation.entry_fields()})

    def delete_dream(self, dream_id: str) -> bool:
        return self.store.delete(dream_id)
