"""Curated verse table for mood-based recommendations."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class BibleVerse:
    """A verse tagged for mood matching.

    The comfort/encouragement/strength/peace scores are on a 1-10 scale.
    """

    id: str
    reference: str
    text: str
    category: str
    mood_tags: tuple[str, ...]
    themes: tuple[str, ...]
    book: str
    chapter: int
    verse: int
    is_ot: bool
    comfort: int
    encouragement: int
    strength: int
    peace: int
    translation: str = "NIV"


@dataclass
class VerseRecommendation:
    verse: BibleVerse
    relevance_score: float
    reason: str
    insight: Optional[str] = field(default=None)


VERSES: tuple[BibleVerse, ...] = (
    # Peace and comfort
    BibleVerse(
        id="peace_001",
        reference="Philippians 4:6-7",
        text=(
            "Do not be anxious about anything, but in every situation, by prayer and "
            "petition, with thanksgiving, present your requests to God. And the peace of "
            "God, which transcends all understanding, will guard your hearts and your "
            "minds in Christ Jesus."
        ),
        category="Peace",
        mood_tags=("anxious", "worried", "stressed", "calm", "peaceful"),
        themes=("peace", "anxiety", "prayer", "protection"),
        book="Philippians",
        chapter=4,
        verse=6,
        is_ot=False,
        comfort=9,
        encouragement=8,
        strength=7,
        peace=10,
    ),
    BibleVerse(
        id="comfort_001",
        reference="Psalm 34:18",
        text="The Lord is close to the brokenhearted and saves those who are crushed in spirit.",
        category="Comfort",
        mood_tags=("sad", "lonely", "hurt", "broken", "healing"),
        themes=("comfort", "closeness", "salvation", "brokenness"),
        book="Psalms",
        chapter=34,
        verse=18,
        is_ot=True,
        comfort=10,
        encouragement=9,
        strength=6,
        peace=8,
    ),
    BibleVerse(
        id="joy_001",
        reference="Nehemiah 8:10",
        text="Do not grieve, for the joy of the Lord is your strength.",
        category="Joy",
        mood_tags=("sad", "tired", "weak", "joyful", "happy"),
        themes=("joy", "strength", "grief", "celebration"),
        book="Nehemiah",
        chapter=8,
        verse=10,
        is_ot=True,
        comfort=7,
        encouragement=10,
        strength=9,
        peace=6,
    ),
    BibleVerse(
        id="strength_001",
        reference="Isaiah 40:31",
        text=(
            "But those who hope in the Lord will renew their strength. They will soar on "
            "wings like eagles; they will run and not grow weary, they will walk and not "
            "be faint."
        ),
        category="Strength",
        mood_tags=("tired", "weak", "weary", "motivated", "energetic"),
        themes=("strength", "hope", "endurance", "renewal"),
        book="Isaiah",
        chapter=40,
        verse=31,
        is_ot=True,
        comfort=6,
        encouragement=9,
        strength=10,
        peace=7,
    ),
    BibleVerse(
        id="hope_001",
        reference="Jeremiah 29:11",
        text=(
            'For I know the plans I have for you," declares the Lord, "plans to prosper '
            'you and not to harm you, to give you hope and a future.'
        ),
        category="Hope",
        mood_tags=("hopeful", "confused", "lost", "future", "direction"),
        themes=("hope", "plans", "future", "prosperity"),
        book="Jeremiah",
        chapter=29,
        verse=11,
        is_ot=True,
        comfort=8,
        encouragement=10,
        strength=7,
        peace=8,
    ),
    BibleVerse(
        id="love_001",
        reference="Romans 8:38-39",
        text=(
            "For I am convinced that neither death nor life, neither angels nor demons, "
            "neither the present nor the future, nor any powers, neither height nor "
            "depth, nor anything else in all creation, will be able to separate us from "
            "the love of God that is in Christ Jesus our Lord."
        ),
        category="Love",
        mood_tags=("loved", "lonely", "rejected", "cared for", "connected"),
        themes=("love", "security", "eternal", "relationship"),
        book="Romans",
        chapter=8,
        verse=38,
        is_ot=False,
        comfort=10,
        encouragement=9,
        strength=8,
        peace=9,
    ),
    BibleVerse(
        id="wisdom_001",
        reference="James 1:5",
        text=(
            "If any of you lacks wisdom, you should ask God, who gives generously to all "
            "without finding fault, and it will be given to you."
        ),
        category="Wisdom",
        mood_tags=("confused", "uncertain", "seeking", "decision", "clarity"),
        themes=("wisdom", "guidance", "asking", "generosity"),
        book="James",
        chapter=1,
        verse=5,
        is_ot=False,
        comfort=7,
        encouragement=8,
        strength=6,
        peace=8,
    ),
    BibleVerse(
        id="courage_001",
        reference="Joshua 1:9",
        text=(
            "Have I not commanded you? Be strong and courageous. Do not be afraid; do not "
            "be discouraged, for the Lord your God will be with you wherever you go."
        ),
        category="Courage",
        mood_tags=("fearful", "afraid", "courageous", "brave", "confident"),
        themes=("courage", "strength", "presence", "command"),
        book="Joshua",
        chapter=1,
        verse=9,
        is_ot=True,
        comfort=6,
        encouragement=10,
        strength=9,
        peace=7,
    ),
    BibleVerse(
        id="faith_001",
        reference="Matthew 17:20",
        text=(
            'He replied, "Because you have so little faith. Truly I tell you, if you have '
            "faith as small as a mustard seed, you can say to this mountain, 'Move from "
            "here to there,' and it will move. Nothing will be impossible for you.\""
        ),
        category="Faith",
        mood_tags=("faithful", "doubt", "believing", "trust", "disbelief"),
        themes=("faith", "power", "possibility", "mustard seed"),
        book="Matthew",
        chapter=17,
        verse=20,
        is_ot=False,
        comfort=7,
        encouragement=9,
        strength=8,
        peace=8,
    ),
    BibleVerse(
        id="guidance_001",
        reference="Psalm 119:105",
        text="Your word is a lamp for my feet, a light on my path.",
        category="Guidance",
        mood_tags=("confused", "seeking", "direction", "lost", "guided"),
        themes=("guidance", "word", "light", "path"),
        book="Psalms",
        chapter=119,
        verse=105,
        is_ot=True,
        comfort=7,
        encouragement=8,
        strength=6,
        peace=9,
    ),
    BibleVerse(
        id="forgiveness_001",
        reference="1 John 1:9",
        text=(
            "If we confess our sins, he is faithful and just and will forgive us our sins "
            "and purify us from all unrighteousness."
        ),
        category="Forgiveness",
        mood_tags=("guilty", "ashamed", "forgiven", "cleansed", "restored"),
        themes=("forgiveness", "confession", "faithfulness", "purification"),
        book="1 John",
        chapter=1,
        verse=9,
        is_ot=False,
        comfort=10,
        encouragement=9,
        strength=7,
        peace=9,
    ),
    BibleVerse(
        id="healing_001",
        reference="Jeremiah 17:14",
        text="Heal me, Lord, and I will be healed; save me and I will be saved, for you are the one I praise.",
        category="Healing",
        mood_tags=("healing", "hurt", "wounded", "restored", "healthy"),
        themes=("healing", "salvation", "praise", "restoration"),
        book="Jeremiah",
        chapter=17,
        verse=14,
        is_ot=True,
        comfort=9,
        encouragement=8,
        strength=7,
        peace=8,
    ),
    BibleVerse(
        id="provision_001",
        reference="Philippians 4:19",
        text="And my God will meet all your needs according to the riches of his glory in Christ Jesus.",
        category="Provision",
        mood_tags=("worried", "lacking", "provided", "supplied", "cared for"),
        themes=("provision", "needs", "riches", "glory"),
        book="Philippians",
        chapter=4,
        verse=19,
        is_ot=False,
        comfort=9,
        encouragement=9,
        strength=7,
        peace=8,
    ),
    BibleVerse(
        id="care_001",
        reference="1 Peter 5:7",
        text="Cast all your anxiety on him because he cares for you.",
        category="Care",
        mood_tags=("anxious", "worried", "cared for", "burdened", "supported"),
        themes=("care", "anxiety", "casting", "burdens"),
        book="1 Peter",
        chapter=5,
        verse=7,
        is_ot=False,
        comfort=10,
        encouragement=8,
        strength=6,
        peace=9,
    ),
    BibleVerse(
        id="connection_001",
        reference="Matthew 28:20",
        text="And surely I am with you always, to the very end of the age.",
        category="Connection",
        mood_tags=("lonely", "connected", "present", "abandoned", "accompanied"),
        themes=("presence", "always", "endurance", "companionship"),
        book="Matthew",
        chapter=28,
        verse=20,
        is_ot=False,
        comfort=9,
        encouragement=8,
        strength=7,
        peace=10,
    ),
)

GENERAL_CATEGORIES = ("Peace", "Comfort", "Hope", "Love")

REASONS: dict[str, tuple[str, ...]] = {
    "Peace": (
        "This verse speaks directly to finding calm amidst life's storms.",
        "God promises His peace that surpasses understanding in difficult times.",
        "Perfect for moments when anxiety threatens to overwhelm your spirit.",
    ),
    "Comfort": (
        "God draws near to those who are hurting and offers His healing presence.",
        "In your season of sorrow, find refuge in the Lord's tender care.",
        "The Lord holds every tear and binds up every broken heart.",
    ),
    "Joy": (
        "Your joy is not dependent on circumstances but on Christ within you.",
        "Even in difficult seasons, God gives strength to rejoice.",
        "Joy comes from the Lord and reflects His love in your life.",
    ),
    "Strength": (
        "God empowers you with strength for every challenge you face.",
        "In your weakness, God's power is made perfect and complete.",
        "You are stronger than you know because God's strength works through you.",
    ),
    "Hope": (
        "God has beautiful plans for your future, even when you cannot see them.",
        "Your hope is anchored in the unchanging character of God.",
        "In uncertain times, fix your eyes on the hope that God provides.",
    ),
    "Love": (
        "God's love for you is unconditional and eternal, never changing.",
        "You are deeply loved and valued beyond what you can comprehend.",
        "God's love surrounds you like a protective shield each day.",
    ),
}

DEFAULT_REASONS = (
    "This verse offers spiritual wisdom and divine perspective for your journey.",
    "God's word provides guidance and comfort for your current season.",
    "This scripture speaks to the needs of your heart today.",
)

INSIGHTS: dict[str, tuple[str, ...]] = {
    "Peace": (
        "This verse reminds us that God's peace is not dependent on our circumstances "
        "but on His presence in our lives.",
        "In a world full of anxiety, this promise of God's peace is both a comfort and "
        "a choice we can make daily.",
        "God's peace acts as a guardian for our hearts and minds, protecting us from "
        "worry and fear.",
    ),
    "Comfort": (
        "God's comfort is not just emotional but spiritual, providing deep healing for "
        "wounded souls.",
        "In times of grief, remember that God holds every tear and understands every "
        "pain you feel.",
        "The comfort God offers is intimate and personal, reaching the deepest places "
        "of your heart.",
    ),
    "Joy": (
        "Your joy is not a feeling to be pursued but a fruit of the Spirit to be cultivated.",
        "Even in challenging times, joy can coexist with difficulty because it's rooted "
        "in God's love.",
        "Joy is infectious and reflects God's nature to those around you.",
    ),
    "Strength": (
        "God's strength is not just for major battles but for everyday challenges and "
        "decisions.",
        "When you feel weak, remember that God's power works best through surrendered hearts.",
        "Strength in God is not about personal achievement but about dependence on His "
        "capabilities.",
    ),
}

DEFAULT_INSIGHTS = (
    "This verse offers both comfort and challenge, encouraging growth through adversity.",
    "God's word provides timeless wisdom that applies to both ancient and modern challenges.",
    "Scripture serves as both a mirror reflecting our needs and a window showing God's "
    "character.",
)

FALLBACK_REASON = "Timeless biblical comfort and guidance"
FALLBACK_INSIGHT = "This verse offers enduring wisdom for life's journey."
RANDOM_REASON = "Random selection for daily inspiration"
