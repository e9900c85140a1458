"""AI-backed services: dream interpretation, mood analysis and mood scripture.

Every service degrades to a local fallback when the completion API is not
configured or fails.
"""

from .client import AIClientError, CompletionClient
from .dreams import DreamInterpretation, DreamInterpreter, DreamService, fallback_interpretation
from .mood import MoodAnalysis, MoodAnalyzer, ScriptureReference
from .parsing import Parsed, Unparseable, parse_json_reply
from .scripture import MoodScripture, MoodScriptureGenerator, MoodService, mood_category

__all__ = [
    "AIClientError",
    "CompletionClient",
    "DreamInterpretation",
    "DreamInterpreter",
    "DreamService",
    "fallback_interpretation",
    "MoodAnalysis",
    "MoodAnalyzer",
    "ScriptureReference",
    "MoodScripture",
    "MoodScriptureGenerator",
    "MoodService",
    "mood_category",
    "Parsed",
    "Unparseable",
    "parse_json_reply",
]
