"""Extraction of JSON objects from model replies."""

import json
import re
from dataclasses import dataclass
from typing import Any, Union

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


@dataclass
class Parsed:
    value: dict[str, Any]


@dataclass
class Unparseable:
    raw: str
    reason: str


ParseResult = Union[Parsed, Unparseable]


def strip_fences(text: str) -> str:
    """Remove a surrounding ``` or ```json code fence."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_END.sub("", _FENCE_START.sub("", text))
    return text


def parse_json_reply(text: str) -> ParseResult:
    """Pull the first-to-last brace span out of a reply and decode it.

    Returns:
        Parsed with the decoded object, or Unparseable with the reason
    """
    cleaned = strip_fences(text or "")
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return Unparseable(raw=text, reason=str(e))

    if not isinstance(value, dict):
        return Unparseable(raw=text, reason="reply is not a JSON object")
    return Parsed(value=value)
