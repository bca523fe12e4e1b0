"""
JSON payload extraction for LLM replies.

Models are asked for a bare JSON object but frequently wrap it in a
markdown code fence. extract_json_payload() strips that fence and parses
what is left. It never raises: the caller gets either the parsed object or
the reason parsing failed, and picks its own per-field defaults.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

# Opening fence with optional language tag, and the closing fence
FENCE_OPEN_RE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
FENCE_CLOSE_RE = re.compile(r"\n?```$")


@dataclass(frozen=True)
class JsonPayload:
    """Outcome of parsing an LLM reply: exactly one of data/error is set."""

    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ``` or ```json fence, if present."""
    text = text.strip()
    if text.startswith("```"):
        text = FENCE_OPEN_RE.sub("", text, count=1)
        text = FENCE_CLOSE_RE.sub("", text, count=1)
    return text.strip()


def extract_json_payload(text: Optional[str]) -> JsonPayload:
    """
    Parse a JSON object out of a (possibly fenced) LLM reply.

    Args:
        text: Raw reply text

    Returns:
        JsonPayload with data on success, error on failure
    """
    if not text or not text.strip():
        return JsonPayload(error="empty response")

    candidate = strip_code_fence(text)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        return JsonPayload(error=f"invalid JSON: {e}")

    if not isinstance(parsed, dict):
        return JsonPayload(error=f"expected a JSON object, got {type(parsed).__name__}")
    return JsonPayload(data=parsed)


def clamp_confidence(value: Any, default: float = 0.5) -> float:
    """
    Coerce a model-reported score into [0, 1].

    Missing, zero, boolean or non-numeric values fall back to ``default``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    if number != number or not number:  # NaN or zero
        return default
    return max(0.0, min(1.0, number))


def clamp_score(value: Any) -> Optional[float]:
    """Like clamp_confidence, but a missing score stays missing (zero is kept)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:
        return None
    return max(0.0, min(1.0, number))


def optional_str(value: Any) -> Optional[str]:
    """Return value as a non-empty string, or None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def optional_bool(value: Any) -> Optional[bool]:
    """Return value if it is a real boolean, else None."""
    return value if isinstance(value, bool) else None
