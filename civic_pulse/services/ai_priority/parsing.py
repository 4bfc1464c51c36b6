"""
Parsing and validation of model verdicts.

The model is asked for bare JSON but may wrap it in prose or code fences,
so the first well-formed JSON object anywhere in the text is used.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json

from civic_pulse.models.issue import PriorityLevel

_decoder = json.JSONDecoder()

REQUIRED_TEXT_FIELDS = ("reasoning", "safetyRisk", "urgencyLevel", "impactAssessment")


class VerdictError(ValueError):
    """The model reply has no usable verdict."""


@dataclass(frozen=True)
class PriorityVerdict:
    priority: PriorityLevel
    score: int
    reasoning: str
    safety_risk: str
    urgency_level: str
    impact_assessment: str


def extract_first_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first `{...}` in text that decodes to a JSON object, else None."""
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def _parse_priority(value: Any) -> PriorityLevel:
    if not isinstance(value, str):
        raise VerdictError(f"'priority' must be a string, got {type(value).__name__}")
    try:
        return PriorityLevel(value.strip().capitalize())
    except ValueError:
        raise VerdictError(f"'priority' must be one of Low/Medium/High/Critical, got {value!r}")


def _parse_score(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise VerdictError(f"'score' must be a number, got {type(value).__name__}")
    if not 0 <= value <= 100:
        raise VerdictError(f"'score' out of range 0-100: {value}")
    return int(round(value))


def parse_priority_verdict(text: str) -> PriorityVerdict:
    """
    Parse a model reply into a verdict.

    Raises:
        VerdictError: no JSON object found, or a required field is missing or mistyped
    """
    payload = extract_first_json_object(text)
    if payload is None:
        raise VerdictError("No JSON object found in model response")

    missing = [name for name in ("priority", "score") + REQUIRED_TEXT_FIELDS if name not in payload]
    if missing:
        raise VerdictError(f"Model response missing fields: {missing}")

    for name in REQUIRED_TEXT_FIELDS:
        if not isinstance(payload[name], str):
            raise VerdictError(f"'{name}' must be a string, got {type(payload[name]).__name__}")

    return PriorityVerdict(
        priority=_parse_priority(payload["priority"]),
        score=_parse_score(payload["score"]),
        reasoning=payload["reasoning"].strip(),
        safety_risk=payload["safetyRisk"].strip(),
        urgency_level=payload["urgencyLevel"].strip(),
        impact_assessment=payload["impactAssessment"].strip(),
    )
