"""
Envelope normalization for generation-service responses.

The webhook has answered in three shapes over time:
  - {"daily_plan": [...]}                         direct object
  - {"result": "<json text>"}                     nested result string
  - [{"content": {"parts": [{"text": "..."}]}}]    alternate-provider array

normalize_envelope() picks the matching variant and returns the candidate
payload (text to parse, or an already-structured object). Unknown shapes pass
through untouched; the validator decides what to do with them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EnvelopeKind(str, Enum):
    DIRECT_OBJECT = "direct_object"
    NESTED_STRING = "nested_string"
    ALTERNATE_ARRAY = "alternate_array"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class Envelope:
    kind: EnvelopeKind
    candidate: Any


def _alternate_array_text(payload: Any) -> str | None:
    """Return [0].content.parts[0].text when the payload has that shape."""
    if not isinstance(payload, list) or not payload:
        return None
    first = payload[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text.strip() else None


def strip_code_fence(text: str) -> str:
    """Remove markdown code fences (```json ... ```) around a JSON body."""
    s = text.strip()
    if "```" not in s:
        return s
    lines = [line for line in s.split("\n") if not line.strip().startswith("```")]
    return "\n".join(lines).strip()


def classify_envelope(payload: Any) -> EnvelopeKind:
    if isinstance(payload, dict):
        result = payload.get("result")
        if isinstance(result, (str, dict)) and result:
            return EnvelopeKind.NESTED_STRING
        return EnvelopeKind.DIRECT_OBJECT
    if _alternate_array_text(payload) is not None:
        return EnvelopeKind.ALTERNATE_ARRAY
    return EnvelopeKind.OPAQUE


def normalize_envelope(payload: Any) -> Envelope:
    """Unwrap a raw service payload into a single candidate. Never raises."""
    kind = classify_envelope(payload)

    if kind is EnvelopeKind.NESTED_STRING:
        candidate = payload["result"]
    elif kind is EnvelopeKind.ALTERNATE_ARRAY:
        candidate = _alternate_array_text(payload)
    else:
        candidate = payload

    if isinstance(candidate, str):
        candidate = strip_code_fence(candidate)

    logger.info("Generation envelope: %s (candidate %s)", kind.value, type(candidate).__name__)
    return Envelope(kind=kind, candidate=candidate)
