"""Reconstruct day entries from plain-text plans ("Day 1: ...", "Day 2 - ...")."""

from __future__ import annotations

import logging
import re
from typing import Any

from .errors import ParseError

logger = logging.getLogger(__name__)

# Tried in order; the first pattern that matches anything wins.
_DAY_PATTERNS = (
    re.compile(r"Day\s+(\d+)\s*:(.*?)(?=Day\s+\d+\s*:|\Z)", re.DOTALL | re.IGNORECASE),
    re.compile(r"Day\s+(\d+)\s*[-–—]\s*(.*?)(?=Day\s+\d+\s*[-–—]|\Z)", re.DOTALL | re.IGNORECASE),
)
_BULLET_RE = re.compile(r"^(?:[-•*]|\d+[.)])\s+")
_DURATION_RE = re.compile(r"\d+(?:\.\d+)?\s*(?:hours?|hrs?|minutes?|mins?)\b", re.IGNORECASE)
_QUIZ_WORDS = ("quiz", "exam", "test")


def _extract_title(content: str) -> str | None:
    """Short first line that is not itself a bullet."""
    first_line = content.split("\n")[0].strip()
    if first_line and len(first_line) < 100 and not _BULLET_RE.match(first_line):
        return first_line
    return None


def _extract_topics(content: str) -> list[str]:
    topics = []
    for line in content.split("\n"):
        trimmed = line.strip()
        if _BULLET_RE.match(trimmed):
            topic = _BULLET_RE.sub("", trimmed).strip()
            if len(topic) > 3:
                topics.append(topic)
    return topics


def parse_text_plan(text: str) -> list[dict[str, Any]]:
    """
    Day-entry dicts (same keys as the JSON shape) from free text.

    Raises:
        ParseError: text has no recognizable day markers.
    """
    for pattern in _DAY_PATTERNS:
        matches = list(pattern.finditer(text))
        if not matches:
            continue
        logger.info("Found %d days in text output", len(matches))
        entries: list[dict[str, Any]] = []
        for m in matches:
            digits = m.group(1)
            day = int(digits) if len(digits) <= 6 else None
            content = m.group(2).strip()
            lowered = content.lower()
            entries.append({
                "day": day,
                "title": _extract_title(content) or f"Day {digits}",
                "topics": _extract_topics(content),
                "estimated_time": " ".join(_DURATION_RE.findall(content)) or None,
                "type": "quiz" if any(w in lowered for w in _QUIZ_WORDS) else "regular",
            })
        return entries
    raise ParseError("Output is neither JSON nor day-by-day text")
