"""Structural sufficiency check on a parsed generation payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from studify.core.constants import DAILY_PLAN_KEY, MIN_FIRST_TITLE_LENGTH
from .errors import ValidationRejected


@dataclass
class ValidationResult:
    accepted: bool
    entries: list[Any] = field(default_factory=list)
    reason: Optional[str] = None

    def raise_if_rejected(self) -> None:
        if not self.accepted:
            raise ValidationRejected(self.reason or "payload rejected")


def _reject(reason: str) -> ValidationResult:
    return ValidationResult(accepted=False, reason=reason)


def _day_entries(parsed: Any) -> Optional[list[Any]]:
    if isinstance(parsed, dict):
        entries = parsed.get(DAILY_PLAN_KEY)
        return entries if isinstance(entries, list) else None
    if isinstance(parsed, list) and parsed and all(isinstance(e, dict) for e in parsed):
        return parsed
    return None


def validate_candidate(parsed: Any, parse_ok: bool = True) -> ValidationResult:
    """
    Checks, in order:
    1. parse succeeded
    2. the day collection exists and is non-empty
    3. the first entry has a day number and a title of at least 5 characters

    Only the first entry is inspected; the transformer deals with the rest leniently.
    """
    if not parse_ok:
        return _reject("output could not be parsed")

    entries = _day_entries(parsed)
    if entries is None:
        return _reject(f"no {DAILY_PLAN_KEY} array found")
    if not entries:
        return _reject(f"empty {DAILY_PLAN_KEY} array")

    first = entries[0]
    if not isinstance(first, dict):
        return _reject("first day entry is not an object")
    day = first.get("day", first.get("day_number"))
    if day in (None, "", 0) or isinstance(day, bool):
        return _reject("first day entry has no day number")
    title = first.get("title")
    if not isinstance(title, str) or len(title.strip()) < MIN_FIRST_TITLE_LENGTH:
        return _reject("first day entry has a missing or placeholder title")

    return ValidationResult(accepted=True, entries=entries)
