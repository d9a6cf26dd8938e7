"""
Truncation repair for cut-off generation output.

Long plans regularly hit the model's output limit and arrive as
'{"daily_plan":[{...},{...},{"day":17,"title":"Recurs' with no closing tokens.
repair_truncated_json() keeps every day object that was fully closed before
the cut, drops the partial one, and closes the array and the outer object.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

from studify.core.constants import DAILY_PLAN_KEY
from .errors import RepairError

logger = logging.getLogger(__name__)

_ARRAY_MARKER = f'"{DAILY_PLAN_KEY}"'
_CLOSING_TOKENS = "]}"


@dataclass
class ScanState:
    """Lexical state while walking the day array."""
    in_string: bool = False
    escape_next: bool = False
    depth: int = 0  # brace depth relative to the array; 0 = between elements
    last_complete_end: Optional[int] = None  # offset just past the last closed element
    closed_elements: int = 0
    array_closed_at: Optional[int] = None


def needs_repair(text: str) -> bool:
    """True when text has the day-array marker but does not end with a closing brace."""
    return _ARRAY_MARKER in text and not text.rstrip().endswith("}")


def scan_complete_elements(text: str, array_start: int) -> ScanState:
    """
    Walk text from the '[' at array_start and return the final scan state.

    last_complete_end is the offset just past the most recent '}' that brought
    the depth back to the array level. Scanning stops if the array itself closes.
    """
    state = ScanState()
    for i in range(array_start + 1, len(text)):
        ch = text[i]
        if state.in_string:
            if state.escape_next:
                state.escape_next = False
            elif ch == "\\":
                state.escape_next = True
            elif ch == '"':
                state.in_string = False
            continue

        if ch == '"':
            state.in_string = True
        elif ch == "{":
            state.depth += 1
        elif ch == "}":
            state.depth -= 1
            if state.depth == 0:
                state.last_complete_end = i + 1
                state.closed_elements += 1
        elif ch == "]" and state.depth == 0:
            state.array_closed_at = i + 1
            break
    return state


def find_array_start(text: str) -> int:
    marker_at = text.find(_ARRAY_MARKER)
    if marker_at == -1:
        raise RepairError(f"No {DAILY_PLAN_KEY} key found in truncated output")
    array_start = text.find("[", marker_at + len(_ARRAY_MARKER))
    if array_start == -1:
        raise RepairError(f"No array start found after {DAILY_PLAN_KEY}")
    return array_start


def repair_truncated_json(text: str) -> str:
    """
    Truncate to the last complete day element and close the array and object.

    Raises:
        RepairError: no marker/array, no element ever closed, or the result
            still does not parse.
    """
    array_start = find_array_start(text)
    state = scan_complete_elements(text, array_start)

    if state.array_closed_at is not None:
        # Array is whole; only the enclosing object lost its closer.
        repaired = text[: state.array_closed_at] + "}"
    elif state.last_complete_end is None:
        raise RepairError("Truncated output contains no complete day entry")
    else:
        repaired = text[: state.last_complete_end] + _CLOSING_TOKENS

    try:
        json.loads(repaired)
    except json.JSONDecodeError as e:
        raise RepairError(f"Repaired output still invalid: {str(e)[:200]}", cause=e) from e

    logger.info(
        "Repaired truncated output: %d -> %d chars",
        len(text),
        len(repaired),
    )
    return repaired
