"""
Roadmap generation pipeline.

raw payload → envelope → (string) repair → parse → validate → canonicalize → persist.
Every parse-side failure resolves to the fallback schedule; only service and
storage failures reach the caller.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import json_repair
from sqlalchemy.ext.asyncio import AsyncSession

from studify.core import get_settings
from studify.core.constants import DURATION_CUSTOM
from studify.domain import CanonicalSchedule
from studify.providers.generation import GenerationProvider
from .envelope import normalize_envelope
from .errors import ParseError, PersistenceFailure, RoadmapPipelineError
from .fallback import build_fallback_schedule
from .persistence import persist_schedule
from .repair import needs_repair, repair_truncated_json
from .text_format import parse_text_plan
from .transformer import canonicalize_entries
from .validator import validate_candidate

logger = logging.getLogger(__name__)


@dataclass
class RoadmapResult:
    user_course_id: int
    course_title: str
    processing_time_seconds: float
    day_count: int
    used_fallback: bool


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------


def resolve_fallback_days(duration_type: str, custom_days: Optional[int]) -> int:
    if duration_type == DURATION_CUSTOM and custom_days:
        return custom_days
    return get_settings().default_duration_days


def parse_candidate_text(text: str) -> Any:
    """
    Text candidate to a structure. Order: truncation repair (when triggered),
    strict json, lenient json for brace/bracket text, day-marker text.

    Raises:
        RepairError: truncated output had no complete day.
        ParseError: neither JSON nor recognizable day text.
    """
    if needs_repair(text):
        logger.info("Output looks truncated, attempting repair")
        text = repair_truncated_json(text)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    except (RecursionError, ValueError) as e:
        raise ParseError("Output could not be decoded as JSON", cause=e) from e

    if text.lstrip().startswith(("{", "[")):
        try:
            repaired = json_repair.loads(text)
        except (RecursionError, ValueError) as e:
            raise ParseError("Lenient JSON repair failed", cause=e) from e
        if isinstance(repaired, (dict, list)) and repaired:
            logger.info("Parsed output with lenient JSON repair")
            return repaired

    return parse_text_plan(text)


def _schedule_from_payload(raw: Any, fallback_days: int) -> CanonicalSchedule:
    envelope = normalize_envelope(raw)
    candidate = envelope.candidate

    if isinstance(candidate, str):
        try:
            candidate = parse_candidate_text(candidate)
        except RoadmapPipelineError as e:
            logger.warning("Using fallback schedule: %s", e)
            return build_fallback_schedule(fallback_days)

    result = validate_candidate(candidate)
    if not result.accepted:
        logger.warning("Using fallback schedule: %s", result.reason)
        return build_fallback_schedule(fallback_days)

    plans = canonicalize_entries(result.entries)
    if not plans:
        logger.warning("Using fallback schedule: no usable day entries")
        return build_fallback_schedule(fallback_days)

    logger.info("Parsed %d daily plans from generation output", len(plans))
    return CanonicalSchedule(plans=plans)


def parse_generation_payload(raw: Any, fallback_days: int) -> CanonicalSchedule:
    """Raw service payload to a canonical schedule. Never raises."""
    try:
        return _schedule_from_payload(raw, fallback_days)
    except Exception:
        logger.exception("Unexpected error while parsing generation output, using fallback schedule")
        return build_fallback_schedule(fallback_days)


# -----------------------------------------------------------------------------
# Orchestration
# -----------------------------------------------------------------------------


async def generate_roadmap(
    db: AsyncSession,
    user_id: str,
    course: str,
    duration_type: str,
    custom_days: Optional[int],
    provider: GenerationProvider,
) -> RoadmapResult:
    """
    Call the generation service, recover a schedule, and persist it in the caller's transaction.

    Raises:
        GenerationServiceError / GenerationTimeoutError: before anything is written.
        PersistenceFailure: after the session has been rolled back.
    """
    started = time.monotonic()
    logger.info("Creating roadmap for user %s: %s (%s, %s)", user_id, course, duration_type, custom_days)

    response = await provider.generate_plan(course, duration_type, custom_days)
    logger.debug("Generation output (first 500 chars): %s", response.raw_text[:500])

    schedule = parse_generation_payload(
        response.payload, resolve_fallback_days(duration_type, custom_days)
    )

    try:
        user_course = await persist_schedule(
            db, user_id, course, custom_days, schedule, response.raw_text
        )
    except PersistenceFailure:
        logger.exception("Roadmap persistence failed, rolling back")
        await db.rollback()
        raise

    elapsed = round(time.monotonic() - started, 2)
    logger.info("Roadmap %s created in %.2f seconds (fallback=%s)", user_course.id, elapsed, schedule.is_fallback)
    return RoadmapResult(
        user_course_id=user_course.id,
        course_title=course,
        processing_time_seconds=elapsed,
        day_count=schedule.day_count,
        used_fallback=schedule.is_fallback,
    )
