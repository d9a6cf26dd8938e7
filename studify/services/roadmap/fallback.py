"""
Deterministic placeholder schedule used when generation output is unusable.

Regular days are titled "Day N Learning"; operators (and is_fallback_schedule)
use that title pattern to tell placeholder roadmaps from real AI content.
"""

import logging
import math
import re

from studify.core.constants import (
    DEFAULT_STUDY_HOURS,
    DEFAULT_TASK_MINUTES,
    FALLBACK_REVIEW_HOURS,
    PLAN_TYPE_FINAL_EXAM,
    PLAN_TYPE_QUIZ,
    PLAN_TYPE_REGULAR,
    QUIZ_INTERVAL_DAYS,
)
from studify.domain import CanonicalDailyPlan, CanonicalQuiz, CanonicalSchedule, CanonicalTask

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DAYS = 30

FALLBACK_TITLE_PATTERN = re.compile(r"^Day (\d+) Learning$")
FALLBACK_FINAL_TITLE = "Final Examination"

_REGULAR_TOPICS = ("Complete assigned reading", "Practice exercises", "Review concepts")


def fallback_title(day: int) -> str:
    return f"Day {day} Learning"


def _quiz_title(day: int) -> str:
    return f"Week {math.ceil(day / QUIZ_INTERVAL_DAYS)} Quiz"


def _fallback_plan(day: int, days: int) -> CanonicalDailyPlan:
    if day == days:
        return CanonicalDailyPlan(
            day_number=day,
            title=FALLBACK_FINAL_TITLE,
            study_hours=FALLBACK_REVIEW_HOURS,
            plan_type=PLAN_TYPE_FINAL_EXAM,
            tasks=[CanonicalTask(title="Final examination covering all course material", estimated_minutes=DEFAULT_TASK_MINUTES)],
            quiz=CanonicalQuiz(title=FALLBACK_FINAL_TITLE, covers_days_start=1, covers_days_end=day),
        )
    if day % QUIZ_INTERVAL_DAYS == 0:
        start = day - (QUIZ_INTERVAL_DAYS - 1)
        return CanonicalDailyPlan(
            day_number=day,
            title=_quiz_title(day),
            study_hours=FALLBACK_REVIEW_HOURS,
            plan_type=PLAN_TYPE_QUIZ,
            tasks=[CanonicalTask(title=f"Take quiz covering Days {start}-{day}", estimated_minutes=DEFAULT_TASK_MINUTES)],
            quiz=CanonicalQuiz(title=_quiz_title(day), covers_days_start=start, covers_days_end=day),
        )
    return CanonicalDailyPlan(
        day_number=day,
        title=fallback_title(day),
        study_hours=DEFAULT_STUDY_HOURS,
        plan_type=PLAN_TYPE_REGULAR,
        tasks=[CanonicalTask(title=t, estimated_minutes=DEFAULT_TASK_MINUTES) for t in _REGULAR_TOPICS],
    )


def build_fallback_schedule(days: int = DEFAULT_FALLBACK_DAYS) -> CanonicalSchedule:
    """Quiz every 7th day before the last, final exam on the last day, study days otherwise."""
    if days < 1:
        days = DEFAULT_FALLBACK_DAYS
    logger.info("Creating %d fallback daily plans", days)
    plans = [_fallback_plan(day, days) for day in range(1, days + 1)]
    return CanonicalSchedule(plans=plans, is_fallback=True)


def is_fallback_schedule(plans: list[CanonicalDailyPlan]) -> bool:
    """True when the first regular day carries the placeholder title."""
    for plan in plans:
        if plan.plan_type == PLAN_TYPE_REGULAR:
            match = FALLBACK_TITLE_PATTERN.match(plan.title)
            return bool(match) and int(match.group(1)) == plan.day_number
    return False
