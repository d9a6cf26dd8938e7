"""
Day entry → CanonicalDailyPlan mapping.

SECTIONS (in order):
  1. Models       - Lenient pydantic models for raw day entries (every field optional).
  2. Fields       - Pure per-field extractors: hours, title, plan type, tasks, quiz, resources.
  3. Day mapping  - to_canonical_plan (one entry) and canonicalize_entries (whole schedule).

Nothing here touches the database or raises on malformed content: a bad field
falls back to its default, a bad entry is skipped with a warning.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from studify.core.constants import (
    DEFAULT_STUDY_HOURS,
    DEFAULT_TASK_MINUTES,
    MAX_DAY_NUMBER,
    MAX_STUDY_HOURS,
    MAX_TASK_MINUTES,
    PLAN_TYPE_FINAL_EXAM,
    PLAN_TYPE_QUIZ,
    PLAN_TYPE_REGULAR,
    PLAN_TYPES,
    RESOURCE_TYPE_LINK,
)
from studify.domain import (
    CanonicalDailyPlan,
    CanonicalOption,
    CanonicalQuestion,
    CanonicalQuiz,
    CanonicalResource,
    CanonicalTask,
)

logger = logging.getLogger(__name__)


# =============================================================================
# MODELS: raw day entries (Pydantic)
# =============================================================================


def _str_or_none(v: Any) -> Optional[str]:
    if v is None or isinstance(v, (dict, list)):
        return None
    s = str(v).strip()
    return s or None


def _int_or_none(v: Any) -> Optional[int]:
    """Coerce 3, 3.0, "3", "Day 3" to 3; anything else, or anything above MAX_DAY_NUMBER, to None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        n = v
    elif isinstance(v, float):
        if not v.is_integer():
            return None
        n = int(v)
    else:
        m = re.search(r"\d+", str(v))
        if not m or len(m.group(0)) > len(str(MAX_DAY_NUMBER)):
            return None
        n = int(m.group(0))
    return n if n <= MAX_DAY_NUMBER else None


def _first_present(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data.get(key)
    return None


class QuestionEntry(BaseModel):
    text: Optional[str] = None
    options: list[Any] = Field(default_factory=list)
    correct_answer: Optional[Any] = None
    explanation: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_question(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        options = _first_present(data, "options", "choices", "answers")
        return {
            "text": _str_or_none(_first_present(data, "question", "text", "prompt")),
            "options": options if isinstance(options, list) else [],
            "correct_answer": _first_present(data, "correct_answer", "correctAnswer", "answer"),
            "explanation": _str_or_none(data.get("explanation")),
        }


class QuizBlock(BaseModel):
    title: Optional[str] = None
    covers_days_start: Optional[int] = None
    covers_days_end: Optional[int] = None
    questions: list[QuestionEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_quiz(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        start = _int_or_none(data.get("covers_days_start"))
        end = _int_or_none(data.get("covers_days_end"))
        covers = data.get("covers_days")
        if isinstance(covers, list) and covers:
            start = start if start is not None else _int_or_none(covers[0])
            end = end if end is not None else _int_or_none(covers[-1])
        questions = data.get("questions")
        return {
            "title": _str_or_none(data.get("title")),
            "covers_days_start": start,
            "covers_days_end": end,
            "questions": [q for q in questions if isinstance(q, dict)] if isinstance(questions, list) else [],
        }


class ResourceEntry(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_resource(cls, data: Any) -> Any:
        if isinstance(data, str):
            data = {"url": data} if data.strip().startswith("http") else {"name": data}
        if not isinstance(data, dict):
            return data
        return {
            "name": _str_or_none(_first_present(data, "name", "title")),
            "url": _str_or_none(_first_present(data, "url", "link", "href")),
            "type": _str_or_none(_first_present(data, "type", "resource_type")),
        }


class DayEntry(BaseModel):
    """One day as the generation service sent it. Any field may be missing."""
    day: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    topics: list[Any] = Field(default_factory=list)
    estimated_time: Optional[Any] = None
    plan_type: Optional[str] = None
    quiz: Optional[QuizBlock] = None
    resources: list[ResourceEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_prompt_style_fields(cls, data: Any) -> Any:
        """Accept the key spellings the generation prompt has produced over time."""
        if not isinstance(data, dict):
            return data

        topics = _first_present(data, "topics", "tasks")
        if isinstance(topics, str):
            topics = [t.strip() for t in topics.split(",") if t.strip()]
        elif not isinstance(topics, list):
            topics = []

        plan_type = _str_or_none(_first_present(data, "type", "plan_type", "planType"))
        if plan_type:
            plan_type = re.sub(r"[\s-]+", "_", plan_type.lower())

        quiz = _first_present(data, "quiz_data", "quiz")
        resources = data.get("resources")

        return {
            "day": _int_or_none(_first_present(data, "day", "day_number", "dayNumber")),
            "title": _str_or_none(data.get("title")),
            "description": _str_or_none(data.get("description")),
            "topics": topics,
            "estimated_time": _first_present(
                data, "estimated_time", "estimatedTime", "study_hours", "hours", "duration"
            ),
            "plan_type": plan_type,
            "quiz": quiz if isinstance(quiz, dict) else None,
            "resources": [r for r in resources if isinstance(r, (dict, str))] if isinstance(resources, list) else [],
        }


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)\b", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:minutes?|mins?|m)\b", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def parse_duration_hours(value: Any) -> Optional[float]:
    """
    Hours from a number or phrase: 2, "1.5 hours", "45 min", "1h 30m", "3".
    Hour and minute parts are summed; a bare number is hours.
    Non-finite values are ignored and the result is capped at MAX_STUDY_HOURS.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        hours = float(max(0, min(value, MAX_STUDY_HOURS)))
    elif isinstance(value, float):
        hours = value
    else:
        text = str(value).strip()
        if not text:
            return None
        hours = sum(float(h) for h in _HOURS_RE.findall(text))
        minutes = sum(float(m) for m in _MINUTES_RE.findall(text))
        if hours or minutes:
            hours = hours + minutes / 60
        else:
            m = _NUMBER_RE.search(text)
            if not m:
                return None
            hours = float(m.group(0))
    if not math.isfinite(hours) or hours <= 0:
        return None
    return min(hours, float(MAX_STUDY_HOURS))


def extract_study_hours(value: Any) -> int:
    """Whole study hours (half rounds up), at least 1; 2 when absent or unparseable."""
    hours = parse_duration_hours(value)
    if hours is None:
        return DEFAULT_STUDY_HOURS
    return max(1, math.floor(hours + 0.5))


def _topic_title(topic: Any) -> Optional[str]:
    if isinstance(topic, dict):
        return _str_or_none(_first_present(topic, "title", "name", "topic", "text"))
    return _str_or_none(topic)


def extract_title(entry: DayEntry, day_number: int) -> str:
    """
    Priority:
    1. title
    2. first line of description
    3. first topic
    4. "Day N"
    """
    if entry.title:
        return entry.title[:500]
    if entry.description:
        first_line = entry.description.split("\n")[0].strip()[:100]
        if first_line:
            return first_line
    for topic in entry.topics:
        title = _topic_title(topic)
        if title:
            return title[:500]
    return f"Day {day_number}"


def extract_plan_type(entry: DayEntry) -> str:
    plan_type = entry.plan_type if entry.plan_type in PLAN_TYPES else None
    if plan_type is None and entry.plan_type in {"exam", "final", "finalexam"}:
        plan_type = PLAN_TYPE_FINAL_EXAM
    if plan_type is None:
        if entry.quiz is not None and entry.quiz.questions:
            return PLAN_TYPE_QUIZ
        return PLAN_TYPE_REGULAR
    return plan_type


def extract_tasks(entry: DayEntry) -> list[CanonicalTask]:
    tasks: list[CanonicalTask] = []
    for topic in entry.topics:
        title = _topic_title(topic)
        if not title:
            continue
        minutes = DEFAULT_TASK_MINUTES
        if isinstance(topic, dict):
            hours = parse_duration_hours(_first_present(topic, "estimated_time", "duration"))
            if hours:
                minutes = min(MAX_TASK_MINUTES, max(1, round(hours * 60)))
        tasks.append(CanonicalTask(title=title, estimated_minutes=minutes))
    return tasks


def _option_text(option: Any) -> Optional[str]:
    if isinstance(option, dict):
        return _str_or_none(_first_present(option, "text", "option", "label", "value"))
    return _str_or_none(option)


def _option_flag(option: Any) -> bool:
    if not isinstance(option, dict):
        return False
    flag = _first_present(option, "is_correct", "isCorrect", "correct")
    return flag is True or (isinstance(flag, str) and flag.strip().lower() == "true")


def resolve_correct_index(correct_answer: Any, option_texts: list[str]) -> Optional[int]:
    """Correct answer as 0-based index, numeric string, letter (A, B, ...), or the option's text."""
    if correct_answer is None or isinstance(correct_answer, bool):
        return None
    idx: Optional[int] = None
    if isinstance(correct_answer, int):
        idx = correct_answer
    elif isinstance(correct_answer, str):
        s = correct_answer.strip()
        if s.isdecimal():
            idx = int(s) if len(s) <= 6 else None
        elif len(s) == 1 and s.isalpha():
            idx = ord(s.upper()) - ord("A")
        else:
            lowered = [t.lower() for t in option_texts]
            if s.lower() in lowered:
                idx = lowered.index(s.lower())
    if idx is None or not 0 <= idx < len(option_texts):
        return None
    return idx


def extract_question(question: QuestionEntry) -> Optional[CanonicalQuestion]:
    """Map one question; None when it has no text or no usable options."""
    if not question.text:
        return None
    kept = [(opt, _option_text(opt)) for opt in question.options]
    kept = [(opt, text) for opt, text in kept if text]
    if not kept:
        return None
    texts = [text for _, text in kept]
    correct_idx = resolve_correct_index(question.correct_answer, texts)
    if correct_idx is None and question.correct_answer is not None:
        logger.warning(
            "Unresolvable correct answer %r for question %r; no option marked from it",
            question.correct_answer,
            question.text[:80],
        )

    options: list[CanonicalOption] = []
    seen_correct = False
    for j, (opt, text) in enumerate(kept):
        is_correct = (j == correct_idx or _option_flag(opt)) and not seen_correct
        seen_correct = seen_correct or is_correct
        options.append(CanonicalOption(text=text, is_correct=is_correct))
    return CanonicalQuestion(text=question.text, options=options, explanation=question.explanation)


def extract_quiz(entry: DayEntry, day_number: int, plan_type: str, title: str) -> Optional[CanonicalQuiz]:
    """Quiz block for quiz / final_exam days only."""
    if plan_type == PLAN_TYPE_REGULAR or entry.quiz is None:
        return None
    block = entry.quiz
    start = block.covers_days_start if block.covers_days_start and block.covers_days_start >= 1 else day_number
    end = block.covers_days_end if block.covers_days_end and block.covers_days_end >= 1 else day_number
    if start > end:
        start, end = end, start

    questions: list[CanonicalQuestion] = []
    for i, q in enumerate(block.questions):
        mapped = extract_question(q)
        if mapped is None:
            logger.warning("Dropping quiz question %d on day %d: no text or options", i + 1, day_number)
            continue
        questions.append(mapped)

    return CanonicalQuiz(
        title=block.title or title,
        covers_days_start=start,
        covers_days_end=end,
        questions=questions,
    )


def extract_resources(entry: DayEntry) -> list[CanonicalResource]:
    out: list[CanonicalResource] = []
    for r in entry.resources:
        name = r.name or r.url
        if not name:
            continue
        out.append(CanonicalResource(name=name[:500], url=r.url, type=r.type or RESOURCE_TYPE_LINK))
    return out


# =============================================================================
# DAY MAPPING
# =============================================================================


def to_canonical_plan(entry: DayEntry, day_number: int) -> CanonicalDailyPlan:
    """Map one raw entry to a CanonicalDailyPlan. Pure; no I/O."""
    title = extract_title(entry, day_number)
    plan_type = extract_plan_type(entry)
    return CanonicalDailyPlan(
        day_number=day_number,
        title=title,
        description=entry.description,
        study_hours=extract_study_hours(entry.estimated_time),
        plan_type=plan_type,
        tasks=extract_tasks(entry),
        quiz=extract_quiz(entry, day_number, plan_type, title),
        resources=extract_resources(entry),
    )


def _demote_misplaced_finals(plans: list[CanonicalDailyPlan]) -> list[CanonicalDailyPlan]:
    """Only the highest-numbered day may stay final_exam; others become quiz."""
    if not plans:
        return plans
    last_day = plans[-1].day_number
    out = []
    for plan in plans:
        if plan.plan_type == PLAN_TYPE_FINAL_EXAM and plan.day_number != last_day:
            logger.warning("Day %d marked final_exam but is not the last day; treating as quiz", plan.day_number)
            plan = plan.model_copy(update={"plan_type": PLAN_TYPE_QUIZ})
        out.append(plan)
    return out


def canonicalize_entries(raw_entries: list[Any]) -> list[CanonicalDailyPlan]:
    """
    Map every raw entry independently, then enforce schedule-level invariants:
    numbered days (missing → numbers above the highest explicit day, in input
    order), unique day numbers (later duplicates dropped), ascending order, a
    single terminal final_exam.
    """
    entries: list[tuple[int, DayEntry]] = []
    for i, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-dict day entry at index %d: %s", i, type(raw).__name__)
            continue
        try:
            entries.append((i, DayEntry.model_validate(raw)))
        except ValidationError as e:
            logger.warning("Skipping day entry at index %d: %s", i, e)

    explicit = [e.day for _, e in entries if e.day is not None and e.day >= 1]
    next_free = max(explicit, default=0) + 1

    plans: list[CanonicalDailyPlan] = []
    seen_days: set[int] = set()
    for i, entry in entries:
        if entry.day is not None and entry.day >= 1:
            day_number = entry.day
        else:
            day_number = next_free
            next_free += 1
        if day_number in seen_days:
            logger.warning("Skipping duplicate day %d at index %d", day_number, i)
            continue

        try:
            plan = to_canonical_plan(entry, day_number)
        except ValidationError as e:
            logger.warning("Skipping day %d: %s", day_number, e)
            continue

        seen_days.add(day_number)
        plans.append(plan)

    plans.sort(key=lambda p: p.day_number)
    return _demote_misplaced_finals(plans)
