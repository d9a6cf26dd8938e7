"""
Canonical roadmap types.
Single source of truth for the pipeline, persistence, and API.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from studify.core.constants import (
    MAX_DAY_NUMBER,
    MAX_STUDY_HOURS,
    MAX_TASK_MINUTES,
    PLAN_TYPE_FINAL_EXAM,
    PlanType,
)

# -----------------------------------------------------------------------------
# Day fan-out
# -----------------------------------------------------------------------------


class CanonicalTask(BaseModel):
    title: str = Field(min_length=1)
    estimated_minutes: int = Field(default=60, ge=1, le=MAX_TASK_MINUTES)


class CanonicalOption(BaseModel):
    text: str
    is_correct: bool = False


class CanonicalQuestion(BaseModel):
    text: str = Field(min_length=1)
    options: list[CanonicalOption] = Field(min_length=1)
    explanation: Optional[str] = None

    @field_validator("options")
    @classmethod
    def at_most_one_correct(cls, v: list[CanonicalOption]) -> list[CanonicalOption]:
        if sum(1 for o in v if o.is_correct) > 1:
            raise ValueError("a question may have only one correct option")
        return v


class CanonicalQuiz(BaseModel):
    title: str = Field(min_length=1)
    covers_days_start: int = Field(ge=1, le=MAX_DAY_NUMBER)
    covers_days_end: int = Field(ge=1, le=MAX_DAY_NUMBER)
    questions: list[CanonicalQuestion] = Field(default_factory=list)


class CanonicalResource(BaseModel):
    name: str = Field(min_length=1)
    url: Optional[str] = None
    type: str = "link"


# -----------------------------------------------------------------------------
# Plans and schedule
# -----------------------------------------------------------------------------


class CanonicalDailyPlan(BaseModel):
    """One validated day, 1:1 with a daily_plans row."""

    day_number: int = Field(ge=1, le=MAX_DAY_NUMBER)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    study_hours: int = Field(ge=1, le=MAX_STUDY_HOURS)
    plan_type: PlanType = "regular"
    tasks: list[CanonicalTask] = Field(default_factory=list)
    quiz: Optional[CanonicalQuiz] = None
    resources: list[CanonicalResource] = Field(default_factory=list)


class CanonicalSchedule(BaseModel):
    """Ordered plans for one roadmap. is_fallback marks placeholder content."""

    plans: list[CanonicalDailyPlan] = Field(min_length=1)
    is_fallback: bool = False

    @model_validator(mode="after")
    def check_schedule_invariants(self) -> "CanonicalSchedule":
        days = [p.day_number for p in self.plans]
        if len(set(days)) != len(days):
            raise ValueError("day numbers must be unique")
        if days != sorted(days):
            raise ValueError("plans must be ordered by day number")
        finals = [p for p in self.plans if p.plan_type == PLAN_TYPE_FINAL_EXAM]
        if len(finals) > 1:
            raise ValueError("only one final_exam day is allowed")
        if finals and finals[0].day_number != days[-1]:
            raise ValueError("final_exam must be the last day")
        return self

    @property
    def day_count(self) -> int:
        return len(self.plans)
