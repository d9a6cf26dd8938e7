from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from studify.core import get_settings
from studify.core.constants import DURATION_CUSTOM, DURATION_RECOMMENDED


class CamelModel(BaseModel):
    """Wire format is camelCase; python side stays snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Create roadmap
# -----------------------------------------------------------------------------


class CreateRoadmapRequest(CamelModel):
    course: str
    duration_type: Literal["recommended", "custom"] = DURATION_RECOMMENDED
    custom_days: Optional[int] = None

    @field_validator("course")
    @classmethod
    def course_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("course is required")
        return v

    @model_validator(mode="after")
    def custom_days_for_custom_duration(self) -> "CreateRoadmapRequest":
        if self.duration_type != DURATION_CUSTOM:
            return self
        max_days = get_settings().max_custom_days
        if self.custom_days is None or self.custom_days < 1:
            raise ValueError("customDays must be a positive integer when durationType is custom")
        if self.custom_days > max_days:
            raise ValueError(f"customDays must be at most {max_days}")
        return self


class CreateRoadmapResponse(CamelModel):
    success: bool = True
    message: str
    user_course_id: int
    course_title: str
    processing_time_seconds: float


# -----------------------------------------------------------------------------
# Roadmap view
# -----------------------------------------------------------------------------


class RoadmapSummary(CamelModel):
    id: int
    course_title: str
    course_description: Optional[str] = None
    start_date: Optional[date] = None
    status: str
    progress_percent: int = 0
    days_completed: int = 0
    total_days: Optional[int] = None


class TaskResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    estimated_time: Optional[int] = None
    task_order: int
    is_completed: bool = False
    resource_url: Optional[str] = None


class ResourceResponse(CamelModel):
    id: int
    name: str
    url: Optional[str] = None
    type: str = "link"


class DailyPlanResponse(CamelModel):
    id: int
    day_number: int
    title: str
    description: Optional[str] = None
    study_hours: int
    plan_type: str
    is_completed: bool = False
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    tasks: list[TaskResponse] = []
    resources: list[ResourceResponse] = []


class RoadmapResponse(CamelModel):
    roadmap: RoadmapSummary
    daily_plans: list[DailyPlanResponse]


# -----------------------------------------------------------------------------
# Quiz view
# -----------------------------------------------------------------------------


class QuizQuestionResponse(CamelModel):
    question: str
    options: list[str]
    correct_answer: Optional[int] = None  # 0-based index into options
    explanation: Optional[str] = None


class QuizResponse(CamelModel):
    title: str
    day_range: str
    course_title: str
    questions: list[QuizQuestionResponse]


# -----------------------------------------------------------------------------
# Roadmap list and probe
# -----------------------------------------------------------------------------


class RoadmapListItem(CamelModel):
    user_course_id: int
    course_title: str
    status: str
    progress_percent: int = 0
    start_date: Optional[date] = None
    total_days: int = 0
    completed_days: int = 0
    created_at: Optional[datetime] = None


class MyRoadmapsResponse(CamelModel):
    roadmaps: list[RoadmapListItem]


class GenerationProbeResponse(CamelModel):
    success: bool
    message: str
    status: Optional[int] = None
    has_result: bool = False
