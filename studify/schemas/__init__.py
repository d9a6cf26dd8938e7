"""Pydantic request/response schemas."""

from studify.schemas.roadmap import (
    CreateRoadmapRequest,
    CreateRoadmapResponse,
    DailyPlanResponse,
    GenerationProbeResponse,
    MyRoadmapsResponse,
    QuizQuestionResponse,
    QuizResponse,
    ResourceResponse,
    RoadmapListItem,
    RoadmapResponse,
    RoadmapSummary,
    TaskResponse,
)

__all__ = [
    "CreateRoadmapRequest",
    "CreateRoadmapResponse",
    "DailyPlanResponse",
    "GenerationProbeResponse",
    "MyRoadmapsResponse",
    "QuizQuestionResponse",
    "QuizResponse",
    "ResourceResponse",
    "RoadmapListItem",
    "RoadmapResponse",
    "RoadmapSummary",
    "TaskResponse",
]
