"""Roadmap ingestion: recover a schedule from generation output and persist it."""

from .errors import (
    ParseError,
    PersistenceFailure,
    PipelineStage,
    RepairError,
    RoadmapPipelineError,
    ValidationRejected,
)
from .fallback import build_fallback_schedule, is_fallback_schedule
from .pipeline import RoadmapResult, generate_roadmap, parse_generation_payload
from .reader import get_quiz_for_day, get_roadmap, list_user_roadmaps

__all__ = [
    "ParseError",
    "PersistenceFailure",
    "PipelineStage",
    "RepairError",
    "RoadmapPipelineError",
    "ValidationRejected",
    "build_fallback_schedule",
    "is_fallback_schedule",
    "RoadmapResult",
    "generate_roadmap",
    "parse_generation_payload",
    "get_quiz_for_day",
    "get_roadmap",
    "list_user_roadmaps",
]
