"""Shared pipeline stage and error types for roadmap ingestion."""

from enum import Enum
from typing import Optional


class PipelineStage(str, Enum):
    """Pipeline stage identifiers for error reporting."""
    NORMALIZE = "normalize"
    REPAIR = "repair"
    PARSE = "parse"
    VALIDATE = "validate"
    TRANSFORM = "transform"
    PERSIST = "persist"


class RoadmapPipelineError(Exception):
    """Pipeline error with stage context."""
    def __init__(self, stage: PipelineStage, message: str, cause: Optional[Exception] = None):
        self.stage = stage
        self.message = message
        self.cause = cause
        super().__init__(f"[{stage.value}] {message}")


class RepairError(RoadmapPipelineError):
    """Truncated JSON could not be salvaged (no complete day element)."""
    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(PipelineStage.REPAIR, message, cause)


class ParseError(RoadmapPipelineError):
    """Candidate text never became valid JSON (or recognizable day text)."""
    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(PipelineStage.PARSE, message, cause)


class ValidationRejected(RoadmapPipelineError):
    """Payload parsed but is structurally insufficient to build a schedule."""
    def __init__(self, message: str):
        super().__init__(PipelineStage.VALIDATE, message)


class PersistenceFailure(RoadmapPipelineError):
    """A store write failed while writing the roadmap fan-out."""
    def __init__(self, message: str, cause: Optional[Exception] = None, day_number: Optional[int] = None):
        self.day_number = day_number
        super().__init__(PipelineStage.PERSIST, message, cause)
