"""Core configuration, constants, and shared infrastructure."""

from studify.core.config import Settings, get_settings
from studify.core.constants import (
    DAILY_PLAN_KEY,
    PLAN_TYPES,
    PLAN_TYPE_FINAL_EXAM,
    PLAN_TYPE_QUIZ,
    PLAN_TYPE_REGULAR,
)
from studify.core.limiter import limiter

__all__ = [
    "Settings",
    "get_settings",
    "DAILY_PLAN_KEY",
    "PLAN_TYPES",
    "PLAN_TYPE_FINAL_EXAM",
    "PLAN_TYPE_QUIZ",
    "PLAN_TYPE_REGULAR",
    "limiter",
]
