"""Shared roadmap constants."""

from typing import Literal

PlanType = Literal["regular", "quiz", "final_exam"]

PLAN_TYPE_REGULAR = "regular"
PLAN_TYPE_QUIZ = "quiz"
PLAN_TYPE_FINAL_EXAM = "final_exam"
PLAN_TYPES = (PLAN_TYPE_REGULAR, PLAN_TYPE_QUIZ, PLAN_TYPE_FINAL_EXAM)

DURATION_RECOMMENDED = "recommended"
DURATION_CUSTOM = "custom"

# Top-level key the generation service puts the day array under
DAILY_PLAN_KEY = "daily_plan"

DEFAULT_STUDY_HOURS = 2
DEFAULT_TASK_MINUTES = 60
MIN_FIRST_TITLE_LENGTH = 5

# Fallback schedule: a quiz every 7th day, short review days
QUIZ_INTERVAL_DAYS = 7
FALLBACK_REVIEW_HOURS = 1

USER_COURSE_STATUS_IN_PROGRESS = "in_progress"
RESOURCE_TYPE_LINK = "link"

# Upper bounds for values taken from generation output
MAX_DAY_NUMBER = 3650
MAX_STUDY_HOURS = 24
MAX_TASK_MINUTES = 24 * 60
