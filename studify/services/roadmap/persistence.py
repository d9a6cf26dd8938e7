"""Write a canonical schedule as course → user course → daily plans (+ tasks, quiz, resources)."""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studify.core import get_settings
from studify.core.constants import USER_COURSE_STATUS_IN_PROGRESS
from studify.db.models import (
    AIRecommendationLog,
    Course,
    DailyPlan,
    Quiz,
    QuizOption,
    QuizQuestion,
    Resource,
    Task,
    UserCourse,
)
from studify.domain import CanonicalDailyPlan, CanonicalQuiz, CanonicalSchedule
from .errors import PersistenceFailure

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# -----------------------------------------------------------------------------
# Course and user course
# -----------------------------------------------------------------------------


async def upsert_course(db: AsyncSession, title: str, custom_days: Optional[int]) -> int:
    """INSERT ... ON CONFLICT (title) DO UPDATE ... RETURNING id. Same title, same id."""
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise PersistenceFailure(f"Course upsert not supported for dialect {dialect!r}")

    stmt = insert(Course).values(
        title=title,
        description=f"AI-generated course for {title}",
        recommended_duration_days=custom_days or get_settings().default_duration_days,
        created_by_ai=True,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Course.title],
        set_={"title": stmt.excluded.title},
    ).returning(Course.id)
    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as e:
        raise PersistenceFailure("Failed to upsert course", cause=e) from e
    return result.scalar_one()


async def create_user_course(
    db: AsyncSession,
    user_id: str,
    course_id: int,
    custom_days: Optional[int],
    total_days: int,
) -> UserCourse:
    user_course = UserCourse(
        user_id=user_id,
        course_id=course_id,
        custom_duration_days=custom_days or get_settings().default_duration_days,
        start_date=date.today(),
        status=USER_COURSE_STATUS_IN_PROGRESS,
        progress_percent=0,
        days_completed=0,
        total_days=total_days,
    )
    db.add(user_course)
    try:
        await db.flush()
    except SQLAlchemyError as e:
        raise PersistenceFailure("Failed to create user course", cause=e) from e
    return user_course


# -----------------------------------------------------------------------------
# Daily plans
# -----------------------------------------------------------------------------


def _build_quiz(quiz: CanonicalQuiz) -> Quiz:
    row = Quiz(
        title=quiz.title,
        covers_days_start=quiz.covers_days_start,
        covers_days_end=quiz.covers_days_end,
    )
    for q_order, question in enumerate(quiz.questions, start=1):
        q_row = QuizQuestion(
            question_text=question.text,
            question_order=q_order,
            explanation=question.explanation,
        )
        q_row.options = [
            QuizOption(option_text=o.text, option_order=o_order, is_correct=o.is_correct)
            for o_order, o in enumerate(question.options, start=1)
        ]
        row.questions.append(q_row)
    return row


def build_daily_plan_row(user_course_id: int, plan: CanonicalDailyPlan) -> DailyPlan:
    """ORM graph for one day; nothing is added to a session here."""
    row = DailyPlan(
        user_course_id=user_course_id,
        day_number=plan.day_number,
        study_hours=plan.study_hours,
        plan_type=plan.plan_type,
        title=plan.title,
        description=plan.description,
        is_completed=False,
    )
    row.tasks = [
        Task(title=t.title, estimated_time=t.estimated_minutes, task_order=i, is_completed=False)
        for i, t in enumerate(plan.tasks, start=1)
    ]
    if plan.quiz is not None:
        row.quiz = _build_quiz(plan.quiz)
    row.resources = [
        Resource(name=r.name, url=r.url, resource_type=r.type) for r in plan.resources
    ]
    return row


async def write_daily_plan(db: AsyncSession, user_course_id: int, plan: CanonicalDailyPlan) -> DailyPlan:
    """
    Insert one day with its whole fan-out and flush.

    Raises:
        PersistenceFailure: any insert for this day failed; later days must not be attempted.
    """
    row = build_daily_plan_row(user_course_id, plan)
    db.add(row)
    try:
        await db.flush()
    except SQLAlchemyError as e:
        raise PersistenceFailure(
            f"Failed to write day {plan.day_number}",
            cause=e,
            day_number=plan.day_number,
        ) from e
    return row


# -----------------------------------------------------------------------------
# Audit log and full schedule
# -----------------------------------------------------------------------------


async def write_generation_log(
    db: AsyncSession,
    user_id: str,
    course_title: str,
    custom_days: Optional[int],
    ai_output: Optional[str],
    used_fallback: bool,
) -> AIRecommendationLog:
    log_row = AIRecommendationLog(
        user_id=user_id,
        course_title=course_title,
        user_input_duration=custom_days,
        ai_output=ai_output,
        used_fallback=used_fallback,
    )
    db.add(log_row)
    try:
        await db.flush()
    except SQLAlchemyError as e:
        raise PersistenceFailure("Failed to write generation log", cause=e) from e
    return log_row


async def persist_schedule(
    db: AsyncSession,
    user_id: str,
    course_title: str,
    custom_days: Optional[int],
    schedule: CanonicalSchedule,
    ai_output: Optional[str],
) -> UserCourse:
    """
    Ordered writes: course upsert, user course, each day ascending, then the audit row.
    The caller owns the transaction; a PersistenceFailure leaves rollback to it.
    """
    course_id = await upsert_course(db, course_title, custom_days)
    user_course = await create_user_course(db, user_id, course_id, custom_days, schedule.day_count)
    logger.info("Created user course %s for course %s", user_course.id, course_id)

    for plan in schedule.plans:
        await write_daily_plan(db, user_course.id, plan)
    logger.info("Inserted %d daily plans for user course %s", schedule.day_count, user_course.id)

    await write_generation_log(
        db, user_id, course_title, custom_days, ai_output, schedule.is_fallback
    )
    return user_course
