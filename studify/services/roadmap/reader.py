"""Read-side assembly of stored roadmaps for display."""

import asyncio
from collections import defaultdict
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from studify.db.models import (
    Course,
    DailyPlan,
    Quiz,
    QuizQuestion,
    Resource,
    Task,
    UserCourse,
)
from studify.db.session import async_session
from studify.schemas.roadmap import (
    DailyPlanResponse,
    QuizQuestionResponse,
    QuizResponse,
    ResourceResponse,
    RoadmapListItem,
    RoadmapResponse,
    RoadmapSummary,
    TaskResponse,
)


# -----------------------------------------------------------------------------
# Roadmap
# -----------------------------------------------------------------------------


async def _tasks_by_plan(
    session_factory: async_sessionmaker, plan_ids: list[int]
) -> dict[int, list[TaskResponse]]:
    async with session_factory() as session:
        result = await session.execute(
            select(Task)
            .where(Task.daily_plan_id.in_(plan_ids))
            .order_by(Task.daily_plan_id, Task.task_order)
        )
        grouped: dict[int, list[TaskResponse]] = defaultdict(list)
        for t in result.scalars().all():
            grouped[t.daily_plan_id].append(
                TaskResponse(
                    id=t.id,
                    title=t.title,
                    description=t.description,
                    estimated_time=t.estimated_time,
                    task_order=t.task_order,
                    is_completed=t.is_completed,
                    resource_url=t.resource_url,
                )
            )
    return grouped


async def _resources_by_plan(
    session_factory: async_sessionmaker, plan_ids: list[int]
) -> dict[int, list[ResourceResponse]]:
    async with session_factory() as session:
        result = await session.execute(
            select(Resource)
            .where(Resource.daily_plan_id.in_(plan_ids))
            .order_by(Resource.daily_plan_id, Resource.id)
        )
        grouped: dict[int, list[ResourceResponse]] = defaultdict(list)
        for r in result.scalars().all():
            grouped[r.daily_plan_id].append(
                ResourceResponse(id=r.id, name=r.name, url=r.url, type=r.resource_type)
            )
    return grouped


async def get_roadmap(
    db: AsyncSession,
    user_id: str,
    user_course_id: int,
    session_factory: async_sessionmaker = async_session,
) -> Optional[RoadmapResponse]:
    """
    Course summary plus plans in day order. Tasks and resources are read
    concurrently on their own sessions (one AsyncSession runs one statement at a time).
    Returns None when the roadmap does not exist or belongs to someone else.
    """
    result = await db.execute(
        select(UserCourse, Course)
        .join(Course, Course.id == UserCourse.course_id)
        .where(UserCourse.id == user_course_id, UserCourse.user_id == user_id)
    )
    row = result.first()
    if row is None:
        return None
    user_course, course = row

    plan_rows = (
        await db.execute(
            select(DailyPlan, Quiz.id, Quiz.title)
            .outerjoin(Quiz, Quiz.daily_plan_id == DailyPlan.id)
            .where(DailyPlan.user_course_id == user_course_id)
            .order_by(DailyPlan.day_number)
        )
    ).all()
    plan_ids = [plan.id for plan, _, _ in plan_rows]

    tasks: dict[int, list[TaskResponse]] = {}
    resources: dict[int, list[ResourceResponse]] = {}
    if plan_ids:
        tasks, resources = await asyncio.gather(
            _tasks_by_plan(session_factory, plan_ids),
            _resources_by_plan(session_factory, plan_ids),
        )

    daily_plans = [
        DailyPlanResponse(
            id=plan.id,
            day_number=plan.day_number,
            title=plan.title,
            description=plan.description,
            study_hours=plan.study_hours,
            plan_type=plan.plan_type,
            is_completed=plan.is_completed,
            quiz_id=quiz_id,
            quiz_title=quiz_title,
            tasks=tasks.get(plan.id, []),
            resources=resources.get(plan.id, []),
        )
        for plan, quiz_id, quiz_title in plan_rows
    ]
    return RoadmapResponse(
        roadmap=RoadmapSummary(
            id=user_course.id,
            course_title=course.title,
            course_description=course.description,
            start_date=user_course.start_date,
            status=user_course.status,
            progress_percent=user_course.progress_percent,
            days_completed=user_course.days_completed,
            total_days=user_course.total_days,
        ),
        daily_plans=daily_plans,
    )


# -----------------------------------------------------------------------------
# Quiz
# -----------------------------------------------------------------------------


def _day_range(start: int, end: int) -> str:
    return f"Day {start}" if start == end else f"Days {start}-{end}"


async def get_quiz_for_day(
    db: AsyncSession, user_id: str, user_course_id: int, day_number: int
) -> Optional[QuizResponse]:
    result = await db.execute(
        select(Quiz, Course.title)
        .join(DailyPlan, DailyPlan.id == Quiz.daily_plan_id)
        .join(UserCourse, UserCourse.id == DailyPlan.user_course_id)
        .join(Course, Course.id == UserCourse.course_id)
        .where(
            UserCourse.id == user_course_id,
            UserCourse.user_id == user_id,
            DailyPlan.day_number == day_number,
        )
    )
    row = result.first()
    if row is None:
        return None
    quiz, course_title = row

    questions = (
        await db.execute(
            select(QuizQuestion)
            .options(selectinload(QuizQuestion.options))
            .where(QuizQuestion.quiz_id == quiz.id)
            .order_by(QuizQuestion.question_order)
        )
    ).scalars().all()

    out = []
    for q in questions:
        options = list(q.options)
        correct = next((i for i, o in enumerate(options) if o.is_correct), None)
        out.append(
            QuizQuestionResponse(
                question=q.question_text,
                options=[o.option_text for o in options],
                correct_answer=correct,
                explanation=q.explanation,
            )
        )
    return QuizResponse(
        title=quiz.title,
        day_range=_day_range(quiz.covers_days_start, quiz.covers_days_end),
        course_title=course_title,
        questions=out,
    )


# -----------------------------------------------------------------------------
# Roadmap list
# -----------------------------------------------------------------------------


async def list_user_roadmaps(db: AsyncSession, user_id: str) -> list[RoadmapListItem]:
    """Newest first, with total and completed day counts."""
    completed = func.coalesce(func.sum(case((DailyPlan.is_completed.is_(True), 1), else_=0)), 0)
    result = await db.execute(
        select(
            UserCourse.id,
            Course.title,
            UserCourse.status,
            UserCourse.progress_percent,
            UserCourse.start_date,
            UserCourse.created_at,
            func.count(DailyPlan.id),
            completed,
        )
        .join(Course, Course.id == UserCourse.course_id)
        .outerjoin(DailyPlan, DailyPlan.user_course_id == UserCourse.id)
        .where(UserCourse.user_id == user_id)
        .group_by(
            UserCourse.id,
            Course.title,
            UserCourse.status,
            UserCourse.progress_percent,
            UserCourse.start_date,
            UserCourse.created_at,
        )
        .order_by(UserCourse.created_at.desc(), UserCourse.id.desc())
    )
    return [
        RoadmapListItem(
            user_course_id=uc_id,
            course_title=title,
            status=status,
            progress_percent=progress or 0,
            start_date=start_date,
            created_at=created_at,
            total_days=total or 0,
            completed_days=done or 0,
        )
        for uc_id, title, status, progress, start_date, created_at, total, done in result.all()
    ]
