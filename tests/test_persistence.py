"""Tests for studify.services.roadmap.persistence."""
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from studify.core import Settings
from studify.db.models import Course, DailyPlan, Quiz, QuizOption, QuizQuestion, Resource, Task, UserCourse
from studify.domain import CanonicalSchedule
from studify.services.roadmap.fallback import build_fallback_schedule
from studify.services.roadmap import persistence
from studify.services.roadmap.persistence import persist_schedule, upsert_course
from studify.services.roadmap.transformer import canonicalize_entries


async def test_upsert_course_is_idempotent(db) -> None:
    first = await upsert_course(db, "Organic Chemistry", 21)
    again = await upsert_course(db, "Organic Chemistry", None)
    other = await upsert_course(db, "Discrete Math", None)
    await db.commit()

    assert first == again
    assert other != first
    course = (await db.execute(select(Course).where(Course.id == first))).scalar_one()
    assert course.description == "AI-generated course for Organic Chemistry"
    assert course.recommended_duration_days == 21
    assert course.created_by_ai is True


async def test_persist_schedule_fan_out(db, plan_payload, count_rows) -> None:
    schedule = CanonicalSchedule(plans=canonicalize_entries(plan_payload["daily_plan"]))
    user_course = await persist_schedule(db, "user-1", "Python Basics", None, schedule, "raw")
    await db.commit()

    assert user_course.status == "in_progress"
    assert user_course.total_days == 3
    assert user_course.custom_duration_days == 30
    assert user_course.start_date is not None

    assert await count_rows(Task) == 6
    assert await count_rows(Resource) == 1
    assert await count_rows(QuizOption) == 5

    plans = (
        await db.execute(
            select(DailyPlan)
            .where(DailyPlan.user_course_id == user_course.id)
            .options(
                selectinload(DailyPlan.tasks),
                selectinload(DailyPlan.quiz).selectinload(Quiz.questions).selectinload(QuizQuestion.options),
            )
            .order_by(DailyPlan.day_number)
        )
    ).scalars().all()
    assert [p.day_number for p in plans] == [1, 2, 3]
    assert [p.study_hours for p in plans] == [2, 2, 1]
    assert [t.task_order for t in plans[1].tasks] == [1, 2, 3]
    assert plans[1].tasks[0].estimated_time == 60
    quiz = plans[2].quiz
    assert (quiz.covers_days_start, quiz.covers_days_end) == (1, 2)
    assert [q.question_order for q in quiz.questions] == [1, 2]
    assert [o.is_correct for o in quiz.questions[0].options] == [False, True, False]
    assert [o.is_correct for o in quiz.questions[1].options] == [False, True]


async def test_quiz_rows_written_without_questions(db, count_rows) -> None:
    await persist_schedule(db, "user-1", "Statistics", 14, build_fallback_schedule(14), None)
    await db.commit()

    assert await count_rows(UserCourse) == 1
    assert await count_rows(DailyPlan) == 14
    assert await count_rows(Quiz) == 2
    assert await count_rows(QuizQuestion) == 0


async def test_configured_default_duration(db, monkeypatch) -> None:
    monkeypatch.setattr(persistence, "get_settings", lambda: Settings(default_duration_days=45))
    user_course = await persist_schedule(db, "user-1", "Statistics", None, build_fallback_schedule(3), None)
    await db.commit()

    course = (await db.execute(select(Course).where(Course.id == user_course.course_id))).scalar_one()
    assert course.recommended_duration_days == 45
    assert user_course.custom_duration_days == 45
