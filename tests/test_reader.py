"""Tests for studify.services.roadmap.reader."""
from sqlalchemy import update

from studify.db.models import DailyPlan
from studify.domain import CanonicalSchedule
from studify.services.roadmap.fallback import build_fallback_schedule
from studify.services.roadmap.persistence import persist_schedule
from studify.services.roadmap.reader import get_quiz_for_day, get_roadmap, list_user_roadmaps
from studify.services.roadmap.transformer import canonicalize_entries


async def _store(db, plan_payload, user_id="user-1", title="Python Basics"):
    schedule = CanonicalSchedule(plans=canonicalize_entries(plan_payload["daily_plan"]))
    user_course = await persist_schedule(db, user_id, title, None, schedule, None)
    await db.commit()
    return user_course


async def test_get_roadmap_assembles_plans(db, session_factory, plan_payload) -> None:
    user_course = await _store(db, plan_payload)

    roadmap = await get_roadmap(db, "user-1", user_course.id, session_factory=session_factory)

    assert roadmap.roadmap.course_title == "Python Basics"
    assert roadmap.roadmap.total_days == 3
    assert [p.day_number for p in roadmap.daily_plans] == [1, 2, 3]
    day_one, day_two, day_three = roadmap.daily_plans
    assert [t.title for t in day_one.tasks] == ["What is a variable", "Assignment"]
    assert [r.url for r in day_one.resources] == ["https://docs.python.org/3/"]
    assert day_two.resources == []
    assert len(day_two.tasks) == 3
    assert day_one.quiz_id is None
    assert day_three.quiz_title == "Basics Quiz"


async def test_get_roadmap_is_scoped_to_owner(db, session_factory, plan_payload) -> None:
    user_course = await _store(db, plan_payload)
    assert await get_roadmap(db, "someone-else", user_course.id, session_factory=session_factory) is None
    assert await get_roadmap(db, "user-1", user_course.id + 100, session_factory=session_factory) is None


async def test_get_quiz_for_day(db, plan_payload) -> None:
    user_course = await _store(db, plan_payload)

    quiz = await get_quiz_for_day(db, "user-1", user_course.id, 3)
    assert quiz.title == "Basics Quiz"
    assert quiz.day_range == "Days 1-2"
    assert quiz.course_title == "Python Basics"
    assert [q.correct_answer for q in quiz.questions] == [1, 1]
    assert quiz.questions[0].options == ["if", "for", "def"]
    assert quiz.questions[0].explanation == "for iterates over a sequence"

    assert await get_quiz_for_day(db, "user-1", user_course.id, 1) is None
    assert await get_quiz_for_day(db, "someone-else", user_course.id, 3) is None


async def test_list_user_roadmaps(db, plan_payload) -> None:
    first = await _store(db, plan_payload)
    await persist_schedule(db, "user-1", "Statistics", 8, build_fallback_schedule(8), None)
    await _store(db, plan_payload, user_id="user-2")
    await db.execute(
        update(DailyPlan)
        .where(DailyPlan.user_course_id == first.id, DailyPlan.day_number == 1)
        .values(is_completed=True)
    )
    await db.commit()

    roadmaps = await list_user_roadmaps(db, "user-1")

    assert [r.course_title for r in roadmaps] == ["Statistics", "Python Basics"]
    assert [(r.total_days, r.completed_days) for r in roadmaps] == [(8, 0), (3, 1)]
    assert await list_user_roadmaps(db, "nobody") == []
