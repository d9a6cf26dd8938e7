"""Tests for studify.services.roadmap.fallback."""
import pytest

from studify.services.roadmap.fallback import (
    FALLBACK_TITLE_PATTERN,
    build_fallback_schedule,
    is_fallback_schedule,
)
from studify.services.roadmap.transformer import canonicalize_entries


def test_thirty_day_default_schedule() -> None:
    schedule = build_fallback_schedule()
    assert schedule.is_fallback
    assert schedule.day_count == 30
    assert [p.day_number for p in schedule.plans] == list(range(1, 31))
    assert [p.day_number for p in schedule.plans if p.plan_type == "quiz"] == [7, 14, 21, 28]
    assert [p.day_number for p in schedule.plans if p.plan_type == "final_exam"] == [30]
    day_one = schedule.plans[0]
    assert FALLBACK_TITLE_PATTERN.match(day_one.title)
    assert day_one.study_hours == 2
    assert len(day_one.tasks) == 3


@pytest.mark.parametrize("n", [7, 8, 13, 14, 15, 30, 45, 90])
def test_quiz_and_final_counts(n: int) -> None:
    plans = build_fallback_schedule(n).plans
    finals = [p for p in plans if p.plan_type == "final_exam"]
    quizzes = [p for p in plans if p.plan_type == "quiz"]
    assert len(finals) == 1
    assert finals[0].day_number == n
    assert len(quizzes) == (n - 1) // 7
    assert all(p.study_hours >= 1 for p in plans)


def test_quiz_covers_previous_week() -> None:
    quiz_day = build_fallback_schedule(30).plans[13]
    assert quiz_day.title == "Week 2 Quiz"
    assert (quiz_day.quiz.covers_days_start, quiz_day.quiz.covers_days_end) == (8, 14)
    assert quiz_day.quiz.questions == []


def test_final_covers_whole_course() -> None:
    final = build_fallback_schedule(10).plans[-1]
    assert final.title == "Final Examination"
    assert (final.quiz.covers_days_start, final.quiz.covers_days_end) == (1, 10)


def test_non_positive_day_count_uses_default() -> None:
    assert build_fallback_schedule(0).day_count == 30


def test_detects_placeholder_titles() -> None:
    assert is_fallback_schedule(build_fallback_schedule(14).plans)
    real = canonicalize_entries([{"day": 1, "title": "Intro to Variables"}])
    assert not is_fallback_schedule(real)
