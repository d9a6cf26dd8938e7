"""Tests for studify.services.roadmap.validator."""
import pytest

from studify.services.roadmap.errors import ValidationRejected
from studify.services.roadmap.validator import validate_candidate


def test_accepts_minimal_valid_payload() -> None:
    result = validate_candidate({"daily_plan": [{"day": 1, "title": "Intro to Sets"}, "junk"]})
    assert result.accepted
    assert len(result.entries) == 2


def test_accepts_bare_day_list_and_day_number_alias() -> None:
    result = validate_candidate([{"day_number": 1, "title": "Intro to Sets"}])
    assert result.accepted


@pytest.mark.parametrize(
    "parsed",
    [
        {"daily_plan": []},
        {"plan": [{"day": 1, "title": "Intro to Sets"}]},
        {"daily_plan": "Day 1"},
        {"daily_plan": ["Day 1: Intro"]},
        {"daily_plan": [{"title": "Intro to Sets"}]},
        {"daily_plan": [{"day": 0, "title": "Intro to Sets"}]},
        {"daily_plan": [{"day": 1, "title": "A"}]},
        {"daily_plan": [{"day": 1, "title": "   Set   "}]},
        {"daily_plan": [{"day": 1}]},
        "plain text",
        None,
    ],
)
def test_rejects_insufficient_payloads(parsed) -> None:
    result = validate_candidate(parsed)
    assert not result.accepted
    assert result.reason


def test_rejects_failed_parse() -> None:
    result = validate_candidate({"daily_plan": [{"day": 1, "title": "Intro to Sets"}]}, parse_ok=False)
    assert not result.accepted


def test_raise_if_rejected() -> None:
    with pytest.raises(ValidationRejected, match="empty"):
        validate_candidate({"daily_plan": []}).raise_if_rejected()
    validate_candidate({"daily_plan": [{"day": 1, "title": "Intro to Sets"}]}).raise_if_rejected()
