"""Tests for prompt composition."""
from __future__ import annotations

from datetime import date

import pytest

from planwise.planning.prompts import compose_prompt, format_today
from planwise.planning.schemas import CompletedTask, PlanMode, PlanRequest, ProjectMetadata

TODAY = date(2026, 10, 18)
LABELS = ("Timeframe:", "Prior Knowledge:", "Deadline:", "Focus Level:", "Available Time Today:")


def _labeled_lines(prompt: str) -> list[str]:
    return [line for line in prompt.splitlines() if line.startswith(LABELS)]


@pytest.mark.parametrize("mode", list(PlanMode))
def test_composer_is_deterministic(mode) -> None:
    request = PlanRequest(
        goal="Learn Spanish",
        timeframe="3 months",
        prior_knowledge="Basic vocabulary",
        daily_availability=2,
        completed_topics=["Alphabet"],
        project_metadata=ProjectMetadata(deadline="2027-01-15", focus_level="intense"),
    )
    completed = [CompletedTask(title="Learn the alphabet", description="Letters")]

    first = compose_prompt(request, completed, mode=mode, today=TODAY)
    second = compose_prompt(request, completed, mode=mode, today=TODAY)

    assert first == second


def test_goal_only_request_has_no_optional_lines() -> None:
    prompt = compose_prompt(PlanRequest(goal="Learn Spanish"), today=TODAY)

    assert "Goal: Learn Spanish" in prompt
    assert _labeled_lines(prompt) == []
    assert "None" not in prompt


@pytest.mark.parametrize(
    ("extra", "expected_line"),
    [
        ({"timeframe": "3 months"}, "Timeframe: 3 months"),
        ({"prior_knowledge": "Some Duolingo"}, "Prior Knowledge: Some Duolingo"),
        ({"daily_availability": 2}, "Available Time Today: 2 hours"),
        ({"project_metadata": {"deadline": "2026-10-28"}}, "Deadline: 2026-10-28 (10 days from today)"),
        ({"project_metadata": {"focus_level": "relaxed"}}, "Focus Level: relaxed"),
    ],
)
def test_each_optional_field_adds_exactly_one_line(extra, expected_line) -> None:
    base = compose_prompt(PlanRequest(goal="Learn Spanish"), today=TODAY)
    extended = compose_prompt(PlanRequest(goal="Learn Spanish", **extra), today=TODAY)

    base_lines = base.splitlines()
    extended_lines = extended.splitlines()
    assert len(extended_lines) == len(base_lines) + 1
    added = [line for line in extended_lines if line not in base_lines]
    assert added == [expected_line]
    remaining = list(extended_lines)
    remaining.remove(expected_line)
    assert remaining == base_lines


def test_blank_optional_fields_are_omitted() -> None:
    request = PlanRequest(
        goal="Learn Spanish",
        timeframe="   ",
        prior_knowledge="",
        project_metadata=ProjectMetadata(deadline=" ", focus_level=None),
    )

    prompt = compose_prompt(request, today=TODAY)

    assert _labeled_lines(prompt) == []


def test_daily_mode_lists_completed_titles_and_today() -> None:
    completed = [
        CompletedTask(title="Learn greetings", description=None),
        CompletedTask(title="Count to ten", description="Numbers 1-10"),
    ]

    prompt = compose_prompt(PlanRequest(goal="Learn Spanish"), completed, today=TODAY)

    assert "Generate TODAY'S plan (Sunday, October 18, 2026)" in prompt
    assert "These 2 tasks are already completed" in prompt
    assert "Learn greetings, Count to ten" in prompt
    assert "No tasks have been completed yet" not in prompt


def test_daily_mode_without_completed_tasks_mentions_first_day() -> None:
    prompt = compose_prompt(PlanRequest(goal="Learn Spanish"), [], today=TODAY)

    assert "No tasks have been completed yet" in prompt


def test_full_curriculum_mode_uses_completed_topics_and_ignores_daily_wording() -> None:
    request = PlanRequest(goal="Learn Spanish", completed_topics=["Alphabet", "Numbers"], daily_availability=1.5)

    prompt = compose_prompt(request, mode=PlanMode.FULL_CURRICULUM, today=TODAY)

    assert "Completed Topics: Alphabet, Numbers" in prompt
    assert "Daily Availability: 1.5 hours per day" in prompt
    assert "TODAY'S plan" not in prompt
    assert "complete curriculum" in prompt


def test_prompt_embeds_output_schema() -> None:
    prompt = compose_prompt(PlanRequest(goal="Learn Spanish"), today=TODAY)

    for key in ('"curriculum"', '"overview"', '"topics"', '"tasks"', '"assumptions"', '"estimated_hours"'):
        assert key in prompt


@pytest.mark.parametrize(
    ("deadline", "suffix"),
    [
        ("2026-10-18", "(today)"),
        ("2026-10-19", "(1 day from today)"),
        ("2026-10-15", "(passed 3 days ago)"),
        ("someday", ""),
    ],
)
def test_deadline_distance(deadline, suffix) -> None:
    request = PlanRequest(goal="Ship it", project_metadata=ProjectMetadata(deadline=deadline))

    prompt = compose_prompt(request, today=TODAY)

    assert f"Deadline: {deadline}{' ' + suffix if suffix else ''}\n" in prompt + "\n"


def test_format_today_does_not_zero_pad() -> None:
    assert format_today(date(2026, 3, 5)) == "Thursday, March 5, 2026"


@pytest.mark.parametrize(
    ("deadline", "suffix"),
    [
        ("December 1", "(10 days from today)"),
        ("November 20", "(passed 1 day ago)"),
    ],
)
def test_partial_deadline_is_completed_from_given_today(deadline, suffix) -> None:
    request = PlanRequest(goal="x", project_metadata=ProjectMetadata(deadline=deadline))

    first = compose_prompt(request, today=date(2030, 11, 21))
    second = compose_prompt(request, today=date(2030, 11, 21))

    assert f"Deadline: {deadline} {suffix}" in first
    assert first == second
