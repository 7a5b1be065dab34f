"""Prompt composition for plan generation.

The composer is pure: the same request, completed work and ``today`` always
render the same text. Optional request fields contribute one labeled line
each and are left out entirely when absent.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional, Sequence

from dateutil import parser as dateparser

from planwise.planning.schemas import CompletedTask, PlanMode, PlanRequest

_SHARED_OUTPUT_RULES = (
    "Output Rules (STRICT):\n"
    "- Output ONLY valid JSON\n"
    "- No markdown\n"
    "- No commentary\n"
    "- No explanations\n"
    "- No extra keys\n"
    "- No trailing commas\n"
    "- If something is unclear, make reasonable assumptions, list them under \"assumptions\", and proceed."
)

_SHARED_SAFETY_RULES = (
    "Safety & Trust Rules:\n"
    "- Never fabricate progress\n"
    "- Never overwrite user history\n"
    "- Never claim certainty\n"
    "- Never pressure, shame or guilt the user\n"
    "- You are an assistant, not a judge."
)

DAILY_SYSTEM_PROMPT = (
    "You are Planwise, a daily planning assistant embedded inside a productivity application.\n"
    "Your job is to produce TODAY'S plan only: a focused set of tasks for the current day that moves "
    "the user toward their goal. You are not a chatbot; you output structured data the application acts on.\n\n"
    "Core Responsibilities:\n"
    "- Understand the user's long-term goal\n"
    "- Generate TODAY'S tasks only, not a full curriculum\n"
    "- Break today's work into actionable tasks and estimate the effort\n"
    "- Respect the user's constraints (time available, deadline)\n"
    "- Never repeat tasks that are already completed\n\n"
    "You must NOT:\n"
    "- Generate tasks for future days\n"
    "- Repeat tasks that have already been completed\n"
    "- Decide calendar dates beyond \"today\"\n"
    "- Modify existing schedules or override completed work\n\n"
    "How You Should Think:\n"
    "1. What is the long-term goal?\n"
    "2. What has already been completed? Do not repeat it.\n"
    "3. What is the next logical step toward the goal?\n"
    "4. What can be accomplished TODAY in the available time?\n"
    "5. How should today's work be split into tasks, and what depends on what?\n\n"
    f"{_SHARED_OUTPUT_RULES}\n\n"
    "Task Guidelines:\n"
    "- Tasks must be atomic and actionable, 1-3 hours each\n"
    "- Tasks must not include dates; they are for today\n"
    "- Total estimated hours must fit within the daily availability\n"
    "- Be realistic, not optimistic; prefer under-commitment and allow for breaks\n\n"
    f"{_SHARED_SAFETY_RULES}"
)

FULL_CURRICULUM_SYSTEM_PROMPT = (
    "You are Planwise, a goal planning assistant embedded inside a productivity application.\n"
    "Your job is to turn the user's long-term goal into a complete curriculum and an ordered task list "
    "that covers the whole timeframe. You are not a chatbot; you output structured data the application acts on.\n\n"
    "Core Responsibilities:\n"
    "- Understand the user's long-term goal and how much time they have\n"
    "- Design a multi-phase curriculum: foundations first, then practice, then consolidation\n"
    "- Order topics so that prerequisites always come before the topics that need them\n"
    "- Derive atomic tasks from the curriculum, in the order they should be worked on, spanning the whole timeframe\n"
    "- Skip topics the user has already completed and build on them instead\n\n"
    "You must NOT:\n"
    "- Assign calendar dates to tasks; scheduling is handled by the application\n"
    "- Modify existing schedules or override completed work\n\n"
    f"{_SHARED_OUTPUT_RULES}\n\n"
    "Task Guidelines:\n"
    "- Tasks must be atomic and actionable, 1-3 hours each\n"
    "- Every task must belong to a topic in the curriculum\n"
    "- Total estimated hours should fit the timeframe and daily availability when they are given\n"
    "- Be realistic, not optimistic; prefer under-commitment\n\n"
    f"{_SHARED_SAFETY_RULES}"
)

_OUTPUT_SCHEMA = """{{
  "curriculum": {{
    "overview": "{overview}",
    "topics": [
      {{
        "name": "{topic_name}",
        "priority": "high" | "medium" | "low",
        "estimated_hours": number,
        "prerequisites": ["names of earlier topics"],
        "description": "{topic_description}"
      }}
    ]
  }},
  "tasks": [
    {{
      "title": "{task_title}",
      "description": "What needs to be done",
      "estimated_hours": number,
      "tags": ["tag1", "tag2"]
    }}
  ],
  "assumptions": ["assumption1", "assumption2"]
}}"""

DAILY_OUTPUT_SCHEMA = (
    "Required JSON Output Format (for TODAY'S plan only):\n"
    + _OUTPUT_SCHEMA.format(
        overview="Brief overview of today's focus and how it relates to the overall goal",
        topic_name="Topic or area to focus on today",
        topic_description="What this topic covers for today",
        task_title="Task title for today",
    )
    + "\n\nIMPORTANT:\n"
    "- Generate tasks ONLY for TODAY\n"
    "- Total estimated_hours must be at most the daily availability\n"
    "- Do NOT repeat any completed tasks\n"
    "- Focus on the next logical steps toward the goal"
)

FULL_CURRICULUM_OUTPUT_SCHEMA = (
    "Required JSON Output Format (complete curriculum):\n"
    + _OUTPUT_SCHEMA.format(
        overview="Summary of the phases of the curriculum and how they lead to the goal",
        topic_name="Topic name",
        topic_description="What this topic covers and why it matters for the goal",
        task_title="Task title",
    )
    + "\n\nIMPORTANT:\n"
    "- Topics are listed in the order they should be studied\n"
    "- Tasks are listed in the order they should be done and cover the whole timeframe\n"
    "- Do NOT include topics that are already completed"
)


def compose_prompt(
    request: PlanRequest,
    completed_tasks: Optional[Sequence[CompletedTask]] = None,
    *,
    mode: PlanMode = PlanMode.DAILY_ONLY,
    today: Optional[date] = None,
) -> str:
    """Render the full instruction text sent to the generator."""
    today = today or date.today()
    if mode is PlanMode.DAILY_ONLY:
        return "\n\n".join(
            [
                DAILY_SYSTEM_PROMPT,
                DAILY_OUTPUT_SCHEMA,
                _daily_user_block(request, completed_tasks or [], today),
                "Remember: Output ONLY valid JSON matching the schema above, no markdown, no commentary, "
                "no extra fields. Generate TODAY'S plan only.",
            ]
        )
    return "\n\n".join(
        [
            FULL_CURRICULUM_SYSTEM_PROMPT,
            FULL_CURRICULUM_OUTPUT_SCHEMA,
            _full_user_block(request, today),
            "Remember: Output ONLY valid JSON matching the schema above, no markdown, no commentary, "
            "no extra fields.",
        ]
    )


def format_today(today: date) -> str:
    """Long form date, e.g. ``Sunday, October 18, 2026``."""
    return f"{today:%A}, {today:%B} {today.day}, {today.year}"


def _daily_user_block(request: PlanRequest, completed_tasks: Sequence[CompletedTask], today: date) -> str:
    # Context lines sit directly under the goal so each present field adds exactly one line.
    goal_lines = [f"Goal: {request.goal.strip()}"]
    goal_lines.extend(
        _context_lines(request, today, availability_label="Available Time Today", availability_unit="hours")
    )
    sections = [
        f"Generate TODAY'S plan ({format_today(today)}) for the following goal:",
        "\n".join(goal_lines),
    ]
    if completed_tasks:
        titles = ", ".join(task.title for task in completed_tasks)
        sections.append(
            f"CRITICAL: These {len(completed_tasks)} tasks are already completed. "
            f"DO NOT create any task with a similar or identical title: {titles}"
        )
    else:
        sections.append("Note: No tasks have been completed yet. This appears to be the first day of planning.")
    sections.append(
        "Generate TODAY'S plan only. Focus on what can be accomplished today to move toward the goal. "
        "Do not repeat completed tasks."
    )
    return "\n\n".join(sections)


def _full_user_block(request: PlanRequest, today: date) -> str:
    goal_lines = [f"Goal: {request.goal.strip()}"]
    goal_lines.extend(
        _context_lines(request, today, availability_label="Daily Availability", availability_unit="hours per day")
    )
    completed_topics = [topic.strip() for topic in request.completed_topics or [] if topic and topic.strip()]
    if completed_topics:
        goal_lines.append(f"Completed Topics: {', '.join(completed_topics)}")
    return "\n\n".join(
        [
            f"Generate a complete curriculum and task list (planning date: {format_today(today)}) "
            "for the following goal:",
            "\n".join(goal_lines),
            "Cover the whole timeframe. When the timeframe is not given, infer a realistic one "
            "and state it in assumptions.",
        ]
    )


def _context_lines(request: PlanRequest, today: date, *, availability_label: str, availability_unit: str) -> List[str]:
    lines: List[str] = []
    timeframe = _clean(request.timeframe)
    if timeframe:
        lines.append(f"Timeframe: {timeframe}")
    if request.daily_availability:
        lines.append(f"{availability_label}: {request.daily_availability:g} {availability_unit}")
    prior_knowledge = _clean(request.prior_knowledge)
    if prior_knowledge:
        lines.append(f"Prior Knowledge: {prior_knowledge}")

    metadata = request.project_metadata
    if metadata:
        deadline = _clean(metadata.deadline)
        if deadline:
            lines.append(f"Deadline: {deadline}{_deadline_distance(deadline, today)}")
        focus_level = _clean(metadata.focus_level)
        if focus_level:
            lines.append(f"Focus Level: {focus_level}")
    return lines


def _deadline_distance(deadline: str, today: date) -> str:
    try:
        deadline_date = dateparser.parse(deadline, default=datetime.combine(today, time.min)).date()
    except (ValueError, OverflowError):
        return ""
    days = (deadline_date - today).days
    if days == 0:
        return " (today)"
    unit = "day" if abs(days) == 1 else "days"
    if days < 0:
        return f" (passed {-days} {unit} ago)"
    return f" ({days} {unit} from today)"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
