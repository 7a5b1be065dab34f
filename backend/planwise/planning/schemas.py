"""Typed inputs and outputs of the plan-generation pipeline."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_OVERVIEW = "Generated curriculum for the specified goal"


class PlanMode(str, Enum):
    """Which prompt variant the composer renders."""

    FULL_CURRICULUM = "full"
    DAILY_ONLY = "daily"


class ProjectMetadata(BaseModel):
    deadline: Optional[str] = Field(default=None, description="Deadline as date text, e.g. 2026-12-01.")
    focus_level: Optional[str] = Field(default=None, description="Free-text intensity hint.")


class PlanRequest(BaseModel):
    """What the user wants to achieve plus the constraints around it."""

    goal: str
    timeframe: Optional[str] = Field(default=None, description="Duration hint such as '3 months'.")
    prior_knowledge: Optional[str] = None
    daily_availability: Optional[float] = Field(default=None, gt=0, description="Hours per day.")
    completed_topics: Optional[List[str]] = Field(
        default=None,
        description="Topics already finished; only used for full-curriculum plans.",
    )
    project_metadata: Optional[ProjectMetadata] = None


class CompletedTask(BaseModel):
    title: str
    description: Optional[str] = None


class CurriculumTopic(BaseModel):
    name: str
    priority: Literal["high", "medium", "low"]
    estimated_hours: float
    prerequisites: List[str] = Field(default_factory=list)
    description: str


class PlanTask(BaseModel):
    title: str
    description: str
    estimated_hours: float
    tags: List[str] = Field(default_factory=list)


class PlanCurriculum(BaseModel):
    model_config = ConfigDict(extra="allow")

    overview: str = DEFAULT_OVERVIEW
    # Elements are left as parsed unless strict validation is enabled.
    topics: List[Any] = Field(default_factory=list)


class PlanResponse(BaseModel):
    """One validated plan: curriculum, today's or the whole timeframe's tasks, and assumptions."""

    curriculum: PlanCurriculum
    tasks: List[Any] = Field(default_factory=list)
    assumptions: List[Any] = Field(default_factory=list)
