"""Schemas for plan generation and application endpoints."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from planwise.db.models.project import Project
from planwise.planning.schemas import PlanMode, PlanRequest, PlanResponse, PlanTask, ProjectMetadata


class GeneratePlanRequest(BaseModel):
    goal: Optional[str] = None
    timeframe: Optional[str] = None
    prior_knowledge: Optional[str] = None
    daily_availability: Optional[float] = Field(default=None, gt=0)
    completed_topics: Optional[List[str]] = None
    project_metadata: Optional[ProjectMetadata] = None
    project_id: Optional[UUID] = None
    mode: Optional[PlanMode] = None

    def to_plan_request(self, project: Optional[Project] = None) -> PlanRequest:
        """Build the pipeline request, filling gaps from the project's own settings."""
        metadata = self.project_metadata.model_copy() if self.project_metadata else None
        daily_availability = self.daily_availability
        if project is not None:
            if daily_availability is None and project.daily_hours:
                daily_availability = project.daily_hours
            if project.deadline and not (metadata and metadata.deadline):
                metadata = metadata or ProjectMetadata()
                metadata.deadline = project.deadline.isoformat()
        return PlanRequest(
            goal=(self.goal or "").strip(),
            timeframe=self.timeframe,
            prior_knowledge=self.prior_knowledge,
            daily_availability=daily_availability,
            completed_topics=self.completed_topics,
            project_metadata=metadata,
        )


class PlanToApply(PlanResponse):
    tasks: List[PlanTask] = Field(default_factory=list)


class ApplyPlanRequest(BaseModel):
    project_id: Optional[UUID] = None
    plan: Optional[PlanToApply] = None


class ApplyPlanResponse(BaseModel):
    success: bool
    tasks_created: int
    request_id: str
