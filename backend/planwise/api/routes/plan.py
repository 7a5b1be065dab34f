"""Plan generation and application endpoints."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planwise.api.schemas.plan import ApplyPlanRequest, ApplyPlanResponse, GeneratePlanRequest
from planwise.core.auth import get_current_user
from planwise.core.config import settings
from planwise.db.deps import get_db
from planwise.db.models.user import User
from planwise.observability.metrics import log_metric
from planwise.observability.tracing import trace
from planwise.planning.errors import PlanGenerationError
from planwise.planning.schemas import PlanMode, PlanResponse
from planwise.services.plan_application import apply_plan, save_curriculum_best_effort
from planwise.services.plan_generator import TextGenerator, generate_plan
from planwise.services.projects import get_project
from planwise.services.tasks import list_completed_tasks

logger = logging.getLogger(__name__)

router = APIRouter()


def get_text_generator() -> Optional[TextGenerator]:
    """Generator used by the pipeline; None builds a GeminiClient from settings."""
    return None


@router.post("/plan/generate", response_model=PlanResponse, tags=["plan"])
def generate_plan_endpoint(
    payload: GeneratePlanRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: Optional[TextGenerator] = Depends(get_text_generator),
) -> PlanResponse:
    """Generate one plan; when a project is given, also store its curriculum."""
    if not payload.goal or not payload.goal.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Goal is required")

    request_id = getattr(http_request.state, "request_id", None)
    project = None
    if payload.project_id:
        project = get_project(db, payload.project_id, user.id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    mode = payload.mode or PlanMode(settings.plan_mode)
    completed_tasks = list_completed_tasks(db, project.id) if project and mode is PlanMode.DAILY_ONLY else []
    metadata = {
        "route": "/plan/generate",
        "mode": mode.value,
        "project_id": str(project.id) if project else None,
        "completed_tasks": len(completed_tasks),
    }

    start_time = perf_counter()
    success = False
    try:
        with trace("plan.generate.request", metadata=metadata, user_id=str(user.id), request_id=request_id):
            plan = generate_plan(
                payload.to_plan_request(project),
                completed_tasks,
                mode=mode,
                client=generator,
                request_id=request_id,
                user_id=str(user.id),
            )
            success = True
    except PlanGenerationError as exc:
        logger.error("Error generating plan: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Unexpected error while generating plan")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate plan",
        ) from exc
    finally:
        latency_ms = (perf_counter() - start_time) * 1000
        log_metric("plan.generate.request.success", 1 if success else 0, metadata=metadata)
        log_metric("plan.generate.request.latency_ms", latency_ms, metadata=metadata)

    if project is not None:
        save_curriculum_best_effort(db, project.id, plan.curriculum)
    return plan


@router.post("/plan/apply", response_model=ApplyPlanResponse, tags=["plan"])
def apply_plan_endpoint(
    payload: ApplyPlanRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApplyPlanResponse:
    """Save a reviewed plan's curriculum and add its tasks to the project board."""
    if payload.project_id is None or payload.plan is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="project_id and plan are required")

    project = get_project(db, payload.project_id, user.id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "plan.apply",
        metadata={"route": "/plan/apply", "project_id": str(project.id), "tasks": len(payload.plan.tasks)},
        user_id=str(user.id),
        request_id=request_id,
    ):
        try:
            tasks = apply_plan(db, project.id, payload.plan.curriculum, payload.plan.tasks)
        except SQLAlchemyError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create tasks",
            ) from exc

    return ApplyPlanResponse(success=True, tasks_created=len(tasks), request_id=request_id or "")
