"""Task board API routes."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from planwise.api.schemas.task import TaskCreateRequest, TaskSummary, TaskUpdateRequest
from planwise.core.auth import get_current_user
from planwise.db.deps import get_db
from planwise.db.models.task import Task
from planwise.db.models.user import User
from planwise.observability.metrics import log_metric
from planwise.observability.tracing import trace
from planwise.services import tasks as task_service
from planwise.services.projects import get_project
from planwise.services.storage.uploads import upload_project_files

router = APIRouter()


def _owned_task(db: Session, task_id: UUID, user: User) -> Task:
    task = db.get(Task, task_id)
    if task is None or get_project(db, task.project_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.get("/projects/{project_id}/tasks", response_model=List[TaskSummary], tags=["tasks"])
def list_project_tasks(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[TaskSummary]:
    """List a project's tasks in board order."""
    if get_project(db, project_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    tasks = task_service.list_tasks(db, project_id)
    log_metric("task.list.count", len(tasks), metadata={"project_id": str(project_id)})
    return [TaskSummary.model_validate(task) for task in tasks]


@router.post(
    "/projects/{project_id}/tasks",
    response_model=TaskSummary,
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_project_task(
    project_id: UUID,
    payload: TaskCreateRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskSummary:
    """Add a manual task; it goes to the end of the board unless an index is given."""
    if get_project(db, project_id, user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    request_id = getattr(http_request.state, "request_id", None)
    fields = payload.model_dump(exclude={"images"})
    try:
        with trace(
            "task.create",
            metadata={"route": f"/projects/{project_id}/tasks", "project_id": str(project_id)},
            user_id=str(user.id),
            request_id=request_id,
        ):
            if payload.images:
                fields["image_urls"] = upload_project_files(payload.images, user.id)
            task = task_service.create_task(db, project_id, fields)
            db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(task)
    return TaskSummary.model_validate(task)


@router.get("/tasks/{task_id}", response_model=TaskSummary, tags=["tasks"])
def get_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskSummary:
    return TaskSummary.model_validate(_owned_task(db, task_id, user))


@router.patch("/tasks/{task_id}", response_model=TaskSummary, tags=["tasks"])
def update_task(
    task_id: UUID,
    payload: TaskUpdateRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskSummary:
    """Edit a task or move it between pending, completed and skipped."""
    task = _owned_task(db, task_id, user)
    updates = payload.model_dump(exclude_unset=True)
    for required in ("title", "status"):
        if required in updates and updates[required] is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{required} cannot be null")

    request_id = getattr(http_request.state, "request_id", None)
    previous_status = task.status
    try:
        with trace(
            "task.update",
            metadata={"route": f"/tasks/{task_id}", "fields": sorted(updates)},
            user_id=str(user.id),
            request_id=request_id,
        ):
            task_service.update_task(db, task, updates)
            db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(task)
    if task.status != previous_status:
        log_metric("task.status.changed", 1, metadata={"task_id": str(task_id), "status": task.status})
    return TaskSummary.model_validate(task)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["tasks"])
def delete_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    task = _owned_task(db, task_id, user)
    try:
        task_service.delete_task(db, task)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)
