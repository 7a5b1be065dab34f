"""Project API routes."""
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from planwise.api.schemas.project import (
    CurriculumSummary,
    ProjectCreateRequest,
    ProjectSummary,
    ProjectUpdateRequest,
)
from planwise.core.auth import get_current_user
from planwise.db.deps import get_db
from planwise.db.models.project import Project
from planwise.db.models.user import User
from planwise.observability.metrics import log_metric
from planwise.observability.tracing import trace
from planwise.services import projects as project_service
from planwise.services.curricula import latest_curriculum
from planwise.services.storage.uploads import upload_project_files

router = APIRouter()


def _owned_project(db: Session, project_id: UUID, user: User) -> Project:
    project = project_service.get_project(db, project_id, user.id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.get("/projects", response_model=List[ProjectSummary], tags=["projects"])
def list_projects(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> List[ProjectSummary]:
    """List the user's projects, newest first."""
    projects = project_service.list_projects(db, user.id)
    return [ProjectSummary.model_validate(project) for project in projects]


@router.post("/projects", response_model=ProjectSummary, status_code=status.HTTP_201_CREATED, tags=["projects"])
def create_project(
    payload: ProjectCreateRequest,
    http_request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectSummary:
    """Create a project; attached files are uploaded to blob storage first."""
    request_id = getattr(http_request.state, "request_id", None)
    fields = payload.model_dump(exclude={"files"})
    try:
        with trace(
            "project.create",
            metadata={"route": "/projects", "files": len(payload.files)},
            user_id=str(user.id),
            request_id=request_id,
        ):
            if payload.files:
                fields["file_urls"] = upload_project_files(payload.files, user.id)
            project = project_service.create_project(db, user.id, fields)
            db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(project)
    log_metric("project.create.success", 1, metadata={"user_id": str(user.id)})
    return ProjectSummary.model_validate(project)


@router.get("/projects/{project_id}", response_model=ProjectSummary, tags=["projects"])
def get_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectSummary:
    return ProjectSummary.model_validate(_owned_project(db, project_id, user))


@router.patch("/projects/{project_id}", response_model=ProjectSummary, tags=["projects"])
def update_project(
    project_id: UUID,
    payload: ProjectUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProjectSummary:
    """Apply a partial update; only fields present in the body change."""
    project = _owned_project(db, project_id, user)
    updates = payload.model_dump(exclude_unset=True)
    if "title" in updates and updates["title"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="title cannot be null")
    if "is_active" in updates and updates["is_active"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="is_active cannot be null")
    try:
        project_service.update_project(db, project, updates)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(project)
    return ProjectSummary.model_validate(project)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["projects"])
def delete_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    project = _owned_project(db, project_id, user)
    try:
        project_service.delete_project(db, project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/projects/{project_id}/curriculum", response_model=CurriculumSummary, tags=["projects"])
def get_latest_curriculum(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurriculumSummary:
    """Most recently generated curriculum for the project."""
    project = _owned_project(db, project_id, user)
    curriculum = latest_curriculum(db, project.id)
    if curriculum is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Curriculum not found")
    return CurriculumSummary.model_validate(curriculum)
