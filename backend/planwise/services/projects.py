"""Project persistence helpers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from planwise.db.models.project import Project


def list_projects(db: Session, user_id: UUID) -> List[Project]:
    return (
        db.query(Project)
        .filter(Project.user_id == user_id)
        .order_by(desc(Project.created_at))
        .all()
    )


def get_project(db: Session, project_id: UUID, user_id: UUID) -> Optional[Project]:
    """Return the project only when it belongs to ``user_id``."""
    project = db.get(Project, project_id)
    if project is None or project.user_id != user_id:
        return None
    return project


def create_project(db: Session, user_id: UUID, fields: Dict[str, Any]) -> Project:
    project = Project(user_id=user_id, **fields)
    db.add(project)
    db.flush()
    return project


def update_project(db: Session, project: Project, updates: Dict[str, Any]) -> Project:
    for key, value in updates.items():
        setattr(project, key, value)
    db.add(project)
    db.flush()
    return project


def delete_project(db: Session, project: Project) -> None:
    db.delete(project)
    db.flush()
