"""Task persistence helpers."""
from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import asc, func, nulls_last
from sqlalchemy.orm import Session

from planwise.db.models.task import Task
from planwise.planning.schemas import CompletedTask


def list_tasks(db: Session, project_id: UUID) -> List[Task]:
    """Tasks in board order: explicit index first, then creation time."""
    return (
        db.query(Task)
        .filter(Task.project_id == project_id)
        .order_by(nulls_last(asc(Task.order_index)), asc(Task.created_at))
        .all()
    )


def list_completed_tasks(db: Session, project_id: UUID) -> List[CompletedTask]:
    """Title/description pairs of finished tasks, fed to daily planning."""
    tasks = [task for task in list_tasks(db, project_id) if task.status == "completed"]
    return [CompletedTask(title=task.title, description=task.description) for task in tasks]


def next_order_index(db: Session, project_id: UUID) -> int:
    current = db.query(func.max(Task.order_index)).filter(Task.project_id == project_id).scalar()
    return 0 if current is None else current + 1


def create_task(db: Session, project_id: UUID, fields: Dict[str, Any]) -> Task:
    values = dict(fields)
    if values.get("order_index") is None:
        values["order_index"] = next_order_index(db, project_id)
    task = Task(project_id=project_id, **values)
    db.add(task)
    db.flush()
    return task


def update_task(db: Session, task: Task, updates: Dict[str, Any]) -> Task:
    for key, value in updates.items():
        setattr(task, key, value)
    db.add(task)
    db.flush()
    return task


def delete_task(db: Session, task: Task) -> None:
    db.delete(task)
    db.flush()
