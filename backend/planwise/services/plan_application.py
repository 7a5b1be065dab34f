"""Persist a generated plan as a curriculum record plus board tasks."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planwise.db.models.curriculum import Curriculum
from planwise.db.models.task import Task
from planwise.observability.metrics import log_metric
from planwise.planning.schemas import PlanCurriculum, PlanTask
from planwise.services.curricula import create_curriculum
from planwise.services.tasks import next_order_index

logger = logging.getLogger(__name__)


def save_curriculum_best_effort(db: Session, project_id: UUID, curriculum: PlanCurriculum) -> Optional[Curriculum]:
    """Store the curriculum in its own transaction; failures are logged, not raised."""
    try:
        record = create_curriculum(db, project_id, curriculum.model_dump())
        db.commit()
        return record
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving curriculum for project %s", project_id)
        return None


def task_description(plan_task: PlanTask) -> str:
    if not plan_task.tags:
        return plan_task.description
    return f"{plan_task.description}\n\nTags: {', '.join(plan_task.tags)}"


def create_tasks_from_plan(db: Session, project_id: UUID, plan_tasks: Sequence[PlanTask]) -> List[Task]:
    """Add plan tasks after the project's existing tasks, keeping plan order."""
    start = next_order_index(db, project_id)
    tasks: List[Task] = []
    for offset, plan_task in enumerate(plan_tasks):
        task = Task(
            project_id=project_id,
            title=plan_task.title,
            description=task_description(plan_task),
            estimated_hours=plan_task.estimated_hours,
            status="pending",
            order_index=start + offset,
        )
        db.add(task)
        tasks.append(task)
    db.flush()
    return tasks


def apply_plan(
    db: Session,
    project_id: UUID,
    curriculum: PlanCurriculum,
    plan_tasks: Sequence[PlanTask],
) -> List[Task]:
    """Save the curriculum (best effort) and create the tasks (must succeed).

    Task insert errors roll the session back and propagate.
    """
    save_curriculum_best_effort(db, project_id, curriculum)
    try:
        tasks = create_tasks_from_plan(db, project_id, plan_tasks)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating tasks for project %s", project_id)
        raise
    log_metric("plan.apply.tasks_created", len(tasks), metadata={"project_id": str(project_id)})
    return tasks
