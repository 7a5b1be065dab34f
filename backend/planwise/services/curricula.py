"""Curriculum persistence helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from planwise.db.models.curriculum import Curriculum


def create_curriculum(db: Session, project_id: UUID, topics: Dict[str, Any]) -> Curriculum:
    curriculum = Curriculum(
        project_id=project_id,
        topics=topics,
        generated_at=datetime.now(timezone.utc),
    )
    db.add(curriculum)
    db.flush()
    return curriculum


def latest_curriculum(db: Session, project_id: UUID) -> Optional[Curriculum]:
    """Most recently generated curriculum for the project."""
    return (
        db.query(Curriculum)
        .filter(Curriculum.project_id == project_id)
        .order_by(desc(Curriculum.generated_at))
        .first()
    )
