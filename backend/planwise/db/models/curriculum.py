"""Curriculum ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import UUID

from planwise.db.base import Base
from planwise.db.types import JSONBCompat


class Curriculum(Base):
    __tablename__ = "curriculums"
    __table_args__ = (Index("ix_curriculums_project_id", "project_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Overview plus ordered topics exactly as the generator returned them.
    topics = Column(JSONBCompat, nullable=False, default=dict)
    generated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
