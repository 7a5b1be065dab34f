"""Schemas for task board endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from planwise.api.schemas.project import FilePayload

TaskStatus = Literal["pending", "completed", "skipped"]


class TaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    title: str
    description: Optional[str]
    image_urls: Optional[List[str]]
    estimated_hours: Optional[float]
    status: TaskStatus
    order_index: Optional[int]
    created_at: datetime


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    status: TaskStatus = "pending"
    order_index: Optional[int] = Field(default=None, ge=0)
    images: List[FilePayload] = Field(default_factory=list)


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    status: Optional[TaskStatus] = None
    order_index: Optional[int] = Field(default=None, ge=0)
