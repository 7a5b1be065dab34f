"""Schemas for project endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FilePayload(BaseModel):
    data_url: str
    file_name: Optional[str] = None
    file_type: Optional[str] = None


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    deadline: Optional[date] = None
    daily_hours: Optional[float] = Field(default=None, gt=0, le=24)
    files: List[FilePayload] = Field(default_factory=list)


class ProjectUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    deadline: Optional[date] = None
    daily_hours: Optional[float] = Field(default=None, gt=0, le=24)
    is_active: Optional[bool] = None


class ProjectSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: Optional[str]
    deadline: Optional[date]
    daily_hours: Optional[float]
    is_active: bool
    file_urls: Optional[List[str]]
    created_at: datetime


class CurriculumSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    project_id: UUID
    topics: Dict[str, Any]
    generated_at: datetime
