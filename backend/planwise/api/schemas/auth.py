"""Schemas for session endpoints."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel


class SessionRequest(BaseModel):
    user_id: Optional[UUID] = None
    full_name: Optional[str] = None


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    expires_in: int
