"""Session issuing endpoint.

Identity is owned by an external provider; this route only mints the
bearer token the rest of the API checks.
"""
from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from planwise.api.schemas.auth import SessionRequest, SessionResponse
from planwise.core.auth import issue_session_token
from planwise.core.config import settings
from planwise.db.deps import get_db
from planwise.services.user_service import get_or_create_user

router = APIRouter()


@router.post("/auth/session", response_model=SessionResponse, status_code=status.HTTP_201_CREATED, tags=["auth"])
def create_session(payload: SessionRequest | None = None, db: Session = Depends(get_db)) -> SessionResponse:
    params = payload or SessionRequest()
    user = get_or_create_user(db, params.user_id or uuid4(), full_name=params.full_name)
    db.commit()
    return SessionResponse(
        access_token=issue_session_token(user.id),
        user_id=user.id,
        expires_in=settings.session_ttl_seconds,
    )
