"""Helpers for working with user profiles."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from planwise.db.models.user import User


def get_or_create_user(db: Session, user_id: UUID, full_name: Optional[str] = None) -> User:
    """Fetch the profile row for ``user_id``, inserting it if this is the first request."""
    user = db.get(User, user_id)
    if user:
        if full_name and not user.full_name:
            user.full_name = full_name
        return user

    user = User(id=user_id, full_name=full_name)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        # A concurrent request created the same profile first.
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise
