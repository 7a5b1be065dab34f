"""Session tokens and the FastAPI dependencies that gate plan and project routes.

Tokens look like ``<base64url(claims)>.<base64url(hmac_sha256)>`` and are
signed with ``SESSION_SECRET``.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from planwise.core.config import settings
from planwise.db.deps import get_db
from planwise.db.models.user import User
from planwise.services.user_service import get_or_create_user


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _sign(payload_b64: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), payload_b64.encode("ascii"), hashlib.sha256).digest()
    return _b64encode(digest)


def issue_session_token(user_id: UUID, *, ttl_seconds: Optional[int] = None, secret: Optional[str] = None) -> str:
    """Sign a session token whose ``sub`` claim is the user id."""
    now = int(time.time())
    claims = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + (ttl_seconds if ttl_seconds is not None else settings.session_ttl_seconds),
    }
    payload_b64 = _b64encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    return f"{payload_b64}.{_sign(payload_b64, secret or settings.session_secret)}"


def read_session_claims(token: str, *, secret: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Return the claims of a valid, unexpired token, else None."""
    if not token.isascii():
        return None
    try:
        payload_b64, signature = token.split(".", 1)
    except ValueError:
        return None
    if not hmac.compare_digest(_sign(payload_b64, secret or settings.session_secret), signature):
        return None
    try:
        claims = json.loads(_b64decode(payload_b64))
    except ValueError:
        return None
    if not isinstance(claims, dict) or int(claims.get("exp", 0)) < int(time.time()):
        return None
    return claims


def get_auth_claims(authorization: str = Header(default="")) -> Dict[str, Any]:
    """Claims of the bearer token on the request; 401 when absent or invalid."""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    claims = read_session_claims(token.strip())
    if not claims or not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return claims


def get_current_user(
    claims: Dict[str, Any] = Depends(get_auth_claims),
    db: Session = Depends(get_db),
) -> User:
    """The signed-in user, created on first sight."""
    try:
        user_id = UUID(str(claims["sub"]))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized") from exc
    user = get_or_create_user(db, user_id)
    db.commit()
    return user
