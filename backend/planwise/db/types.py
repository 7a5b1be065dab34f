"""Database column type helpers."""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

# Curriculum topics and file URL lists: JSONB on Postgres, JSON text elsewhere (SQLite in tests).
JSONBCompat = JSON().with_variant(JSONB(), "postgresql")
