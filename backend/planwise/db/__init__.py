"""Database utilities and models."""

from planwise.db.base import Base
from planwise.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
