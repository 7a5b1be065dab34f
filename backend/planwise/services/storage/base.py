"""Blob storage interface for uploaded project files."""
from __future__ import annotations

from typing import Optional


class StorageError(Exception):
    """Raised by providers when a blob cannot be stored."""


class BlobStorage:
    """Base interface for storage providers."""

    def upload(self, path: str, data: bytes, content_type: str) -> Optional[str]:
        """Store ``data`` at ``path`` and return its public URL, or None if it has none."""
        raise NotImplementedError
