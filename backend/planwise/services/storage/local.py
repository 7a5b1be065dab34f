"""Filesystem-backed storage provider."""
from __future__ import annotations

import logging
from pathlib import Path

from planwise.services.storage.base import BlobStorage, StorageError

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents:
            raise StorageError(f"Refusing to write outside storage root: {path}")
        if target.exists():
            raise StorageError(f"Blob already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Unable to store {path}: {exc}") from exc
        logger.info("Stored blob %s (%s, %d bytes)", path, content_type, len(data))
        return f"{self.public_base_url}/{path}"
