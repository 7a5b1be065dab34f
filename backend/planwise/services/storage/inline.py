"""Provider that keeps uploads inline as data URLs."""
from __future__ import annotations

import logging
from typing import Optional

from planwise.services.storage.base import BlobStorage

logger = logging.getLogger(__name__)


class InlineBlobStorage(BlobStorage):
    def upload(self, path: str, data: bytes, content_type: str) -> Optional[str]:
        logger.info("Inline storage keeps %s embedded (%s, %d bytes)", path, content_type, len(data))
        return None
