"""Storage provider factory."""
from __future__ import annotations

import logging
from functools import lru_cache

from planwise.core.config import settings
from planwise.services.storage.base import BlobStorage
from planwise.services.storage.inline import InlineBlobStorage
from planwise.services.storage.local import LocalBlobStorage

logger = logging.getLogger(__name__)


@lru_cache
def get_blob_storage() -> BlobStorage:
    provider = settings.storage_provider.lower()
    if provider == "local":
        return LocalBlobStorage(settings.storage_root, settings.storage_public_base_url)
    if provider != "inline":
        logger.warning("Unknown storage provider %r; keeping uploads inline.", provider)
    return InlineBlobStorage()
