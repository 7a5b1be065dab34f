"""Upload project files, falling back to inline data URLs."""
from __future__ import annotations

import base64
import logging
import time
from typing import List, Optional, Protocol, Sequence, Tuple
from uuid import UUID, uuid4

from planwise.services.storage.base import BlobStorage, StorageError
from planwise.services.storage.factory import get_blob_storage

logger = logging.getLogger(__name__)


class UploadedFile(Protocol):
    data_url: str
    file_name: Optional[str]
    file_type: Optional[str]


def decode_data_url(data_url: str) -> Tuple[str, bytes]:
    """Split ``data:<mime>;base64,<payload>`` into content type and bytes."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:"):
        raise ValueError("Not a data URL")
    meta = header[len("data:"):].split(";")
    content_type = meta[0] or "application/octet-stream"
    if "base64" in meta[1:]:
        return content_type, base64.b64decode(payload, validate=True)
    return content_type, payload.encode("utf-8")


def blob_path(user_id: UUID, file_name: Optional[str], content_type: str) -> str:
    extension = ""
    if file_name and "." in file_name:
        extension = file_name.rsplit(".", 1)[1]
    if not extension and "/" in content_type:
        extension = content_type.split("/", 1)[1]
    timestamp = int(time.time() * 1000)
    return f"{user_id}/{timestamp}-{uuid4().hex[:7]}.{extension or 'bin'}"


def upload_project_files(
    files: Sequence[UploadedFile],
    user_id: UUID,
    storage: Optional[BlobStorage] = None,
) -> List[str]:
    """Return one URL per file, in input order.

    A file that cannot be decoded or stored keeps its original data URL so
    uploads never block project creation.
    """
    backend = storage or get_blob_storage()
    urls: List[str] = []
    for index, item in enumerate(files):
        try:
            content_type, data = decode_data_url(item.data_url)
            content_type = item.file_type or content_type
            public_url = backend.upload(blob_path(user_id, item.file_name, content_type), data, content_type)
        except (ValueError, StorageError) as exc:
            logger.warning("Error uploading file %d to storage, using data URL: %s", index, exc)
            urls.append(item.data_url)
            continue
        urls.append(public_url or item.data_url)
    return urls
