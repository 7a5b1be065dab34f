"""Tests for blob storage providers and project file uploads."""
from __future__ import annotations

import base64
from uuid import uuid4

import pytest

from planwise.api.schemas.project import FilePayload
from planwise.services.storage.base import BlobStorage, StorageError
from planwise.services.storage.inline import InlineBlobStorage
from planwise.services.storage.local import LocalBlobStorage
from planwise.services.storage.uploads import blob_path, decode_data_url, upload_project_files


def _data_url(content: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode('ascii')}"


class _FailingStorage(BlobStorage):
    def upload(self, path: str, data: bytes, content_type: str):
        raise StorageError("bucket unavailable")


def test_decode_data_url() -> None:
    content_type, data = decode_data_url(_data_url(b"\x89PNG"))

    assert content_type == "image/png"
    assert data == b"\x89PNG"


@pytest.mark.parametrize("value", ["https://example.com/a.png", "data:image/png;base64,@@@"])
def test_decode_data_url_rejects_bad_input(value) -> None:
    with pytest.raises(ValueError):
        decode_data_url(value)


def test_blob_path_uses_file_extension_then_mime() -> None:
    user_id = uuid4()

    assert blob_path(user_id, "notes.pdf", "application/pdf").endswith(".pdf")
    assert blob_path(user_id, "notes", "image/jpeg").endswith(".jpeg")
    assert blob_path(user_id, None, "image/png").startswith(f"{user_id}/")


def test_local_storage_writes_file_and_returns_public_url(tmp_path) -> None:
    storage = LocalBlobStorage(str(tmp_path), "/files/")

    url = storage.upload("user/a.txt", b"hello", "text/plain")

    assert url == "/files/user/a.txt"
    assert (tmp_path / "user" / "a.txt").read_bytes() == b"hello"


def test_local_storage_refuses_overwrite_and_escape(tmp_path) -> None:
    storage = LocalBlobStorage(str(tmp_path), "/files")
    storage.upload("user/a.txt", b"hello", "text/plain")

    with pytest.raises(StorageError):
        storage.upload("user/a.txt", b"again", "text/plain")
    with pytest.raises(StorageError):
        storage.upload("../outside.txt", b"x", "text/plain")


def test_upload_keeps_input_order_and_falls_back_per_file(tmp_path) -> None:
    storage = LocalBlobStorage(str(tmp_path), "/files")
    good = FilePayload(data_url=_data_url(b"one"), file_name="one.png")
    broken = FilePayload(data_url="not-a-data-url", file_name="two.png")

    urls = upload_project_files([good, broken], uuid4(), storage=storage)

    assert urls[0].startswith("/files/") and urls[0].endswith(".png")
    assert urls[1] == "not-a-data-url"


def test_upload_falls_back_to_data_url_on_storage_error() -> None:
    payload = FilePayload(data_url=_data_url(b"one"), file_name="one.png")

    assert upload_project_files([payload], uuid4(), storage=_FailingStorage()) == [payload.data_url]


def test_inline_storage_keeps_data_url() -> None:
    payload = FilePayload(data_url=_data_url(b"one"), file_type="image/png")

    assert upload_project_files([payload], uuid4(), storage=InlineBlobStorage()) == [payload.data_url]
