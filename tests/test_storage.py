import asyncio
import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.core.exceptions import FileTooLargeError
from app.services.storage_service import StorageService, THUMBNAIL_BUCKET

def make_upload(content, filename="cover.png", content_type="image/png", size=None):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        size=size,
        headers=Headers({"content-type": content_type})
    )

@pytest.fixture
def storage(tmp_path):
    return StorageService(base_upload_dir=str(tmp_path), max_upload_size=16)

def test_save_and_delete(storage, tmp_path):
    url = asyncio.run(storage.save(make_upload(b"cover"), bucket=THUMBNAIL_BUCKET, folder="u1", kind="image"))
    assert url.startswith("/uploads/course-thumbnails/u1/")
    stored = tmp_path / url[len("/uploads/"):]
    assert stored.read_bytes() == b"cover"
    
    assert storage.delete(url) is True
    assert not stored.exists()
    assert storage.delete(url) is False

def test_oversized_upload_leaves_no_file(storage, tmp_path):
    with pytest.raises(FileTooLargeError):
        asyncio.run(storage.save(make_upload(b"x" * 40), bucket=THUMBNAIL_BUCKET, folder="u1", kind="image"))
    folder = tmp_path / THUMBNAIL_BUCKET / "u1"
    assert not folder.exists() or list(folder.iterdir()) == []

def test_declared_size_checked_before_reading(storage):
    upload = make_upload(b"", size=10_000)
    with pytest.raises(FileTooLargeError):
        asyncio.run(storage.save(upload, bucket=THUMBNAIL_BUCKET, folder="u1", kind="image"))

def test_delete_ignores_foreign_urls(storage):
    assert storage.delete("https://cdn.example.com/cover.png") is False
    assert storage.delete("/uploads/../../etc/passwd") is False
