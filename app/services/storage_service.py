import logging
import os
import time
from pathlib import Path
from typing import Optional
import aiofiles
from fastapi import UploadFile
from app.config import settings
from app.core.exceptions import FileTooLargeError, InvalidFileError, PersistenceError
from app.utils.path_helpers import get_file_url, is_safe_path

logger = logging.getLogger(__name__)

THUMBNAIL_BUCKET = "course-thumbnails"
VIDEO_BUCKET = "lesson-videos"
CHUNK_SIZE = 1024 * 1024

# Разрешённые виды файлов и префиксы их MIME-типов
FILE_KINDS = {
    "image": "image/",
    "video": "video/",
}

class StorageService:
    def __init__(self, base_upload_dir: Optional[str] = None, max_upload_size: Optional[int] = None):
        self.base_upload_dir = Path(base_upload_dir or settings.UPLOAD_DIR)
        self.base_upload_dir.mkdir(parents=True, exist_ok=True)
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE
    
    def check_content_type(self, upload_file: UploadFile, kind: str) -> None:
        """Проверяет только префикс MIME-типа, содержимое не анализируется"""
        prefix = FILE_KINDS[kind]
        content_type = upload_file.content_type or ""
        if not content_type.startswith(prefix):
            logger.warning("Rejected upload %r: %r is not %s*", upload_file.filename, content_type, prefix)
            raise InvalidFileError(f"Please select an {kind} file" if kind == "image" else f"Please select a {kind} file")
    
    async def save(self, upload_file: UploadFile, bucket: str, folder: str, kind: str) -> str:
        """Сохраняет файл в bucket/folder и возвращает публичный URL"""
        self.check_content_type(upload_file, kind)
        
        upload_dir = self.base_upload_dir / bucket / folder
        if not is_safe_path(str(self.base_upload_dir), str(upload_dir)):
            raise InvalidFileError("Invalid upload folder")
        
        # Размер из заголовков формы известен заранее, если клиент его передал
        if upload_file.size is not None and upload_file.size > self.max_upload_size:
            raise FileTooLargeError(self.max_upload_size)
        
        # Имя файла как в хранилище: метка времени и исходное расширение
        file_ext = Path(upload_file.filename).suffix if upload_file.filename else ""
        unique_filename = f"{int(time.time() * 1000)}-{os.urandom(4).hex()}{file_ext}"
        file_path = upload_dir / unique_filename
        
        written = 0
        try:
            upload_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as out_file:
                while True:
                    chunk = await upload_file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_upload_size:
                        break
                    await out_file.write(chunk)
        except OSError as e:
            logger.exception("Failed to store upload in %s", upload_dir)
            self._remove(file_path)
            raise PersistenceError("Failed to upload file") from e
        
        if written > self.max_upload_size:
            self._remove(file_path)
            raise FileTooLargeError(self.max_upload_size)
        
        logger.info("Stored %s (%s bytes) in %s/%s", unique_filename, written, bucket, folder)
        return get_file_url(str(file_path), base_dir=str(self.base_upload_dir))
    
    def delete(self, file_url: str) -> bool:
        """Удаляет ранее загруженный файл по его публичному URL"""
        if not file_url or not file_url.startswith('/uploads/'):
            return False
        path = self.base_upload_dir / file_url[len('/uploads/'):]
        if not is_safe_path(str(self.base_upload_dir), str(path)):
            return False
        return self._remove(path)
    
    def _remove(self, path: Path) -> bool:
        try:
            if path.exists():
                path.unlink()
                return True
            return False
        except OSError:
            logger.exception("Failed to delete %s", path)
            return False
