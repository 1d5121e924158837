from pathlib import Path
from typing import Optional
from app.config import settings

def get_file_url(file_path: str, base_dir: Optional[str] = None) -> str:
    """
    Преобразует локальный путь в URL для доступа через /uploads
    """
    if not file_path:
        return ""
    
    # Если это уже URL, возвращаем как есть
    if file_path.startswith(('http://', 'https://', '//')):
        return file_path
    
    abs_path = Path(file_path).absolute()
    upload_dir = Path(base_dir or settings.UPLOAD_DIR).absolute()
    
    try:
        rel_path = abs_path.relative_to(upload_dir)
        return f"/uploads/{rel_path.as_posix()}"
    except ValueError:
        # Путь вне каталога загрузок, возвращаем как есть
        return file_path

def is_safe_path(base_path: str, target_path: str) -> bool:
    """
    Проверяет, что target_path находится внутри base_path
    (защита от path traversal)
    """
    try:
        base = Path(base_path).resolve()
        target = Path(target_path).resolve()
        return base in target.parents or base == target
    except (OSError, RuntimeError):
        return False
