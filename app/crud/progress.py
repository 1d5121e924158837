from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Iterable, Optional, Set
from app.crud.base import persistence_guard
from app.models.lesson import LessonProgress

@persistence_guard()
def upsert_lesson_progress(
    db: Session,
    user_id: str,
    lesson_id: str,
    watch_time: Optional[int] = None
) -> LessonProgress:
    """
    Отмечает урок пройденным.
    
    Повторная отметка не меняет completed_at; watch_time обновляется,
    только если передан.
    """
    entry = db.query(LessonProgress).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.lesson_id == lesson_id
    ).first()
    
    if entry is None:
        entry = LessonProgress(
            user_id=user_id,
            lesson_id=lesson_id,
            completed_at=datetime.utcnow(),
            watch_time=watch_time
        )
        db.add(entry)
        try:
            db.commit()
        except IntegrityError:
            # Параллельная отметка того же урока успела раньше
            db.rollback()
            entry = db.query(LessonProgress).filter(
                LessonProgress.user_id == user_id,
                LessonProgress.lesson_id == lesson_id
            ).one()
            if watch_time is None:
                return entry
            entry.watch_time = watch_time
            db.commit()
    elif watch_time is not None:
        entry.watch_time = watch_time
        db.commit()
    
    db.refresh(entry)
    return entry

@persistence_guard()
def get_completed_lesson_ids(db: Session, user_id: str, lesson_ids: Iterable[str]) -> Set[str]:
    ids = set(lesson_ids)
    if not ids:
        return set()
    rows = db.query(LessonProgress.lesson_id).filter(
        LessonProgress.user_id == user_id,
        LessonProgress.lesson_id.in_(ids)
    ).all()
    return {row[0] for row in rows}
