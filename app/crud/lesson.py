from sqlalchemy.orm import Session
from typing import List, Optional
from app.crud.base import persistence_guard
from app.models.lesson import Lesson
from app.schemas.lesson import LessonDraft

@persistence_guard()
def get_lesson(db: Session, lesson_id: str) -> Optional[Lesson]:
    return db.query(Lesson).filter(Lesson.id == lesson_id).first()

@persistence_guard()
def get_lessons_by_course(db: Session, course_id: str) -> List[Lesson]:
    return db.query(Lesson).filter(
        Lesson.course_id == course_id
    ).order_by(Lesson.order_index).all()

@persistence_guard()
def replace_course_lessons(db: Session, course_id: str, drafts: List[LessonDraft]) -> List[Lesson]:
    """
    Сохраняет набор уроков курса целиком, одной транзакцией.
    
    Уроки с известным id обновляются на месте (их прогресс сохраняется),
    уроки без id создаются, отсутствующие в наборе удаляются.
    order_index должен быть уже нормализован вызывающим кодом.
    """
    existing = {
        lesson.id: lesson
        for lesson in db.query(Lesson).filter(Lesson.course_id == course_id).all()
    }
    kept_ids = {draft.id for draft in drafts if draft.id in existing}
    
    for lesson_id, lesson in existing.items():
        if lesson_id not in kept_ids:
            db.delete(lesson)
    
    for draft in drafts:
        fields = draft.model_dump(exclude={"id"})
        if draft.id in kept_ids:
            lesson = existing[draft.id]
            for field, value in fields.items():
                setattr(lesson, field, value)
        else:
            db.add(Lesson(course_id=course_id, **fields))
    
    db.commit()
    return db.query(Lesson).filter(
        Lesson.course_id == course_id
    ).order_by(Lesson.order_index).all()
