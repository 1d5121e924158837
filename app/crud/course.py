from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional
from app.crud.base import persistence_guard
from app.models.course import Course
from app.models.lesson import Lesson
from app.schemas.course import CourseCreate, CourseUpdate

# Диапазоны цен из фильтра каталога
PRICE_RANGES = ("under-2000", "2000-3000", "over-3000")

@persistence_guard()
def get_course(db: Session, course_id: str) -> Optional[Course]:
    return db.query(Course).filter(Course.id == course_id).first()

@persistence_guard()
def get_courses(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    category: Optional[str] = None,
    price_range: Optional[str] = None,
    published_only: bool = True
) -> List[Course]:
    query = db.query(Course)
    
    if published_only:
        query = query.filter(Course.is_published == True)
    
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(
            func.lower(Course.title).like(pattern),
            func.lower(Course.description).like(pattern)
        ))
    
    if category:
        query = query.filter(Course.category == category)
    
    if price_range == "under-2000":
        query = query.filter(Course.price < 2000)
    elif price_range == "2000-3000":
        query = query.filter(Course.price >= 2000, Course.price <= 3000)
    elif price_range == "over-3000":
        query = query.filter(Course.price > 3000)
    
    return query.order_by(Course.created_at.desc()).offset(skip).limit(limit).all()

@persistence_guard()
def get_categories(db: Session) -> List[str]:
    rows = db.query(Course.category).filter(Course.is_published == True).distinct().all()
    return sorted(row[0] for row in rows)

@persistence_guard()
def get_courses_by_instructor(db: Session, instructor_id: str) -> List[Course]:
    return db.query(Course).filter(
        Course.instructor_id == instructor_id
    ).order_by(Course.created_at.desc()).all()

@persistence_guard()
def count_lessons_by_course(db: Session, course_ids: Iterable[str]) -> dict:
    ids = set(course_ids)
    if not ids:
        return {}
    rows = db.query(Lesson.course_id, func.count(Lesson.id)).filter(
        Lesson.course_id.in_(ids)
    ).group_by(Lesson.course_id).all()
    return {course_id: count for course_id, count in rows}

@persistence_guard()
def create_course(db: Session, course: CourseCreate, instructor_id: str) -> Course:
    # Новый курс всегда черновик
    db_course = Course(
        **course.model_dump(exclude={"lessons"}),
        instructor_id=instructor_id,
        is_published=False
    )
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course

@persistence_guard()
def update_course(db: Session, course_id: str, course_update: CourseUpdate) -> Optional[Course]:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if not db_course:
        return None
    
    update_data = course_update.model_dump(exclude_unset=True, exclude={"lessons"})
    
    for field, value in update_data.items():
        setattr(db_course, field, value)
    
    db.commit()
    db.refresh(db_course)
    return db_course

@persistence_guard()
def set_published(db: Session, course_id: str, is_published: bool) -> Optional[Course]:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if not db_course:
        return None
    
    db_course.is_published = is_published
    db.commit()
    db.refresh(db_course)
    return db_course

@persistence_guard()
def set_thumbnail(db: Session, course_id: str, thumbnail_url: str) -> Optional[Course]:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if not db_course:
        return None
    
    db_course.thumbnail_url = thumbnail_url
    db.commit()
    db.refresh(db_course)
    return db_course

@persistence_guard()
def delete_course(db: Session, course_id: str) -> Optional[Course]:
    db_course = db.query(Course).filter(Course.id == course_id).first()
    if db_course:
        db.delete(db_course)
        db.commit()
    return db_course
