from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from typing import Iterable, List, Optional
from app.core.exceptions import AlreadyEnrolledError
from app.crud.base import persistence_guard
from app.models.course import Enrollment

@persistence_guard()
def get_enrollment(db: Session, user_id: str, course_id: str) -> Optional[Enrollment]:
    return db.query(Enrollment).filter(
        Enrollment.user_id == user_id,
        Enrollment.course_id == course_id
    ).first()

@persistence_guard()
def get_user_enrollments(db: Session, user_id: str) -> List[Enrollment]:
    return db.query(Enrollment).filter(
        Enrollment.user_id == user_id
    ).options(joinedload(Enrollment.course)).order_by(Enrollment.enrolled_at.desc()).all()

@persistence_guard()
def count_enrollments_by_course(db: Session, course_ids: Iterable[str]) -> dict:
    ids = set(course_ids)
    if not ids:
        return {}
    rows = db.query(Enrollment.course_id, func.count(Enrollment.id)).filter(
        Enrollment.course_id.in_(ids)
    ).group_by(Enrollment.course_id).all()
    return {course_id: count for course_id, count in rows}

@persistence_guard(on_conflict=AlreadyEnrolledError)
def create_enrollment(db: Session, user_id: str, course_id: str) -> Enrollment:
    enrollment = Enrollment(user_id=user_id, course_id=course_id)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    return enrollment

@persistence_guard()
def update_enrollment_progress(
    db: Session,
    enrollment: Enrollment,
    progress: int,
    completed: bool
) -> Enrollment:
    """Обновляет процент прохождения; completed_at выставляется один раз"""
    enrollment.progress = progress
    if completed and enrollment.completed_at is None:
        enrollment.completed_at = datetime.utcnow()
    db.commit()
    db.refresh(enrollment)
    return enrollment
