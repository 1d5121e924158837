import logging
from sqlalchemy.orm import Session
from typing import Iterable, Optional, Set
from app.core.exceptions import CourseNotFoundError, LessonNotFoundError, NotEnrolledError
from app.crud import course as crud_course
from app.crud import enrollment as crud_enrollment
from app.crud import lesson as crud_lesson
from app.crud import progress as crud_progress
from app.models.lesson import LessonProgress
from app.models.profile import Profile
from app.schemas.progress import CourseViewer, LessonCompletionResult
from app.schemas.lesson import LessonProgressResponse
from app.schemas.certificate import CertificateResponse
from app.services.certificate_service import CertificateService
from app.services.enrollment_service import EnrollmentService
from app.services.progress import compute_progress, progress_state
from app.services.read_models import build_course_viewer

logger = logging.getLogger(__name__)

class ProgressService:
    def __init__(self, db: Session):
        self.db = db
        self.enrollments = EnrollmentService(db)
        self.certificates = CertificateService(db)
    
    # === Отметки уроков ===
    def mark_complete(self, user_id: str, lesson_id: str, watch_time: Optional[int] = None) -> LessonProgress:
        """Идемпотентно отмечает урок пройденным"""
        lesson = crud_lesson.get_lesson(self.db, lesson_id=lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)
        return crud_progress.upsert_lesson_progress(
            self.db,
            user_id=user_id,
            lesson_id=lesson_id,
            watch_time=watch_time
        )
    
    def get_completed_lesson_ids(self, user_id: str, lesson_ids: Iterable[str]) -> Set[str]:
        return crud_progress.get_completed_lesson_ids(self.db, user_id=user_id, lesson_ids=lesson_ids)
    
    # === Сценарий «урок пройден» ===
    def complete_lesson(self, user_id: str, lesson_id: str, watch_time: Optional[int] = None) -> LessonCompletionResult:
        """
        Отмечает урок, пересчитывает прогресс и при необходимости выдаёт сертификат.
        
        Прогресс всегда считается по свежему чтению пройденных уроков, а не
        по счётчику из предыдущих шагов.
        """
        lesson = crud_lesson.get_lesson(self.db, lesson_id=lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)
        
        course_id = lesson.course_id
        enrollment = crud_enrollment.get_enrollment(self.db, user_id=user_id, course_id=course_id)
        if not enrollment:
            raise NotEnrolledError(course_id)
        
        entry = self.mark_complete(user_id, lesson_id, watch_time=watch_time)
        
        lesson_ids = [item.id for item in crud_lesson.get_lessons_by_course(self.db, course_id=course_id)]
        completed_ids = self.get_completed_lesson_ids(user_id, lesson_ids)
        progress = compute_progress(len(lesson_ids), completed_ids)
        
        crud_enrollment.update_enrollment_progress(
            self.db,
            enrollment,
            progress=progress.percentage,
            completed=progress.is_complete
        )
        
        had_certificate = self.certificates.get_certificate(user_id, course_id) is not None
        certificate = self.certificates.ensure_certificate(
            user_id,
            course_id,
            total_lessons=len(lesson_ids),
            completed_lesson_ids=completed_ids
        )
        
        logger.info(
            "User %s completed lesson %s: %s/%s lessons (%s%%)",
            user_id, lesson_id, progress.completed_count, len(lesson_ids), progress.percentage
        )
        
        return LessonCompletionResult(
            lesson_progress=LessonProgressResponse.model_validate(entry),
            progress=progress,
            state=progress_state(progress, has_certificate=certificate is not None),
            certificate=CertificateResponse.model_validate(certificate) if certificate else None,
            certificate_issued=certificate is not None and not had_certificate
        )
    
    # === Просмотр курса ===
    def get_course_viewer(self, profile: Profile, course_id: str) -> CourseViewer:
        course = crud_course.get_course(self.db, course_id=course_id)
        if not course:
            raise CourseNotFoundError(course_id)
        
        # Незаписанный пользователь не получает уроки, прогресс не читается
        self.enrollments.require_access(profile, course)
        
        lessons = crud_lesson.get_lessons_by_course(self.db, course_id=course_id)
        completed_ids = self.get_completed_lesson_ids(profile.id, [lesson.id for lesson in lessons])
        certificate = self.certificates.get_certificate(profile.id, course_id)
        
        return build_course_viewer(course, lessons, completed_ids, certificate)
