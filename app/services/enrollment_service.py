import logging
from sqlalchemy.orm import Session
from typing import List
from app.core.exceptions import AlreadyEnrolledError, CourseNotFoundError, ForbiddenError, NotEnrolledError
from app.crud import course as crud_course
from app.crud import enrollment as crud_enrollment
from app.models.course import Course, Enrollment
from app.models.profile import Profile, ProfileRole

logger = logging.getLogger(__name__)

class EnrollmentService:
    def __init__(self, db: Session):
        self.db = db
    
    def is_enrolled(self, user_id: str, course_id: str) -> bool:
        """Есть ли запись пользователя на курс; ошибки хранилища не глушатся"""
        return crud_enrollment.get_enrollment(self.db, user_id=user_id, course_id=course_id) is not None
    
    def enroll(self, user_id: str, course_id: str) -> Enrollment:
        """
        Записывает пользователя на опубликованный курс.
        
        Повторная запись не создаёт дубликат, а поднимает AlreadyEnrolledError.
        Проверка «прочитал-записал» не атомарна: от гонки двух одновременных
        записей защищает уникальный индекс (user_id, course_id).
        """
        course = crud_course.get_course(self.db, course_id=course_id)
        if not course or not course.is_published:
            raise CourseNotFoundError(course_id)
        
        if course.instructor_id == user_id:
            raise ForbiddenError("Instructor cannot enroll in their own course")
        
        if self.is_enrolled(user_id, course_id):
            logger.info("User %s already enrolled in course %s", user_id, course_id)
            raise AlreadyEnrolledError()
        
        enrollment = crud_enrollment.create_enrollment(self.db, user_id=user_id, course_id=course_id)
        logger.info("User %s enrolled in course %s (enrollment %s)", user_id, course_id, enrollment.id)
        return enrollment
    
    def can_view_content(self, profile: Profile, course: Course) -> bool:
        """Автор курса и администраторы видят уроки без записи"""
        if profile.role == ProfileRole.ADMIN or course.instructor_id == profile.id:
            return True
        return self.is_enrolled(profile.id, course.id)
    
    def require_access(self, profile: Profile, course: Course) -> None:
        if not self.can_view_content(profile, course):
            raise NotEnrolledError(course.id)
    
    def list_enrollments(self, user_id: str) -> List[Enrollment]:
        return crud_enrollment.get_user_enrollments(self.db, user_id=user_id)
