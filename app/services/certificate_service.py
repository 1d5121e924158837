import logging
from sqlalchemy.orm import Session
from typing import Iterable, Optional
from app.config import settings
from app.core.exceptions import CertificateNotFoundError
from app.crud import certificate as crud_certificate
from app.crud import course as crud_course
from app.crud import profile as crud_profile
from app.crud.certificate import CertificateAlreadyIssuedError
from app.models.certificate import Certificate
from app.schemas.certificate import CertificateView
from app.services.progress import compute_progress
from app.services.read_models import build_certificate_view

logger = logging.getLogger(__name__)

def build_certificate_url(course_id: str, user_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/certificate/{course_id}/{user_id}"

class CertificateService:
    def __init__(self, db: Session):
        self.db = db
    
    def get_certificate(self, user_id: str, course_id: str) -> Optional[Certificate]:
        return crud_certificate.get_certificate(self.db, user_id=user_id, course_id=course_id)
    
    def ensure_certificate(
        self,
        user_id: str,
        course_id: str,
        total_lessons: int,
        completed_lesson_ids: Iterable[str]
    ) -> Optional[Certificate]:
        """
        Выдаёт сертификат, если курс пройден полностью.
        
        Возвращает None, пока курс не пройден. Вызывается после каждой
        отметки урока: повторная выдача исключается проверкой существующего
        сертификата, а не учётом на стороне вызывающего. Ошибка записи
        поднимается как PersistenceError.
        """
        progress = compute_progress(total_lessons, completed_lesson_ids)
        if not progress.is_complete:
            return None
        
        existing = self.get_certificate(user_id, course_id)
        if existing:
            return existing
        
        try:
            certificate = crud_certificate.create_certificate(
                self.db,
                user_id=user_id,
                course_id=course_id,
                certificate_url=build_certificate_url(course_id, user_id)
            )
        except CertificateAlreadyIssuedError:
            # Параллельный запрос выдал сертификат между проверкой и вставкой
            logger.info("Certificate for user %s, course %s issued concurrently", user_id, course_id)
            return self.get_certificate(user_id, course_id)
        
        logger.info("Issued certificate %s to user %s for course %s", certificate.id, user_id, course_id)
        return certificate
    
    def get_certificate_view(self, course_id: str, user_id: str) -> CertificateView:
        certificate = self.get_certificate(user_id, course_id)
        if not certificate:
            raise CertificateNotFoundError()
        
        course = crud_course.get_course(self.db, course_id=course_id)
        if not course:
            raise CertificateNotFoundError()
        
        profiles = crud_profile.get_profiles_by_ids(self.db, [user_id, course.instructor_id])
        return build_certificate_view(
            certificate,
            course,
            student=profiles.get(user_id),
            instructor=profiles.get(course.instructor_id)
        )
