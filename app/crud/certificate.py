from datetime import datetime
from sqlalchemy.orm import Session
from typing import Optional
from app.core.exceptions import AlreadyExistsError
from app.crud.base import persistence_guard
from app.models.certificate import Certificate

class CertificateAlreadyIssuedError(AlreadyExistsError):
    def __init__(self):
        super().__init__(detail="Certificate already issued for this course")

@persistence_guard()
def get_certificate(db: Session, user_id: str, course_id: str) -> Optional[Certificate]:
    return db.query(Certificate).filter(
        Certificate.user_id == user_id,
        Certificate.course_id == course_id
    ).first()

@persistence_guard(on_conflict=CertificateAlreadyIssuedError)
def create_certificate(db: Session, user_id: str, course_id: str, certificate_url: str) -> Certificate:
    certificate = Certificate(
        user_id=user_id,
        course_id=course_id,
        certificate_url=certificate_url,
        issued_at=datetime.utcnow()
    )
    db.add(certificate)
    db.commit()
    db.refresh(certificate)
    return certificate
