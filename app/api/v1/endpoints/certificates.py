from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.certificate import CertificateView
from app.services.certificate_service import CertificateService

router = APIRouter()

@router.get("/{course_id}/{user_id}", response_model=CertificateView)
async def read_certificate(course_id: str, user_id: str, db: Session = Depends(get_db)):
    """Сертификат для просмотра и печати; ссылка публичная"""
    return CertificateService(db).get_certificate_view(course_id, user_id)
