from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.course import StudentCourse
from app.api.dependencies import get_current_user
from app.models.profile import Profile
from app.services import read_models
from app.services.enrollment_service import EnrollmentService

router = APIRouter()

@router.get("/me", response_model=List[StudentCourse])
async def read_my_enrollments(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Курсы, на которые записан текущий пользователь, с прогрессом"""
    enrollments = EnrollmentService(db).list_enrollments(current_user.id)
    return read_models.build_student_courses(enrollments)
