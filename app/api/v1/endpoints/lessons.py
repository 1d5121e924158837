from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.lesson import LessonCompleteRequest, LessonResponse
from app.schemas.progress import LessonCompletionResult
from app.crud import course as crud_course
from app.crud import lesson as crud_lesson
from app.core.exceptions import CourseNotFoundError, LessonNotFoundError
from app.api.dependencies import get_current_user, require_role
from app.api.v1.endpoints.courses import get_owned_course, get_storage_service
from app.models.profile import Profile, ProfileRole
from app.services.enrollment_service import EnrollmentService
from app.services.progress_service import ProgressService
from app.services.storage_service import StorageService, VIDEO_BUCKET

router = APIRouter()

@router.get("/course/{course_id}", response_model=List[LessonResponse])
async def read_lessons(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Уроки курса по порядку (для записавшихся, автора и администраторов)"""
    course = crud_course.get_course(db, course_id=course_id)
    if not course:
        raise CourseNotFoundError(course_id)
    
    EnrollmentService(db).require_access(current_user, course)
    return crud_lesson.get_lessons_by_course(db, course_id=course_id)

@router.get("/{lesson_id}", response_model=LessonResponse)
async def read_lesson(
    lesson_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Получить урок по ID"""
    lesson = crud_lesson.get_lesson(db, lesson_id=lesson_id)
    if not lesson:
        raise LessonNotFoundError(lesson_id)
    
    course = crud_course.get_course(db, course_id=lesson.course_id)
    EnrollmentService(db).require_access(current_user, course)
    return lesson

@router.post("/{lesson_id}/complete", response_model=LessonCompletionResult)
async def complete_lesson(
    lesson_id: str,
    payload: Optional[LessonCompleteRequest] = Body(None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Отметить урок пройденным; при прохождении курса выдаётся сертификат"""
    watch_time = payload.watch_time if payload else None
    return ProgressService(db).complete_lesson(current_user.id, lesson_id, watch_time=watch_time)

@router.post("/videos")
async def upload_lesson_video(
    file: UploadFile = File(...),
    course_id: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_role(ProfileRole.INSTRUCTOR)),
    storage: StorageService = Depends(get_storage_service)
):
    """Загрузить видео урока; без course_id файл попадает в папку temp"""
    if course_id:
        get_owned_course(db, course_id, current_user)
    
    video_url = await storage.save(file, bucket=VIDEO_BUCKET, folder=course_id or "temp", kind="video")
    return {"video_url": video_url}
