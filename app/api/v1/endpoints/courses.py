import logging
from fastapi import APIRouter, Depends, Query, UploadFile, File, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.course import (
    CourseCard,
    CourseCreate,
    CourseDetail,
    CourseResponse,
    CourseUpdate,
    EnrollmentResponse,
    InstructorCourse,
    InstructorStats
)
from app.schemas.progress import CourseViewer
from app.crud import course as crud_course
from app.crud import enrollment as crud_enrollment
from app.crud import lesson as crud_lesson
from app.crud import profile as crud_profile
from app.core.exceptions import CourseNotFoundError, ForbiddenError
from app.api.dependencies import get_current_user, get_current_user_optional, require_role
from app.models.profile import Profile, ProfileRole
from app.services import read_models
from app.services.enrollment_service import EnrollmentService
from app.services.lesson_order import is_contiguous, sort_by_order
from app.services.progress_service import ProgressService
from app.services.storage_service import StorageService, THUMBNAIL_BUCKET

logger = logging.getLogger(__name__)

router = APIRouter()

def get_storage_service() -> StorageService:
    return StorageService()

def get_visible_course(db: Session, course_id: str, current_user: Optional[Profile]):
    """Черновик виден только автору и администраторам"""
    course = crud_course.get_course(db, course_id=course_id)
    if not course:
        raise CourseNotFoundError(course_id)
    if not course.is_published:
        if current_user is None:
            raise CourseNotFoundError(course_id)
        if course.instructor_id != current_user.id and current_user.role != ProfileRole.ADMIN:
            raise CourseNotFoundError(course_id)
    return course

def get_owned_course(db: Session, course_id: str, current_user: Profile):
    course = crud_course.get_course(db, course_id=course_id)
    if not course:
        raise CourseNotFoundError(course_id)
    if course.instructor_id != current_user.id and current_user.role != ProfileRole.ADMIN:
        raise ForbiddenError("Not authorized to manage this course")
    return course

def save_lessons(db: Session, course_id: str, drafts):
    """Заменяет уроки курса; порядок берётся из присланного order_index"""
    lessons = crud_lesson.replace_course_lessons(db, course_id=course_id, drafts=sort_by_order(drafts))
    order_indexes = [lesson.order_index for lesson in lessons]
    if not is_contiguous(order_indexes):
        logger.error("Course %s saved with broken lesson order %s", course_id, order_indexes)
    return lessons

def build_detail(db: Session, course, current_user: Optional[Profile]) -> CourseDetail:
    lessons = crud_lesson.get_lessons_by_course(db, course_id=course.id)
    instructor = crud_profile.get_profile(db, profile_id=course.instructor_id)
    is_enrolled = False
    if current_user is not None:
        is_enrolled = EnrollmentService(db).is_enrolled(current_user.id, course.id)
    return read_models.build_course_detail(course, instructor, lessons, is_enrolled)

# === Каталог ===

@router.get("/", response_model=List[CourseCard])
async def read_courses(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[str] = None,
    price_range: Optional[str] = Query(None, pattern="^(under-2000|2000-3000|over-3000)$"),
    db: Session = Depends(get_db)
):
    """Опубликованные курсы с фильтрами каталога"""
    courses = crud_course.get_courses(
        db,
        skip=skip,
        limit=limit,
        search=search,
        category=category,
        price_range=price_range
    )
    instructors = crud_profile.get_profiles_by_ids(db, [course.instructor_id for course in courses])
    lesson_counts = crud_course.count_lessons_by_course(db, [course.id for course in courses])
    return read_models.build_course_cards(courses, instructors, lesson_counts)

@router.get("/categories", response_model=List[str])
async def read_categories(db: Session = Depends(get_db)):
    return crud_course.get_categories(db)

# === Кабинет преподавателя ===

@router.get("/mine", response_model=List[InstructorCourse])
async def read_my_courses(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_role(ProfileRole.INSTRUCTOR))
):
    """Курсы преподавателя, включая черновики"""
    courses = crud_course.get_courses_by_instructor(db, instructor_id=current_user.id)
    course_ids = [course.id for course in courses]
    return read_models.build_instructor_courses(
        courses,
        crud_enrollment.count_enrollments_by_course(db, course_ids),
        crud_course.count_lessons_by_course(db, course_ids)
    )

@router.get("/stats", response_model=InstructorStats)
async def read_my_stats(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_role(ProfileRole.INSTRUCTOR))
):
    courses = crud_course.get_courses_by_instructor(db, instructor_id=current_user.id)
    enrollment_counts = crud_enrollment.count_enrollments_by_course(db, [course.id for course in courses])
    return read_models.build_instructor_stats(courses, enrollment_counts)

@router.post("/", response_model=CourseDetail, status_code=status.HTTP_201_CREATED)
async def create_course(
    course: CourseCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(require_role(ProfileRole.INSTRUCTOR))
):
    """Создать черновик курса (только для преподавателей)"""
    db_course = crud_course.create_course(db=db, course=course, instructor_id=current_user.id)
    if course.lessons:
        save_lessons(db, db_course.id, course.lessons)
    logger.info("Instructor %s created course %s", current_user.id, db_course.id)
    return build_detail(db, db_course, current_user)

@router.get("/{course_id}", response_model=CourseDetail)
async def read_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[Profile] = Depends(get_current_user_optional)
):
    """Страница курса: описание и список уроков без видео"""
    course = get_visible_course(db, course_id, current_user)
    return build_detail(db, course, current_user)

@router.put("/{course_id}", response_model=CourseDetail)
async def update_course(
    course_id: str,
    course_update: CourseUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Обновить курс и, если передан список, заменить его уроки"""
    get_owned_course(db, course_id, current_user)
    
    updated_course = crud_course.update_course(db, course_id=course_id, course_update=course_update)
    if not updated_course:
        raise CourseNotFoundError(course_id)
    
    if course_update.lessons is not None:
        save_lessons(db, course_id, course_update.lessons)
    
    return build_detail(db, updated_course, current_user)

@router.post("/{course_id}/publish", response_model=CourseResponse)
async def toggle_publish(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Опубликовать черновик или снять курс с публикации"""
    course = get_owned_course(db, course_id, current_user)
    updated = crud_course.set_published(db, course_id=course_id, is_published=not course.is_published)
    if not updated:
        raise CourseNotFoundError(course_id)
    logger.info("Course %s published=%s", course_id, updated.is_published)
    return updated

@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Удалить курс"""
    get_owned_course(db, course_id, current_user)
    crud_course.delete_course(db, course_id=course_id)
    logger.info("Course %s deleted by %s", course_id, current_user.id)
    return {"message": "Course deleted successfully"}

@router.post("/{course_id}/thumbnail", response_model=CourseResponse)
async def upload_thumbnail(
    course_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    storage: StorageService = Depends(get_storage_service)
):
    """Загрузить обложку курса"""
    course = get_owned_course(db, course_id, current_user)
    previous_url = course.thumbnail_url
    
    thumbnail_url = await storage.save(file, bucket=THUMBNAIL_BUCKET, folder=current_user.id, kind="image")
    updated = crud_course.set_thumbnail(db, course_id=course_id, thumbnail_url=thumbnail_url)
    if not updated:
        raise CourseNotFoundError(course_id)
    
    # Старая обложка больше нигде не используется
    if previous_url and previous_url != thumbnail_url:
        storage.delete(previous_url)
    return updated

# === Обучение ===

@router.post("/{course_id}/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Записаться на курс; повторная запись возвращает 409"""
    return EnrollmentService(db).enroll(current_user.id, course_id)

@router.get("/{course_id}/viewer", response_model=CourseViewer)
async def read_course_viewer(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Уроки с видео, прогресс и сертификат; только для записавшихся"""
    return ProgressService(db).get_course_viewer(current_user, course_id)
