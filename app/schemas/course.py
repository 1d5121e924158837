from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.schemas.lesson import LessonDraft, LessonOutline

def _clean_items(items):
    """Убирает пустые пункты списков «чему научитесь» и «требования»"""
    if items is None:
        return None
    if not isinstance(items, list):
        return items
    cleaned = []
    for item in items:
        if isinstance(item, str):
            item = item.strip()
            if not item:
                continue
        cleaned.append(item)
    return cleaned

def _check_unique_lesson_ids(lessons):
    """Один и тот же урок не может встречаться в наборе дважды"""
    if lessons is None:
        return None
    seen = set()
    for lesson in lessons:
        if lesson.id is None:
            continue
        if lesson.id in seen:
            raise ValueError(f"Lesson {lesson.id} is listed more than once")
        seen.add(lesson.id)
    return lessons

class CourseBase(BaseModel):
    title: str
    description: str = ""
    category: str
    price: float = Field(default=0, ge=0)
    level: Optional[str] = None
    thumbnail_url: Optional[str] = None
    what_you_will_learn: List[str] = []
    requirements: List[str] = []
    
    @field_validator('what_you_will_learn', 'requirements', mode="before")
    @classmethod
    def strip_blank_items(cls, v):
        return [] if v is None else _clean_items(v)

class CourseCreate(CourseBase):
    lessons: List[LessonDraft] = []
    
    @field_validator('lessons')
    @classmethod
    def unique_lesson_ids(cls, v):
        return _check_unique_lesson_ids(v)

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    level: Optional[str] = None
    thumbnail_url: Optional[str] = None
    what_you_will_learn: Optional[List[str]] = None
    requirements: Optional[List[str]] = None
    # None - уроки не трогаем, список - полностью заменяет набор уроков курса
    lessons: Optional[List[LessonDraft]] = None
    
    @field_validator('what_you_will_learn', 'requirements')
    @classmethod
    def strip_blank_items(cls, v):
        return _clean_items(v)
    
    @field_validator('lessons')
    @classmethod
    def unique_lesson_ids(cls, v):
        return _check_unique_lesson_ids(v)

class CourseResponse(CourseBase):
    id: str
    instructor_id: str
    is_published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class CourseCard(CourseResponse):
    instructor_name: Optional[str] = None
    lesson_count: int = 0

class CourseDetail(CourseCard):
    lessons: List[LessonOutline] = []
    total_duration: int = 0
    is_enrolled: bool = False

class InstructorCourse(CourseResponse):
    enrollment_count: int = 0
    lesson_count: int = 0

class InstructorStats(BaseModel):
    total_courses: int = 0
    published_courses: int = 0
    total_enrollments: int = 0

class EnrollmentResponse(BaseModel):
    id: str
    user_id: str
    course_id: str
    enrolled_at: Optional[datetime] = None
    progress: int = 0
    completed_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class StudentCourse(BaseModel):
    course: CourseResponse
    enrollment: EnrollmentResponse
    status: str  # "Completed" или "In Progress"
