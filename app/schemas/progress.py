import enum
from pydantic import BaseModel
from typing import List, Optional
from app.schemas.course import CourseResponse
from app.schemas.lesson import LessonResponse, LessonProgressResponse
from app.schemas.certificate import CertificateResponse

class ProgressState(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE_UNCERTIFIED = "complete_uncertified"
    CERTIFIED = "certified"

class CourseProgress(BaseModel):
    completed_count: int
    percentage: int
    is_complete: bool

class ViewerLesson(LessonResponse):
    is_completed: bool = False

class CourseViewer(BaseModel):
    course: CourseResponse
    lessons: List[ViewerLesson]
    progress: CourseProgress
    state: ProgressState
    current_lesson_id: Optional[str] = None
    certificate: Optional[CertificateResponse] = None

class LessonCompletionResult(BaseModel):
    lesson_progress: LessonProgressResponse
    progress: CourseProgress
    state: ProgressState
    certificate: Optional[CertificateResponse] = None
    certificate_issued: bool = False
