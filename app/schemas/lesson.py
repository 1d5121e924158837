from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class LessonDraft(BaseModel):
    """Урок в составе сохраняемого курса; id отсутствует у новых уроков"""
    id: Optional[str] = None
    title: str
    video_url: Optional[str] = None
    duration: int = Field(default=0, ge=0)
    order_index: int = 0

class LessonResponse(BaseModel):
    id: str
    course_id: str
    title: str
    video_url: Optional[str] = None
    duration: int = 0
    order_index: int
    
    class Config:
        from_attributes = True

class LessonOutline(BaseModel):
    """Урок без видео, для страницы курса до записи"""
    id: str
    title: str
    duration: int = 0
    order_index: int
    
    class Config:
        from_attributes = True

class LessonProgressResponse(BaseModel):
    id: str
    user_id: str
    lesson_id: str
    completed_at: Optional[datetime] = None
    watch_time: Optional[int] = None
    
    class Config:
        from_attributes = True

class LessonCompleteRequest(BaseModel):
    watch_time: Optional[int] = Field(default=None, ge=0)
