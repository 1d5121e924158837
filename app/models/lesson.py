from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import generate_uuid
from datetime import datetime

class Lesson(Base):
    __tablename__ = "lessons"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    video_url = Column(String)
    duration = Column(Integer, default=0)  # В секундах
    order_index = Column(Integer, nullable=False)  # Позиция в курсе, начиная с 1
    created_at = Column(DateTime, default=datetime.utcnow)
    
    # Отношения
    course = relationship("Course", back_populates="lessons")
    progress_entries = relationship("LessonProgress", back_populates="lesson", cascade="all, delete-orphan")

class LessonProgress(Base):
    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress_user_lesson"),
    )
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    lesson_id = Column(String(36), ForeignKey("lessons.id"), nullable=False, index=True)
    completed_at = Column(DateTime, default=datetime.utcnow)
    watch_time = Column(Integer, nullable=True)  # В секундах
    
    # Отношения
    lesson = relationship("Lesson", back_populates="progress_entries")
