from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import generate_uuid
from datetime import datetime

class Course(Base):
    __tablename__ = "courses"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    instructor_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, index=True)
    price = Column(Float, default=0)  # Только для отображения, оплаты нет
    level = Column(String)
    is_published = Column(Boolean, default=False, index=True)
    thumbnail_url = Column(String)
    what_you_will_learn = Column(JSON, default=list)
    requirements = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    instructor = relationship("Profile", back_populates="courses_taught", foreign_keys=[instructor_id])
    lessons = relationship(
        "Lesson",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Lesson.order_index"
    )
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    certificates = relationship("Certificate", back_populates="course", cascade="all, delete-orphan")

class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
    )
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime, default=datetime.utcnow)
    progress = Column(Integer, default=0)  # Процент завершения
    completed_at = Column(DateTime, nullable=True)
    
    # Отношения
    course = relationship("Course", back_populates="enrollments")
    user = relationship("Profile", back_populates="enrollments")
