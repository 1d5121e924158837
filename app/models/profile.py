from sqlalchemy import Column, String, Text, DateTime, Enum
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import generate_uuid
from datetime import datetime
import enum

class ProfileRole(str, enum.Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"

class Profile(Base):
    __tablename__ = "profiles"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=True)
    role = Column(Enum(ProfileRole), default=ProfileRole.STUDENT, nullable=False)
    bio = Column(Text)
    avatar_url = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Отношения
    courses_taught = relationship("Course", back_populates="instructor", foreign_keys="Course.instructor_id")
    enrollments = relationship("Enrollment", back_populates="user")
