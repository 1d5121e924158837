from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import generate_uuid
from datetime import datetime

class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_certificates_user_course"),
    )
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    certificate_url = Column(String, nullable=False)
    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    # Отношения
    course = relationship("Course", back_populates="certificates")
    user = relationship("Profile")
