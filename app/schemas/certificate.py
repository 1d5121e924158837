from pydantic import BaseModel
from datetime import datetime

class CertificateResponse(BaseModel):
    id: str
    user_id: str
    course_id: str
    certificate_url: str
    issued_at: datetime
    
    class Config:
        from_attributes = True

class CertificateView(BaseModel):
    certificate_id: str
    student_name: str
    course_title: str
    instructor_name: str
    issued_at: datetime
    certificate_url: str
