from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime
from app.models.profile import ProfileRole

class ProfileBase(BaseModel):
    email: EmailStr
    full_name: str
    role: ProfileRole = ProfileRole.STUDENT

class ProfileCreate(ProfileBase):
    password: str
    
    @field_validator('password')
    @classmethod
    def password_strength(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v
    
    @field_validator('role')
    @classmethod
    def no_self_service_admin(cls, v):
        if v == ProfileRole.ADMIN:
            raise ValueError('Admin accounts cannot be created through signup')
        return v

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None

class ProfileResponse(ProfileBase):
    id: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True

class PublicProfile(BaseModel):
    id: str
    full_name: str
    role: ProfileRole
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    
    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str
