from sqlalchemy.orm import Session
from typing import Iterable, Optional
from app.core.exceptions import AlreadyExistsError
from app.core.security import get_password_hash, verify_password
from app.crud.base import persistence_guard
from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfileUpdate

class EmailAlreadyRegisteredError(AlreadyExistsError):
    def __init__(self):
        super().__init__(detail="Email already registered")

@persistence_guard()
def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.id == profile_id).first()

@persistence_guard()
def get_profile_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.email == email).first()

@persistence_guard()
def get_profiles_by_ids(db: Session, profile_ids: Iterable[str]) -> dict:
    """Профили по id, для подстановки имён преподавателей и студентов"""
    ids = set(profile_ids)
    if not ids:
        return {}
    profiles = db.query(Profile).filter(Profile.id.in_(ids)).all()
    return {profile.id: profile for profile in profiles}

def authenticate_profile(db: Session, email: str, password: str) -> Optional[Profile]:
    profile = get_profile_by_email(db, email=email)
    if not profile or not profile.hashed_password:
        return None
    if not verify_password(password, profile.hashed_password):
        return None
    return profile

@persistence_guard(on_conflict=EmailAlreadyRegisteredError)
def create_profile(db: Session, profile: ProfileCreate) -> Profile:
    db_profile = Profile(
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role,
        hashed_password=get_password_hash(profile.password)
    )
    db.add(db_profile)
    db.commit()
    db.refresh(db_profile)
    return db_profile

@persistence_guard()
def update_profile(db: Session, profile_id: str, profile_update: ProfileUpdate) -> Optional[Profile]:
    db_profile = db.query(Profile).filter(Profile.id == profile_id).first()
    if not db_profile:
        return None
    
    update_data = profile_update.model_dump(exclude_unset=True)
    
    for field, value in update_data.items():
        setattr(db_profile, field, value)
    
    db.commit()
    db.refresh(db_profile)
    return db_profile
