from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.profile import ProfileResponse, ProfileUpdate, PublicProfile
from app.crud import profile as crud_profile
from app.core.exceptions import ProfileNotFoundError
from app.api.dependencies import get_current_user
from app.models.profile import Profile

router = APIRouter()

@router.put("/me", response_model=ProfileResponse)
async def update_me(
    profile_update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    """Обновить свой профиль"""
    updated = crud_profile.update_profile(db, profile_id=current_user.id, profile_update=profile_update)
    if not updated:
        raise ProfileNotFoundError(current_user.id)
    return updated

@router.get("/{profile_id}", response_model=PublicProfile)
async def read_profile(profile_id: str, db: Session = Depends(get_db)):
    """Публичная информация о пользователе"""
    profile = crud_profile.get_profile(db, profile_id=profile_id)
    if not profile:
        raise ProfileNotFoundError(profile_id)
    return profile
