from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional
from app.core.exceptions import AuthRequiredError, ForbiddenError
from app.core.security import decode_access_token
from app.crud import profile as crud_profile
from app.database import get_db
from app.models.profile import Profile, ProfileRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

def get_current_user_optional(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[Profile]:
    """Текущий профиль или None для анонимного посетителя"""
    if not token:
        return None
    
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise AuthRequiredError("Could not validate credentials")
    
    profile = crud_profile.get_profile(db, profile_id=payload["sub"])
    if profile is None:
        raise AuthRequiredError("Could not validate credentials")
    return profile

def get_current_user(current_user: Optional[Profile] = Depends(get_current_user_optional)) -> Profile:
    if current_user is None:
        raise AuthRequiredError()
    return current_user

def require_role(*roles: ProfileRole):
    """Доступ только для указанных ролей; администратор проходит всегда"""
    def role_checker(current_user: Profile = Depends(get_current_user)) -> Profile:
        if current_user.role != ProfileRole.ADMIN and current_user.role not in roles:
            raise ForbiddenError("Not enough permissions")
        return current_user
    return role_checker
