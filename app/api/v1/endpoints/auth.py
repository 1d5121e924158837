import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from datetime import timedelta
from app.database import get_db
from app.schemas.profile import Token, ProfileCreate, ProfileResponse
from app.crud import profile as crud_profile
from app.crud.profile import EmailAlreadyRegisteredError
from app.core.security import create_access_token
from app.config import settings
from app.api.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def signup(profile: ProfileCreate, db: Session = Depends(get_db)):
    """Регистрация студента или преподавателя"""
    if crud_profile.get_profile_by_email(db, email=profile.email):
        raise EmailAlreadyRegisteredError()
    
    db_profile = crud_profile.create_profile(db=db, profile=profile)
    logger.info("Registered %s profile %s", db_profile.role.value, db_profile.id)
    return db_profile

@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # В поле username формы передаётся email
    profile = crud_profile.authenticate_profile(
        db,
        email=form_data.username,
        password=form_data.password
    )
    
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": profile.id, "role": profile.role.value},
        expires_delta=access_token_expires
    )
    
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=ProfileResponse)
async def read_me(current_user = Depends(get_current_user)):
    return current_user
