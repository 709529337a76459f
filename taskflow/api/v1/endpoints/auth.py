import logging
import re
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from datetime import datetime, timedelta, timezone

from taskflow.db.session import get_session
from taskflow.models.user import User
from taskflow.schemas.user import UserCreate, UserRead, UserLogin, Token, ProfileUpdate
from taskflow.core.security import create_access_token, get_password_hash, authenticate_user
from taskflow.api.deps import get_current_user
from taskflow.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(user_create: UserCreate, session: Session = Depends(get_session)):
    # Check if user exists
    user = session.exec(select(User).where(User.email == user_create.email)).first()
    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    full_name = user_create.full_name.strip()
    if not full_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Full name is required"
        )

    # Validate that full_name is not an email address
    if EMAIL_PATTERN.match(full_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Full name cannot be an email address"
        )

    db_user = User(
        email=user_create.email,
        password_hash=get_password_hash(user_create.password),
        user_metadata={"full_name": full_name}
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user

@router.post("/login", response_model=Token)
def login(user_credentials: UserLogin, session: Session = Depends(get_session)):
    user = authenticate_user(session, user_credentials.email, user_credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.email}, expires_delta=access_token_expires
    )

    return Token(access_token=access_token, token_type="bearer")

@router.get("/me", response_model=UserRead)
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user

@router.put("/me", response_model=UserRead)
def update_current_user_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    # Merge into the existing map; a new dict so the JSON column is flagged dirty
    updates = profile_update.model_dump(exclude_unset=True)
    current_user.user_metadata = {**current_user.user_metadata, **updates}
    current_user.updated_at = datetime.now(timezone.utc)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return current_user
