"""
Authentication API endpoints.

The identity provider: registration, password login with JWT token
generation (returned and set as the session cookie), logout, the resolved
session, metadata patches and password changes.
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from reviewdesk.api.deps import get_current_session, rate_limited
from reviewdesk.core.config import settings
from reviewdesk.core.errors import authentication_error, not_found_error, validation_error
from reviewdesk.core.security import (
    create_access_token,
    get_password_hash,
    password_strength_issues,
    verify_password,
)
from reviewdesk.core.session import Session as UserSession
from reviewdesk.db.session import get_db
from reviewdesk.models import User

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


# ============== Pydantic Schemas ==============


class UserRegister(BaseModel):
    """Schema for user registration."""

    email: str
    password: str
    full_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v.lower()


class UserResponse(BaseModel):
    """Schema for user response (without password)."""

    id: str
    email: str
    full_name: Optional[str] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"


class MetadataUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def _check_password_strength(password: str, field: str) -> None:
    issues = password_strength_issues(password)
    if issues:
        raise validation_error(issues[0], field=field, code="weak_password")


def _get_identity(db: Session, session: UserSession) -> User:
    user = db.query(User).filter(User.id == session.user.id).first()
    if user is None:
        raise not_found_error("User not found")
    return user


# ============== API Endpoints ==============


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited("auth"))],
)
async def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new identity.

    The profile row is not created here; the session resolver creates it
    on the first authenticated request.
    """
    if get_user_by_email(db, user_data.email):
        raise validation_error("Email already registered", field="email", code="email_taken")

    _check_password_strength(user_data.password, "password")

    new_user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        user_metadata={"full_name": user_data.full_name} if user_data.full_name else {},
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return new_user


@router.post("/login", response_model=Token, dependencies=[Depends(rate_limited("auth"))])
async def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    Login and get JWT access token.

    Uses OAuth2 password flow. Send username (email) and password
    as form data. The token is also set as the session cookie for page
    navigation.
    """
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise authentication_error("Incorrect email or password")

    access_token = create_access_token(data={"sub": user.id})
    response.set_cookie(
        settings.ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )

    return Token(access_token=access_token)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.ACCESS_TOKEN_COOKIE)
    return {"success": True}


@router.get("/me", response_model=UserSession)
async def get_me(session: UserSession = Depends(get_current_session)):
    """Resolved session of the caller: identity fields, role and permissions."""
    return session


@router.patch("/me/metadata", response_model=UserResponse)
async def update_metadata(
    update: MetadataUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user = _get_identity(db, session)

    metadata = dict(user.user_metadata or {})
    if update.full_name is not None:
        user.full_name = update.full_name.strip() or None
        metadata["full_name"] = user.full_name
    if update.avatar_url is not None:
        user.avatar_url = update.avatar_url.strip() or None
        metadata["avatar_url"] = user.avatar_url
    user.user_metadata = metadata

    db.commit()
    db.refresh(user)
    return user


@router.post("/change-password")
async def change_password(
    data: PasswordChange,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user = _get_identity(db, session)

    if not verify_password(data.current_password, user.hashed_password):
        raise validation_error("Current password is incorrect", field="current_password")
    _check_password_strength(data.new_password, "new_password")

    user.hashed_password = get_password_hash(data.new_password)
    db.commit()

    return {"success": True}
