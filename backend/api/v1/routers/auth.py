"""
Auth Router — registration, login and session introspection.
"""

from typing import Literal
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, get_db
from core.errors import ConflictError, InvalidInputError
from core.security import hash_password, issue_session_token, verify_password
from db.models import User

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])
logger = structlog.get_logger()


# ─── Schemas ────────────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)
    role: Literal["admin", "manager"] = "admin"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    user_id: UUID
    username: str
    email: str
    role: str

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class SessionResponse(BaseModel):
    user_id: UUID
    username: str
    role: str


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account. Username and email must both be unused."""
    existing = await db.execute(select(User).where(or_(User.email == body.email, User.username == body.username)))
    if existing.scalars().first() is not None:
        raise ConflictError("User already exists")

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("User already exists") from exc

    logger.info("auth.registered", username=body.username, role=body.role)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("auth.login_rejected", email=body.email)
        raise InvalidInputError("Invalid credentials")

    token = issue_session_token(str(user.user_id), user.username, user.role)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=SessionResponse)
async def me(user: dict = Depends(get_current_user)):
    """Claims carried by the current session token."""
    return SessionResponse(user_id=user["sub"], username=user.get("username", ""), role=user.get("role", ""))
