"""
Auth API routes — register, login, logout, current user.

Route prefix: /api/v1/auth

The session token only travels in the ``token`` cookie; it is never part
of a response body.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from auth.cookies import SessionCookie
from auth.dependencies import (
    db_session,
    get_current_user,
    get_session_cookie,
    get_settings,
    get_token_service,
)
from auth.jwt import TokenService, TokenServiceUnavailable
from auth.service import (
    EmailTaken,
    InvalidCredentials,
    authenticate,
    register_user,
)
from config.settings import Settings
from database.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
        return value

    @field_validator("first_name", "last_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


def public_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
    }


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    response: Response,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
    cookie: SessionCookie = Depends(get_session_cookie),
) -> Dict[str, Any]:
    """Register a new user and start a session."""
    if not tokens.enabled:
        raise TokenServiceUnavailable("JWT_SECRET is not configured")

    result = await register_user(
        session,
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    if isinstance(result, EmailTaken):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    cookie.attach(response, tokens.issue(result.user.id))
    return {
        "message": "Registration successful",
        "user": public_user(result.user),
    }


@router.post("/login")
async def login(
    req: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
    cookie: SessionCookie = Depends(get_session_cookie),
) -> Dict[str, Any]:
    """Login with email + password."""
    result = await authenticate(
        session,
        email=req.email,
        password=req.password,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    if isinstance(result, InvalidCredentials):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    cookie.attach(response, tokens.issue(result.user.id))
    return {
        "message": "Login successful",
        "user": public_user(result.user),
    }


@router.post("/logout")
async def logout(
    response: Response,
    cookie: SessionCookie = Depends(get_session_cookie),
) -> Dict[str, str]:
    """Drop the session cookie. The token itself stays valid until it expires."""
    cookie.clear(response)
    return {"message": "Logged out"}


@router.get("/me")
async def me(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": public_user(user)}
