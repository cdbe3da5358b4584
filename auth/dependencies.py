"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_user`` dependencies that
are used across all protected routes.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.cookies import SessionCookie
from auth.jwt import TokenService
from config.settings import Settings
from database.models import User
from database.session import get_db_session

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_session_cookie(request: Request) -> SessionCookie:
    return request.app.state.session_cookie


async def resolve_current_user(
    request: Request,
    session: AsyncSession,
    tokens: TokenService,
    cookie: SessionCookie,
) -> Optional[User]:
    """
    Turn the request's session cookie into a ``User`` row.

    Returns ``None`` when the cookie is missing, the token does not verify,
    or the user it names no longer exists. Performs no writes.
    """
    token = cookie.read(request)
    if token is None:
        return None

    user_id = tokens.verify(token)
    if user_id is None:
        return None

    user = await session.get(User, user_id)
    if user is None:
        logger.info("Valid token for missing user %s", user_id)
    return user


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
    cookie: SessionCookie = Depends(get_session_cookie),
) -> User:
    """
    Resolve the acting user or fail with 401.

    Every protected handler depends on this exactly once, before touching
    any owned data.
    """
    user = await resolve_current_user(request, session, tokens, cookie)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHENTICATED,
        )
    return user
