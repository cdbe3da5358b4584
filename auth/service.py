"""
Registration and login use-cases.

Both return explicit result variants instead of raising, so the routes
handle every outcome by type.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from database.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registered:
    user: User


@dataclass(frozen=True)
class EmailTaken:
    email: str


@dataclass(frozen=True)
class Authenticated:
    user: User


@dataclass(frozen=True)
class InvalidCredentials:
    pass


RegistrationResult = Union[Registered, EmailTaken]
LoginResult = Union[Authenticated, InvalidCredentials]


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def find_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def register_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    bcrypt_rounds: int,
) -> RegistrationResult:
    """Create a user unless the (normalised) email is already registered."""
    email = normalize_email(email)
    if await find_user_by_email(session, email) is not None:
        return EmailTaken(email=email)

    password_hash = await asyncio.to_thread(hash_password, password, bcrypt_rounds)
    user = User(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same address.
        await session.rollback()
        return EmailTaken(email=email)

    logger.info("Registered user %s", user.id)
    return Registered(user=user)


@lru_cache(maxsize=4)
def _placeholder_hash(rounds: int) -> str:
    """Digest checked for unknown emails so every login pays one bcrypt check."""
    return hash_password(secrets.token_urlsafe(16), rounds)


def _verify_placeholder(password: str, rounds: int) -> bool:
    return verify_password(password, _placeholder_hash(rounds))


async def authenticate(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    bcrypt_rounds: int = DEFAULT_ROUNDS,
) -> LoginResult:
    user = await find_user_by_email(session, email)
    if user is None:
        await asyncio.to_thread(_verify_placeholder, password, bcrypt_rounds)
        return InvalidCredentials()

    matches = await asyncio.to_thread(verify_password, password, user.password_hash)
    if not matches:
        return InvalidCredentials()

    logger.info("Login: user %s", user.id)
    return Authenticated(user=user)
