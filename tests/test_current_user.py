"""
Tests for the session cookie adapter and the current-user resolver.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import Request, Response

from auth.cookies import SessionCookie
from auth.dependencies import resolve_current_user
from auth.jwt import TokenService
from database.models import User

SECRET = "resolver-secret"


def _request(token: str | None = None) -> Request:
    headers = []
    if token is not None:
        headers.append((b"cookie", f"token={token}".encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "query_string": b""})


def _session_returning(user):
    session = AsyncMock()
    session.get.return_value = user
    return session


class TestSessionCookie:
    def test_attach_sets_attributes(self):
        response = Response()
        SessionCookie(secure=True).attach(response, "abc.def")
        header = response.headers["set-cookie"]
        assert header.startswith("token=abc.def")
        assert "HttpOnly" in header
        assert "Secure" in header
        assert "Max-Age=604800" in header
        assert "Path=/" in header
        assert "samesite=lax" in header.lower()

    def test_not_secure_outside_production(self):
        response = Response()
        SessionCookie(secure=False).attach(response, "abc.def")
        assert "Secure" not in response.headers["set-cookie"]

    def test_read(self):
        assert SessionCookie(secure=False).read(_request("abc.def")) == "abc.def"
        assert SessionCookie(secure=False).read(_request()) is None
        assert SessionCookie(secure=False).read(_request("")) is None

    def test_clear_expires_cookie(self):
        response = Response()
        SessionCookie(secure=False).clear(response)
        header = response.headers["set-cookie"]
        assert header.startswith("token=")
        assert "Max-Age=0" in header


class TestResolveCurrentUser:
    @pytest.mark.asyncio
    async def test_no_cookie(self):
        session = _session_returning(None)
        user = await resolve_current_user(
            _request(), session, TokenService(SECRET), SessionCookie(secure=False)
        )
        assert user is None
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        session = _session_returning(None)
        user = await resolve_current_user(
            _request("forged.token"), session, TokenService(SECRET), SessionCookie(secure=False)
        )
        assert user is None
        session.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_token_loads_user(self):
        tokens = TokenService(SECRET)
        stored = User(id=9, email="a@b.com", password_hash="x", first_name="A", last_name="B")
        session = _session_returning(stored)

        user = await resolve_current_user(
            _request(tokens.issue(9)), session, tokens, SessionCookie(secure=False)
        )

        assert user is stored
        session.get.assert_awaited_once_with(User, 9)

    @pytest.mark.asyncio
    async def test_deleted_user_resolves_to_none(self):
        tokens = TokenService(SECRET)
        session = _session_returning(None)

        user = await resolve_current_user(
            _request(tokens.issue(404)), session, tokens, SessionCookie(secure=False)
        )

        assert user is None

    @pytest.mark.asyncio
    async def test_idempotent(self):
        tokens = TokenService(SECRET)
        stored = User(id=3, email="c@d.com", password_hash="x", first_name="C", last_name="D")
        session = _session_returning(stored)
        request = _request(tokens.issue(3))
        cookie = SessionCookie(secure=False)

        first = await resolve_current_user(request, session, tokens, cookie)
        second = await resolve_current_user(request, session, tokens, cookie)

        assert first is second is stored
        session.add.assert_not_called()
        session.commit.assert_not_called()
