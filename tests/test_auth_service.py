"""
Tests for the login use-case.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from auth.password import hash_password
from auth.service import Authenticated, InvalidCredentials, authenticate
from database.models import User


def _session_finding(user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    session = AsyncMock()
    session.execute.return_value = result
    return session


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_unknown_email_still_checks_a_digest(self):
        session = _session_finding(None)

        with patch("auth.service.verify_password", return_value=False) as verify:
            result = await authenticate(
                session, email="nobody@b.com", password="longenough1", bcrypt_rounds=4
            )

        assert isinstance(result, InvalidCredentials)
        verify.assert_called_once()
        password, digest = verify.call_args.args
        assert password == "longenough1"
        assert digest.startswith("$2")

    @pytest.mark.asyncio
    async def test_known_email_checks_stored_digest(self):
        stored = User(
            id=1,
            email="a@b.com",
            password_hash=hash_password("longenough1", rounds=4),
            first_name="A",
            last_name="B",
        )

        with patch("auth.service.verify_password", return_value=False) as verify:
            result = await authenticate(
                _session_finding(stored), email="a@b.com", password="wrongpass1", bcrypt_rounds=4
            )

        assert isinstance(result, InvalidCredentials)
        verify.assert_called_once_with("wrongpass1", stored.password_hash)

    @pytest.mark.asyncio
    async def test_correct_password(self):
        stored = User(
            id=2,
            email="a@b.com",
            password_hash=hash_password("longenough1", rounds=4),
            first_name="A",
            last_name="B",
        )

        result = await authenticate(
            _session_finding(stored), email="A@B.com", password="longenough1", bcrypt_rounds=4
        )

        assert isinstance(result, Authenticated)
        assert result.user is stored
