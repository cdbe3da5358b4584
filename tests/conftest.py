"""
Shared fixtures: an app wired to a throw-away SQLite database and helpers
for signing users up and switching between their sessions.
"""

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from main import API_PREFIX, create_app

TEST_SECRET = "test-jwt-secret-for-testing-only"


@pytest.fixture
def api() -> str:
    return API_PREFIX


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}",
        auto_create_tables=True,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def act_as(client):
    """Make ``client`` send exactly one session cookie: ``token``."""

    def _act_as(token: str) -> None:
        client.cookies.clear()
        client.cookies.set("token", token)

    return _act_as


@pytest.fixture
def signup(client, api, act_as):
    """Register a user and leave the client signed in as them. Returns the token."""

    def _signup(
        email: str = "a@b.com",
        password: str = "longenough1",
        first_name: str = "A",
        last_name: str = "B",
    ) -> str:
        client.cookies.clear()
        response = client.post(
            f"{api}/auth/register",
            json={
                "email": email,
                "password": password,
                "firstName": first_name,
                "lastName": last_name,
            },
        )
        assert response.status_code == 201, response.text
        token = response.cookies["token"]
        act_as(token)
        return token

    return _signup


@pytest.fixture
def new_application(client, api):
    """Create an application for the signed-in user and return its JSON."""

    def _new_application(**overrides) -> dict:
        body = {
            "companyName": "Acme",
            "positionTitle": "Backend Engineer",
            "appliedDate": "2026-09-01",
        }
        body.update(overrides)
        response = client.post(f"{api}/applications", json=body)
        assert response.status_code == 201, response.text
        return response.json()["application"]

    return _new_application
