"""
Shared fixtures: a throwaway SQLite file per test and an app bound to it.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config.settings import Settings
from database.session import Database
from main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest_asyncio.fixture
async def session(settings):
    async with Database(settings.database_url) as database:
        async with database.session_factory() as s:
            yield s


@pytest.fixture
def register_and_login(client):
    """Return a callable that registers a user and returns their bearer token."""

    def _register_and_login(email="a@x.com", password="p1", username="a") -> str:
        resp = client.post(
            "/register",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201
        resp = client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200
        return resp.json()["token"]

    return _register_and_login


@pytest.fixture
def bearer():
    def _bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _bearer
