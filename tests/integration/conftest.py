"""Fixtures for API tests against a real SQLite database.

Each test gets a fresh database file and media directory under ``tmp_path``;
tables are created by the SQLAlchemy plugin on startup.
"""

from __future__ import annotations

import pytest
from litestar.testing import TestClient

from sparklink.app_factory import create_app
from sparklink.config import CORSConfig, DatabaseConfig, MediaConfig, Settings


@pytest.fixture
def api_settings(tmp_path):
    return Settings(secret_key="integration-secret").model_copy(update={
        "db": DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", create_all=True),
        "media": MediaConfig(local_path=str(tmp_path / "media"), max_upload_bytes=64 * 1024),
        "cors": CORSConfig(allow_origins=[]),
    })


@pytest.fixture
def client(api_settings, clean_hooks):
    with TestClient(app=create_app(api_settings)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register an account and return its Authorization headers."""

    def _register(username: str = "ada", email: str | None = None) -> dict[str, str]:
        resp = client.post("/auth/register", json={
            "email": email or f"{username}@example.com",
            "username": username,
            "password": "correct horse battery",
            "firstName": username.title(),
        })
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    return _register
