"""Shared pytest fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import yaml

# Settings() requires a secret; set one before any test imports the app
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from sparklink.config import get_settings  # noqa: E402
from sparklink.lib.hooks import hooks  # noqa: E402


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clean_hooks():
    """Save and restore hooks state around a test."""
    original_actions = {name: list(handlers) for name, handlers in hooks._actions.items()}
    yield
    hooks._actions.clear()
    hooks._actions.update(original_actions)


def make_result(items=None, scalar=None):
    """A mock SQLAlchemy Result supporting the access patterns the services use."""
    scalars = MagicMock()
    scalars.all.return_value = list(items or [])

    result = MagicMock()
    result.scalars.return_value = scalars
    result.scalar_one_or_none.return_value = scalar
    result.scalar_one.return_value = scalar
    return result


@pytest.fixture
def mock_db_session():
    """Create a mock async database session.

    ``execute`` returns an empty result by default; tests override
    ``session.execute.return_value`` or ``side_effect`` as needed.
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=make_result())
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_profile():
    profile = MagicMock()
    profile.id = uuid4()
    profile.user_id = uuid4()
    profile.template_id = "minimal"
    profile.color_scheme = None
    profile.is_published = True
    return profile
