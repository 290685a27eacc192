"""Tests for settings loading from .env and app.yaml."""

import pytest

from sparklink.app_factory import create_db_config
from sparklink.config import (
    CONFIG_ENV_VAR,
    Settings,
    get_config_path,
    get_settings,
    interpolate_env_vars,
    load_app_config,
)


class TestInterpolation:
    def test_replaces_nested_values(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://db/sparklink")
        config = {"db": {"url": "$DATABASE_URL"}, "cors": {"allow_origins": ["$DATABASE_URL"]}}

        result = interpolate_env_vars(config)

        assert result["db"]["url"] == "postgresql+asyncpg://db/sparklink"
        assert result["cors"]["allow_origins"] == ["postgresql+asyncpg://db/sparklink"]

    def test_missing_variable_raises(self, monkeypatch):
        monkeypatch.delenv("SPARKLINK_MISSING", raising=False)
        with pytest.raises(ValueError, match="SPARKLINK_MISSING"):
            interpolate_env_vars("$SPARKLINK_MISSING")

    def test_non_strings_untouched(self):
        assert interpolate_env_vars(5) == 5


class TestConfigPath:
    def test_override_env_var(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.yaml"))
        assert get_config_path() == tmp_path / "custom.yaml"

    def test_missing_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
        with pytest.raises(FileNotFoundError):
            load_app_config()


class TestGetSettings:
    def test_yaml_sections_override_defaults(self, monkeypatch, temp_app_yaml):
        path = temp_app_yaml({
            "site_name": "Folio",
            "auth": {"token_ttl": 60},
            "media": {"max_upload_bytes": 1024},
        })
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        settings = get_settings()

        assert settings.site_name == "Folio"
        assert settings.auth.token_ttl == 60
        assert settings.media.max_upload_bytes == 1024
        assert settings.media.url_prefix == "/media"

    def test_without_yaml_uses_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))

        settings = get_settings()

        assert settings.db.url.startswith("sqlite+aiosqlite")
        assert settings.secret_key == "test-secret-key"


class TestDbConfig:
    def _settings(self, url):
        settings = Settings(secret_key="x")
        return settings.model_copy(update={"db": settings.db.model_copy(update={"url": url})})

    def test_sqlite_skips_pool_options(self):
        config = create_db_config(self._settings("sqlite+aiosqlite:///./test.db"))
        assert config.engine_config.pool_pre_ping is not True
        assert config.connection_string == "sqlite+aiosqlite:///./test.db"

    def test_server_database_gets_pool_options(self):
        config = create_db_config(self._settings("postgresql+asyncpg://localhost/sparklink"))
        assert config.engine_config.pool_pre_ping is True
        assert config.engine_config.pool_size == 5
