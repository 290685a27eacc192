import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Matches $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_ENV_VAR = "SPARKLINK_CONFIG"


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Return the app.yaml path, honouring the SPARKLINK_CONFIG override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config() -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./sparklink.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    create_all: bool = False


class AuthConfig(BaseModel):
    """Access token configuration."""

    token_ttl: int = 60 * 60 * 24 * 7


class MediaConfig(BaseModel):
    """Where uploaded images and resumes live and how they are served."""

    local_path: str = "./media"
    url_prefix: str = "/media"
    max_upload_bytes: int = 10 * 1024 * 1024
    max_resume_bytes: int = 10 * 1024 * 1024


class CORSConfig(BaseModel):
    allow_origins: list[str] = ["http://localhost:5173"]


class LogfireConfig(BaseModel):
    """Pydantic Logfire settings. Disabled unless explicitly enabled."""

    enabled: bool = False
    service_name: str = "sparklink"
    environment: str | None = None
    sample_rate: float = 1.0
    console: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str
    log_level: str = "INFO"
    site_name: str = "SparkLink"

    # Sections loaded from app.yaml
    db: DatabaseConfig = DatabaseConfig()
    auth: AuthConfig = AuthConfig()
    media: MediaConfig = MediaConfig()
    cors: CORSConfig = CORSConfig()
    logfire: LogfireConfig = LogfireConfig()


_SECTIONS: dict[str, type[BaseModel]] = {
    "db": DatabaseConfig,
    "auth": AuthConfig,
    "media": MediaConfig,
    "cors": CORSConfig,
    "logfire": LogfireConfig,
}


def merge_app_config(base_settings: Settings, app_config: dict) -> Settings:
    """Overlay app.yaml sections and top-level scalars on top of env settings."""
    updates = {}

    for name, model in _SECTIONS.items():
        if name in app_config:
            updates[name] = model(**(app_config[name] or {}))

    for key in ("debug", "log_level", "site_name"):
        if key in app_config:
            updates[key] = app_config[key]

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    base_settings = Settings()

    try:
        app_config = load_app_config()
    except FileNotFoundError:
        return base_settings

    return merge_app_config(base_settings, app_config)
