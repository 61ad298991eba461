"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. STOREFRONT_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront_config.exceptions import ConfigurationError, ConfigurationMissingError

MIN_SECRET_LENGTH = 32


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. STOREFRONT_ENV_FILE env var
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("STOREFRONT_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signing secrets (MUST be set - the app refuses to start without them)
    customer_session_secret: SecretStr
    admin_session_secret: SecretStr
    password_reset_secret: SecretStr

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    app_base_url: str = "http://localhost:3000"  # Used in password reset links

    # Database
    database_url: str = "postgresql+asyncpg://postgres@localhost:5432/storefront"
    database_auto_create: bool = True

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed
    api_cookie_secure: bool = True
    api_cookie_samesite: Literal["lax", "strict", "none"] = "strict"
    api_cookie_domain: str | None = None

    # Token lifetimes
    session_expire_days: int = Field(default=7, ge=1)
    password_reset_expire_hours: int = Field(default=24, ge=1)

    # bcrypt work factor, tune to the deployment hardware
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = ""
    smtp_from_name: str = "Storefront"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Logging
    log_level: str = "INFO"

    @field_validator(
        "customer_session_secret",
        "admin_session_secret",
        "password_reset_secret",
    )
    @classmethod
    def _validate_secret_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < MIN_SECRET_LENGTH:
            msg = f"must be at least {MIN_SECRET_LENGTH} characters"
            raise ValueError(msg)
        return v

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Ensure cors_origins is stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    @model_validator(mode="after")
    def _validate_distinct_secrets(self) -> Settings:
        values = [
            self.customer_session_secret.get_secret_value(),
            self.admin_session_secret.get_secret_value(),
            self.password_reset_secret.get_secret_value(),
        ]
        if len(set(values)) != len(values):
            msg = (
                "CUSTOMER_SESSION_SECRET, ADMIN_SESSION_SECRET and "
                "PASSWORD_RESET_SECRET must be distinct"
            )
            raise ValueError(msg)
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]


def load_settings(**overrides: Any) -> Settings:
    """Build settings, turning validation failures into configuration errors.

    Raises
    ------
    ConfigurationMissingError
        If a required setting is absent
    ConfigurationError
        If a setting is present but unusable (short or shared secrets)
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = sorted(
            str(err["loc"][0]).upper()
            for err in e.errors()
            if err["type"] == "missing" and err["loc"]
        )
        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            raise ConfigurationMissingError(msg) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The three signing secrets must be provided via environment variables
    or .env file.
    """
    return load_settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
