"""Application configuration."""

import logging
import secrets
import sys
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    DATABASE_URL: str = "sqlite:///./lingocards.db"

    SECRET_KEY: str = ""

    # API (constants, not from env)
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "LingoCards API"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    LOG_LEVEL: str | None = None

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Admin setup (for first-time initialization)
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    REFRESH_TOKEN_SECRET_KEY: str = ""
    COOKIE_SECURE: bool = True
    PASSWORD_PEPPER: str = ""
    PASSWORD_MIN_LENGTH: int = 6

    # Registration
    ALLOW_USER_REGISTRATIONS: bool = True

    # Rate limiting on auth endpoints
    RATE_LIMIT_ENABLED: bool = True

    # Flashcards
    FLASHCARD_MAX_TEXT_LENGTH: int = 500

    @computed_field  # type: ignore[prop-decorator]
    @property
    def refresh_secret(self) -> str:
        """Secret used to sign refresh tokens, falls back to SECRET_KEY."""
        return self.REFRESH_TOKEN_SECRET_KEY or self.SECRET_KEY

    @field_validator("ADMIN_PASSWORD", mode="after")
    @classmethod
    def strip_admin_password(cls, value: str | None) -> str | None:
        """Strip whitespace from admin password."""
        return value.strip() if value else value

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Require a strong signing secret in production, generate one elsewhere."""
        if self.ENVIRONMENT == "production" and len(self.SECRET_KEY) < MIN_SECRET_KEY_LENGTH:
            msg = f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters in production"
            raise ValueError(msg)
        if not self.SECRET_KEY:
            # Tokens will not survive a restart
            self.SECRET_KEY = secrets.token_urlsafe(MIN_SECRET_KEY_LENGTH)
        if bool(self.ADMIN_EMAIL) != bool(self.ADMIN_PASSWORD):
            msg = "ADMIN_EMAIL and ADMIN_PASSWORD must be set together"
            raise ValueError(msg)
        return self


def configure_logging(environment: str = "development", level: str | None = None) -> None:
    """Configure structured logging with structlog."""
    # Determine if we should use JSON output (production) or console output (dev)
    use_json = environment == "production"

    if level is not None:
        log_level = logging.getLevelName(level.upper())
    else:
        log_level = logging.DEBUG if environment == "development" else logging.INFO

    # Configure stdlib logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Configure structlog
    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
