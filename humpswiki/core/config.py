"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
# sqlite is accepted for local runs and the test suite.
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
    "sqlite://",
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Required at process start: no defaults.
    DATABASE_URL: str
    JWT_SECRET: SecretStr

    JWT_ALGORITHM: str = "HS256"
    # Sessions last 7 days.
    JWT_EXPIRE_MINUTES: int = 10080

    # Number of posts returned by GET /getRandomPosts
    RANDOM_SAMPLE_SIZE: int = 3

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        v = v.strip()
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}")
        return level

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("RANDOM_SAMPLE_SIZE")
    @classmethod
    def validate_random_sample_size(cls, v: int) -> int:
        if v < 1 or v > 50:
            raise ValueError("RANDOM_SAMPLE_SIZE must be between 1 and 50")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies and scripts)."""
    return Settings()
