"""Application configuration loaded from environment variables."""

import re
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# "<n>" seconds or "<n><unit>" with unit in s, m, h, d, w (e.g. 15m, 7d).
DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # NODE_ENV is accepted for deployments that share an env file with the frontend.
    APP_ENV: Literal["dev", "prod"] = Field(
        default="dev",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Empty: allow any origin in dev, none in prod.
    CORS_ORIGINS: list[str] = []

    # Postgres: required, no default
    DATABASE_URL: str

    # JWT authentication: both secrets are required
    JWT_ACCESS_SECRET: SecretStr
    JWT_REFRESH_SECRET: SecretStr
    JWT_ACCESS_EXPIRES: str = "15m"
    JWT_REFRESH_EXPIRES: str = "7d"
    JWT_ALGORITHM: str = "HS256"

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def normalize_app_env(cls, v: object) -> object:
        if not isinstance(v, str):
            return v
        s = v.strip().lower()
        if s in ("prod", "production"):
            return "prod"
        return "dev"

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        s = v.strip().rstrip("/")
        if s and not s.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return s

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
        # SQLAlchemy only knows the "postgresql" dialect name.
        if v.startswith("postgres://") or v.startswith("postgres+"):
            v = "postgresql" + v[len("postgres"):]
        return v

    @field_validator("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT secrets must be set and non-empty")
        return v

    @field_validator("JWT_ACCESS_EXPIRES", "JWT_REFRESH_EXPIRES")
    @classmethod
    def validate_jwt_expires(cls, v: str) -> str:
        match = DURATION_PATTERN.match(v or "")
        if match is None or int(match.group(1)) <= 0:
            raise ValueError(
                "JWT expiry must be a positive duration like 30s, 15m, 12h, 7d or 3600"
            )
        return v.strip().lower()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ALGORITHM must be set and non-empty")
        return v.strip()

    @property
    def cookie_secure(self) -> bool:
        """Refresh cookie is marked Secure only in production."""
        return self.APP_ENV == "prod"

    @property
    def auth_cookie_path(self) -> str:
        return f"{self.API_PREFIX}/auth"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
