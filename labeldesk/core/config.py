"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Outbound catalog API must be plain http(s).
VALID_URL_PREFIXES = ("http://", "https://")


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
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"

    # SQLite file; parent directory is created on startup.
    SQLITE_PATH: str = "backend/data/app.db"

    # Browser origin allowed to send credentialed requests.
    CORS_ORIGIN: str = "http://localhost:3000"

    # JWT session cookie
    JWT_SECRET: SecretStr = SecretStr("dev-secret-change-me")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 10080
    AUTH_COOKIE_NAME: str = "auth_token"

    # Account provisioned on startup when no user with this login exists.
    INITIAL_ADMIN_LOGIN: str = "admin"
    INITIAL_ADMIN_PASSWORD: SecretStr = SecretStr("123456")

    # External catalog / labels / stations / barcodes API
    CATALOG_API_URL: str = "http://localhost:8000/api/v1"
    CATALOG_REQUEST_TIMEOUT_SEC: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "prod"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(
                "LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return level

    @field_validator("SQLITE_PATH")
    @classmethod
    def validate_sqlite_path(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SQLITE_PATH must be set and non-empty")
        return v.strip()

    @field_validator("CORS_ORIGIN")
    @classmethod
    def validate_cors_origin(cls, v: str) -> str:
        s = (v or "").strip().rstrip("/")
        if not s.lower().startswith(VALID_URL_PREFIXES):
            raise ValueError(
                "CORS_ORIGIN must use http or https (e.g. http://localhost:3000)"
            )
        return s

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

    @field_validator("AUTH_COOKIE_NAME", "INITIAL_ADMIN_LOGIN")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value must be set and non-empty")
        return v.strip()

    @field_validator("CATALOG_API_URL")
    @classmethod
    def validate_catalog_api_url(cls, v: str) -> str:
        s = (v or "").strip()
        if not s.lower().startswith(VALID_URL_PREFIXES):
            raise ValueError(
                "CATALOG_API_URL must use http or https (e.g. http://localhost:8000/api/v1)"
            )
        return s.rstrip("/")

    @field_validator("CATALOG_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_catalog_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError(
                "CATALOG_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 120"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
