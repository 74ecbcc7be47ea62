"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)


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
    # Empty prefix mounts /register, /login, /articles ... at the root.
    API_PREFIX: str = ""

    DATABASE_URL: str = "sqlite:///./linkshare.db"
    # Run Base.metadata.create_all on startup; disable when Alembic owns the schema.
    AUTO_CREATE_TABLES: bool = True

    # Which identity assertion this deployment uses. Never mixed.
    AUTH_MODE: Literal["token", "session"] = "token"

    # Stateless tokens
    JWT_SECRET: SecretStr = SecretStr("change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Server-side sessions
    SESSION_EXPIRE_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "linkshare_session"
    SESSION_COOKIE_SECURE: bool = True

    # Password hashing and credential policy
    BCRYPT_ROUNDS: int = 12
    USERNAME_MIN_LEN: int = 3
    USERNAME_MAX_LEN: int = 255
    PASSWORD_MIN_LEN: int = 4
    PASSWORD_MAX_LEN: int = 128
    CONFLICT_STATUS_CODE: int = 400

    # slowapi limit string applied to POST /login
    LOGIN_RATE_LIMIT: str = "10/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Bootstrap admin created at startup when missing
    SEED_ADMIN: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: SecretStr = SecretStr("admin")

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./linkshare.db)"
            )
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_PREFIX must be empty or start with '/' (e.g. /api)")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("HS"):
            raise ValueError("JWT_ALGORITHM must be an HMAC algorithm (HS256, HS384, HS512)")
        return v

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 60:
            raise ValueError("JWT_EXPIRE_MINUTES must be between 1 and 60")
        return v

    @field_validator("SESSION_EXPIRE_HOURS")
    @classmethod
    def validate_session_expire_hours(cls, v: int) -> int:
        if v < 1 or v > 24:
            raise ValueError("SESSION_EXPIRE_HOURS must be between 1 and 24")
        return v

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_COOKIE_NAME must be set and non-empty")
        return v.strip()

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("USERNAME_MIN_LEN", "PASSWORD_MIN_LEN")
    @classmethod
    def validate_min_lengths(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Minimum username/password length must be at least 1")
        return v

    @field_validator("PASSWORD_MAX_LEN")
    @classmethod
    def validate_password_max_len(cls, v: int) -> int:
        # Passwords are SHA-256'd before bcrypt, so length past 72 bytes is not lost.
        if v > 1024:
            raise ValueError("PASSWORD_MAX_LEN must be at most 1024")
        return v

    @field_validator("CONFLICT_STATUS_CODE")
    @classmethod
    def validate_conflict_status_code(cls, v: int) -> int:
        if v not in (400, 409):
            raise ValueError("CONFLICT_STATUS_CODE must be 400 or 409")
        return v

    @field_validator("LOGIN_RATE_LIMIT")
    @classmethod
    def validate_login_rate_limit(cls, v: str) -> str:
        if not v or "/" not in v:
            raise ValueError("LOGIN_RATE_LIMIT must look like '10/minute'")
        return v.strip()

    @model_validator(mode="after")
    def validate_length_policy(self) -> "Settings":
        if self.USERNAME_MIN_LEN > self.USERNAME_MAX_LEN:
            raise ValueError("USERNAME_MIN_LEN must not exceed USERNAME_MAX_LEN")
        if self.PASSWORD_MIN_LEN > self.PASSWORD_MAX_LEN:
            raise ValueError("PASSWORD_MIN_LEN must not exceed PASSWORD_MAX_LEN")
        if self.APP_ENV == "prod" and self.JWT_SECRET.get_secret_value() == "change-me-in-production":
            raise ValueError("JWT_SECRET must be changed from the default in prod")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
