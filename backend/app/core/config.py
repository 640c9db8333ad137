"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.
"""

from typing import Annotated, List, Literal, Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Secrets should never be committed to code - use .env file (gitignored).
    """

    # API Configuration
    api_prefix: str = Field(
        default="/api",
        description="Prefix for all API endpoints"
    )
    project_name: str = Field(
        default="Quillpress",
        description="Project name displayed in API docs"
    )
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment (controls cookie flags and error detail)"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/quillpress.db",
        description="Database connection URL (SQLite by default, PostgreSQL-ready format)"
    )
    db_create_all: bool = Field(
        default=True,
        description="Create missing tables on startup"
    )

    # Security Configuration
    secret_key: str = Field(
        ...,
        validation_alias=AliasChoices("secret_key", "jwt_secret"),
        description="Secret key for JWT token signing (generate with: openssl rand -hex 32)"
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        gt=0,
        description="Session token lifetime in minutes (default: 7 days)"
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt work factor for password hashing"
    )

    # Session cookie
    session_cookie_name: str = Field(
        default="admin-token",
        description="Name of the cookie carrying the admin session token"
    )
    cookie_domain: Optional[str] = Field(
        default=None,
        description="Cookie Domain attribute (applied in production only)"
    )

    # Login rate limiting
    login_rate_limit: int = Field(
        default=5,
        ge=1,
        description="Login attempts allowed per client IP per window"
    )
    login_rate_window_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Length of the login rate limit window in seconds"
    )
    rate_limit_cleanup_probability: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Chance that an attempt triggers a sweep of expired entries"
    )

    # CORS Configuration
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        validation_alias=AliasChoices("cors_origins", "allowed_origins"),
        description="Allowed CORS origins (frontend URLs)"
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow cookies/credentials in CORS requests"
    )

    # Proxies
    trusted_proxies: Annotated[List[str], NoDecode] = Field(
        default=["127.0.0.1"],
        validation_alias=AliasChoices("trusted_proxies", "forwarded_allow_ips"),
        description="Peer addresses whose X-Forwarded-For/X-Real-IP are believed (\"*\" for any)"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    log_json: bool = Field(
        default=True,
        description="Emit structured JSON logs (False for human-readable lines)"
    )

    # Seed data
    seed_admin_username: str = Field(
        default="admin",
        description="Username created by the seed script"
    )
    seed_admin_password: str = Field(
        default="admin123",
        description="Password for the seeded admin (change after first login)"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        """True when running with ENVIRONMENT=production."""
        return self.environment == "production"

    @field_validator("cors_origins", "trusted_proxies", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | List[str]) -> List[str]:
        """
        Parse cors_origins and trusted_proxies from JSON string or list.

        Handles both JSON array strings and Python lists for flexibility.
        Supports comma-separated origins for easier .env configuration.
        """
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # Fallback: split by comma if not valid JSON
                return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Validate that secret_key is properly configured.

        Raises ValueError if still using placeholder value or too short.
        Security requirement: JWT signing keys must be at least 32 characters.
        """
        if not v or v.strip() == "":
            raise ValueError(
                "SECRET_KEY is required and cannot be empty. "
                "Generate one with: openssl rand -hex 32"
            )
        if v in [
            "generate-with-openssl-rand-hex-32",
            "CHANGE_ME_32_CHARS_MIN",
            "your-secret-key-here",
            "your-secret-key-change-this-in-production",
        ]:
            raise ValueError(
                "SECRET_KEY must be set to a secure random value (not placeholder). "
                "Generate one with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError(
                f"SECRET_KEY must be at least 32 characters long for security. "
                f"Current length: {len(v)}. Generate with: openssl rand -hex 32"
            )
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """
        Validate database URL format.

        Supports SQLite (default) and PostgreSQL through async drivers.
        """
        if not v or v.strip() == "":
            raise ValueError("DATABASE_URL is required and cannot be empty")

        valid_schemes = ["sqlite+aiosqlite", "postgresql+asyncpg"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"DATABASE_URL must start with one of: {', '.join(valid_schemes)}. "
                f"Got: {v[:20]}..."
            )
        return v

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize the prefix to '/segment' form (empty string allowed)."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {v!r}")
        return level


# Global settings instance
# Import this instance throughout the application
settings = Settings()
