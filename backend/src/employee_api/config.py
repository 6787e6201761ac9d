"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16

# Database hosts on the container network or loopback, exempt from sslmode
LOCAL_DATABASE_HOSTS = ("@postgres:", "@localhost:", "@127.0.0.1:")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Employee Directory API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Database (required - no default for security)
    database_url: PostgresDsn = Field(
        description="PostgreSQL connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Security - JWT
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60
    jwt_issuer: str = "employee-api"
    jwt_audience: str = "employee-app"

    # Security - Passwords
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # CORS settings
    cors_origins: str = "http://localhost:5173"  # Comma-separated list

    # Trusted proxies for rate limiting (comma-separated IP/CIDR ranges)
    trusted_proxies: str = ""

    # Rate limiting settings (requests per minute)
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_auth_login: int = 5
    rate_limit_auth_register: int = 10
    # None keeps the limiter in process memory
    rate_limit_storage_uri: str | None = None

    # Initial Director seeded on startup
    seed_admin_enabled: bool = False
    seed_admin_document_number: int = Field(default=1000, ge=1, le=2147483647)
    seed_admin_email: str = "admin@demo.com"
    seed_admin_password: str | None = None

    @field_validator("database_url")
    @classmethod
    def require_postgres(cls, value: PostgresDsn) -> PostgresDsn:
        """Only PostgreSQL is supported at runtime."""
        if not str(value).startswith(("postgresql://", "postgres://")):
            raise ValueError("DATABASE_URL must start with 'postgresql://' or 'postgres://'")
        return value

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Reject unsafe combinations of settings."""
        if self.seed_admin_enabled and not self.seed_admin_password:
            raise ValueError("SEED_ADMIN_PASSWORD must be set when SEED_ADMIN_ENABLED is true")

        if self.environment != "production":
            return self

        if self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production: it exposes API docs "
                "and raw error details."
            )

        url = str(self.database_url)
        is_local = any(host in url for host in LOCAL_DATABASE_HOSTS)
        if not is_local and "sslmode=" not in url:
            raise ValueError(
                "DATABASE_URL must include sslmode in production "
                "(e.g., sslmode=require or sslmode=verify-full)"
            )

        if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
            raise ValueError(
                f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} distinct characters"
            )

        return self

    @property
    def async_database_url(self) -> str:
        """Database URL for the asyncpg driver (``sslmode`` becomes ``ssl``)."""
        url = str(self.database_url).replace("sslmode=", "ssl=")
        for scheme in ("postgresql://", "postgres://"):
            if url.startswith(scheme):
                return "postgresql+asyncpg://" + url[len(scheme):]
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Trusted proxy addresses or CIDR ranges as a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
