"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration - single source of truth.

    All settings loaded from environment variables or .env files.
    Components never read settings themselves; the composition root passes
    the values they need into their constructors.

    Usage:
        settings = get_settings()
        print(settings.database_url)
        print(settings.redis_url)
    """

    # Database
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432)
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="postgres")
    db_name: str = Field(default="authcore")
    db_echo: bool = Field(default=False)
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)

    # Tokens
    access_token_secret: str = Field(default="")
    refresh_token_secret: str = Field(default="")
    algorithm: Literal["HS256", "HS384", "HS512"] = Field(default="HS512")
    token_issuer: str = Field(default="authcore")
    token_audience: str = Field(default="authcore/api")
    access_token_expire_minutes: int = Field(default=30, gt=0)
    refresh_token_expire_days: int = Field(default=7, gt=0)

    # Login rate limiting
    login_rate_limit_attempts: int = Field(default=5, gt=0)
    login_rate_limit_window_seconds: int = Field(default=900, gt=0)
    ip_rate_limit_attempts: int = Field(
        default=20,
        gt=0,
        description="Login attempts per client address per window, across all emails.",
    )

    # Shared cache
    cache_backend: Literal["redis", "memory"] = Field(
        default="redis",
        description="'memory' keeps session state in-process; only valid for a single worker.",
    )
    redis_url: str = Field(default="redis://localhost:6379/0")
    cache_timeout_seconds: float = Field(default=2.0, gt=0)
    repository_timeout_seconds: float = Field(default=5.0, gt=0)

    # Application
    environment: Literal["dev", "prod", "test"] = Field(default="dev")
    debug: bool = Field(default=False)
    app_name: str = Field(default="authcore")
    app_version: str = Field(default="1.0.0")

    # CORS
    cors_origins: str = Field(default="http://localhost:3000")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("access_token_secret", "refresh_token_secret")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        """Ensure token secrets are provided and meet requirements."""
        if not v or len(v) < 32:
            raise ValueError(
                "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set in "
                "environment and be at least 32 characters long"
            )
        return v

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> "Settings":
        """Access and refresh tokens must not share a signing key."""
        if self.access_token_secret == self.refresh_token_secret:
            raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def database_url(self) -> str:
        """Build async PostgreSQL URL."""
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the application lifecycle.
    For testing, clear the cache with: get_settings.cache_clear()

    Returns:
        Settings instance loaded from environment
    """
    return Settings()
