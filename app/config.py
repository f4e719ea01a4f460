# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.APP_PORT)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["local", "development", "staging", "production", "test"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Environment = Field(
        default="development",
        description="Current environment"
    )

    APP_NAME: str = Field(
        default="Authgate API",
        description="Name shown in API docs and startup logs"
    )

    APP_LOGGING: bool = Field(
        default=True,
        description="Enable request/access logging"
    )

    IS_HTTPS: bool = Field(
        default=False,
        description="Running behind a TLS-terminating proxy (trust X-Forwarded-*)"
    )

    # -------------------------------------------------------------------------
    # Process Role
    # -------------------------------------------------------------------------
    # The same code runs either as the main API server or as a worker that
    # processes background jobs. Each role binds its own port.

    IS_WORKER: bool = Field(
        default=False,
        description="Run this process in worker mode"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )

    APP_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the main API server"
    )

    APP_WORKER_PORT: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port for the worker process"
    )

    API_PREFIX: str = Field(
        default="/api",
        description="Global route prefix"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    AUTH_SECRET: str = Field(
        ...,
        min_length=16,
        description="Secret used to sign cookies"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGIN: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origin(s) (comma-separated, or *)"
    )

    # -------------------------------------------------------------------------
    # Job Queue Dashboard
    # -------------------------------------------------------------------------

    QUEUE_DASHBOARD_USERNAME: str = Field(
        default="admin",
        description="Username for the job queue dashboard"
    )

    QUEUE_DASHBOARD_PASSWORD: str = Field(
        ...,
        min_length=8,
        description="Password for the job queue dashboard"
    )

    QUEUE_DASHBOARD_SESSION_TTL: int = Field(
        default=3600,
        ge=60,
        description="Lifetime of the dashboard session cookie in seconds"
    )

    # -------------------------------------------------------------------------
    # Error Monitoring
    # -------------------------------------------------------------------------

    SENTRY_DSN: str | None = Field(
        default=None,
        description="Sentry DSN (error monitoring disabled when empty)"
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    DATABASE_URL: str = Field(
        default="sqlite:///./authgate.db",
        description="SQLAlchemy database URL"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (Celery broker + WebSocket pub/sub)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )

    # -------------------------------------------------------------------------
    # Worker / Shutdown
    # -------------------------------------------------------------------------

    WORKER_CONCURRENCY: int = Field(
        default=2,
        ge=1,
        le=64,
        description="Celery worker processes started in worker mode"
    )

    VERIFICATION_PURGE_INTERVAL: int = Field(
        default=3600,
        ge=60,
        description="Seconds between purges of expired verification records"
    )

    SHUTDOWN_TIMEOUT: int = Field(
        default=10,
        ge=0,
        le=300,
        description="Seconds to wait for in-flight requests on shutdown"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_ports(self) -> "Settings":
        if self.APP_PORT == self.APP_WORKER_PORT:
            raise ValueError("APP_PORT and APP_WORKER_PORT must differ")
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGIN string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def bind_port(self) -> int:
        """Port for this process: the worker port in worker mode, otherwise the main port."""
        return self.APP_WORKER_PORT if self.IS_WORKER else self.APP_PORT

    @property
    def graceful_shutdown_enabled(self) -> bool:
        return self.ENVIRONMENT != "local"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
