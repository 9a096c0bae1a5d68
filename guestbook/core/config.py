"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Guestbook API"
    APP_VERSION: str = "0.1.0"
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage
    # "memory" keeps comments in-process and loses them on restart,
    # "database" persists them in the comments table.
    STORAGE_BACKEND: Literal["memory", "database"] = "database"
    DATABASE_URL: str = "sqlite:///./guestbook.db"
    DATABASE_NAME: str = Field(
        default="",
        description="Database name reported by /health and /admin/db-info "
        "(falls back to the database part of DATABASE_URL)",
    )
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600  # seconds
    DB_POOL_PRE_PING: bool = True

    # Comments
    MEMORY_MAX_COMMENTS: int = Field(
        default=100,
        description="Number of comments the in-memory store retains",
    )
    DEFAULT_PAGE_LIMIT: int = 100
    CLEANUP_DEFAULT_DAYS: int = 30
    DEFAULT_COMMENT_COLOR: str = "black"

    # Client fingerprinting
    # Header set by the edge proxy with the real client address
    CLIENT_IP_HEADER: str = "CF-Connecting-IP"
    IP_HASH_LENGTH: int = 16
    USER_AGENT_MAX_LENGTH: int = 255

    # CORS
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_METHODS: str = "GET, POST, OPTIONS, DELETE"
    CORS_ALLOW_HEADERS: str = "Content-Type"

    # Sentry Error Tracking
    SENTRY_DSN: str = Field(
        default="",
        description="Sentry DSN for error tracking (leave empty to disable)",
    )
    SENTRY_TRACES_SAMPLE_RATE: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sentry traces sample rate (0.0-1.0, 0.1 = 10% of transactions)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_comment_limits(self) -> Self:
        """Validate comment retention and paging limits at startup."""
        if self.MEMORY_MAX_COMMENTS <= 0:
            raise ValueError(
                f"MEMORY_MAX_COMMENTS must be positive, got {self.MEMORY_MAX_COMMENTS}"
            )
        if self.DEFAULT_PAGE_LIMIT <= 0:
            raise ValueError(
                f"DEFAULT_PAGE_LIMIT must be positive, got {self.DEFAULT_PAGE_LIMIT}"
            )
        if not 1 <= self.IP_HASH_LENGTH <= 64:
            raise ValueError(
                f"IP_HASH_LENGTH must be between 1 and 64, got {self.IP_HASH_LENGTH}"
            )
        return self


settings = Settings()
