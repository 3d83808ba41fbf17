"""
Application configuration using Pydantic Settings.
All environment variables are loaded from .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_asyncpg(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Local document store (source of truth)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./salesnet.db",
        description="Local store connection string (async)"
    )

    # Remote relational mirror
    remote_database_url: Optional[str] = Field(
        default=None,
        description="Remote mirror connection string; unset means offline mode"
    )

    @field_validator("database_url", "remote_database_url", mode="before")
    @classmethod
    def convert_database_url(cls, v: Optional[str]) -> Optional[str]:
        """Convert standard postgres URL to asyncpg format."""
        if not v:
            return v
        return _to_asyncpg(v)

    # Authentication
    secret_key: str = Field(
        default="change-me-in-production",
        description="Secret key for JWT token signing"
    )
    jwt_expire_hours: int = Field(
        default=12,
        description="JWT token expiration time in hours"
    )

    # Master account (created on first startup, also the seed for a reset store)
    master_email: str = Field(
        default="amministrazione@codit.it",
        description="Master account email"
    )
    master_password: str = Field(
        default="admin",
        description="Master account password"
    )
    master_name: str = Field(
        default="Amministrazione",
        description="Master account display name"
    )

    # Sync
    sync_retry_minutes: int = Field(
        default=5,
        description="Interval of the mirror retry job"
    )

    # Application
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    is_production: bool = Field(
        default=False,
        description="Production mode flag"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
