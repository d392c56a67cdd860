"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Youth Empowerment Hub"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database. DATABASE_URL (any postgres:// form) wins over the POSTGRES_* parts.
    database_url_override: str | None = Field(None, validation_alias="DATABASE_URL")
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "hub"
    postgres_password: str = ""
    postgres_db: str = "youth_hub"

    def _postgres_url(self, scheme: str) -> str:
        if not self.database_url_override:
            return (
                f"{scheme}://{self.postgres_user}:{self.postgres_password}"
                f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
            )
        _, _, rest = self.database_url_override.partition("://")
        return f"{scheme}://{rest}"

    @computed_field
    @property
    def database_url(self) -> str:
        """asyncpg URL for the application engine, without query parameters."""
        return self._postgres_url("postgresql+asyncpg").split("?", 1)[0]

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """psycopg2 URL for Alembic. Keeps sslmode and friends."""
        return self._postgres_url("postgresql")

    @computed_field
    @property
    def database_requires_ssl(self) -> bool:
        url = self.database_url_override or ""
        return "sslmode=require" in url or "ssl=require" in url

    # Auth tokens
    token_ttl_hours: int = 24
    token_sweep_interval_seconds: int = 60 * 60
    token_store: Literal["memory", "database"] = "memory"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # AWS SNS (booking / message notifications)
    aws_region: str = "us-east-1"
    notifications_topic_arn: str | None = None  # Notifications are skipped when unset
    aws_sns_endpoint_url: str | None = None  # Set for LocalStack (e.g. http://localhost:4566)

    # AWS S3 (resource file uploads)
    uploads_bucket: str | None = None  # Upload URLs answer 503 when unset
    aws_s3_endpoint_url: str | None = None  # Set for MinIO / LocalStack
    upload_url_expiry_seconds: int = 5 * 60
    download_url_expiry_seconds: int = 24 * 60 * 60
    max_upload_size_bytes: int = 10 * 1024 * 1024

    # Development seed accounts
    seed_dev_users: bool = False
    dev_user_password: str = "devpassword123"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
