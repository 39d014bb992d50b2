"""Configuration management using Pydantic Settings."""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # FastAPI
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    debug: bool = Field(default=False)
    environment: str = Field(default="production")

    # Database
    database_url: str = Field(...)
    database_pool_size: int = Field(default=20)
    database_max_overflow: int = Field(default=10)

    # Redis
    redis_url: str = Field(...)
    rate_limit_per_minute: int = Field(default=60)

    # Celery (defaults to Redis URL if not set)
    celery_broker_url: Optional[str] = Field(default=None)
    celery_result_backend: Optional[str] = Field(default=None)
    celery_timezone: str = Field(default="UTC")

    # CORS
    cors_allow_headers: str = Field(default="authorization, x-client-info, apikey, content-type")

    # Reports
    currency_symbol: str = Field(default="$")
    pdf_unavailable_note: str = Field(
        default="PDF generation not implemented in demo. Use JSON or CSV format."
    )

    # Notifications
    email_sender: str = Field(default="CommHub <no-reply@commhub.local>")
    dashboard_url: str = Field(default="http://localhost:3000/reports")

    # Monitoring
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v_upper

    def __init__(self, **data):
        super().__init__(**data)
        # Set Celery URLs to Redis URL if not explicitly provided
        if not self.celery_broker_url:
            self.celery_broker_url = self.redis_url
        if not self.celery_result_backend:
            self.celery_result_backend = self.redis_url

    @property
    def database_url_sync(self) -> str:
        """Synchronous database URL for SQLAlchemy."""
        return self.database_url.replace("postgresql://", "postgresql+psycopg2://")

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def cors_headers(self) -> dict:
        """Permissive cross-origin headers attached to every function response."""
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


# Global settings instance
settings = Settings()
