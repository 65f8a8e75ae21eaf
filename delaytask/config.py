"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from delaytask.constants import (
    DEFAULT_BUCKET_TTL_SECONDS,
    DEFAULT_CURSOR_TTL_SECONDS,
    DEFAULT_INTERVAL,
    DEFAULT_PULL_BATCH_SIZE,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 5.0
    redis_connect_timeout: float = 3.0

    # Queue
    default_interval: int = DEFAULT_INTERVAL
    bucket_ttl_seconds: int = DEFAULT_BUCKET_TTL_SECONDS
    cursor_ttl_seconds: int = DEFAULT_CURSOR_TTL_SECONDS
    pull_batch_size: int = DEFAULT_PULL_BATCH_SIZE

    # Sweeper Configuration
    sweeper_id: str | None = None
    sweeper_tasknames: list[str] = []
    sweeper_poll_interval_seconds: float = 0.5

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Observability
    otel_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"
    otel_service_name: str = "delaytask"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    @model_validator(mode="after")
    def check_queue_limits(self) -> "Settings":
        """Reject intervals, batch sizes and TTLs the queue cannot work with."""
        if self.default_interval <= 0:
            raise ValueError("default_interval must be positive")
        if self.pull_batch_size <= 0:
            raise ValueError("pull_batch_size must be positive")
        if self.cursor_ttl_seconds <= 0:
            raise ValueError("cursor_ttl_seconds must be positive")
        # A bucket must outlive any cursor that could still be walking towards it
        if self.bucket_ttl_seconds < self.cursor_ttl_seconds:
            raise ValueError(
                "bucket_ttl_seconds must be at least cursor_ttl_seconds"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
