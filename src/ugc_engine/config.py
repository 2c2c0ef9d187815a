"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    # API Server
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    api_reload: bool = Field(default=False, description="Enable auto-reload for development")

    # Workflow webhook (server-side proxy target)
    webhook_url: str | None = Field(
        default=None,
        description="Workflow webhook URL that executes generation jobs",
    )
    webhook_secret: str = Field(
        default="",
        description="Shared secret sent to the webhook as x-webhook-secret",
    )
    webhook_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single proxied webhook call",
    )

    # Admission control for the proxy route
    rate_limit_max_requests: int = Field(
        default=10,
        description="Requests allowed per identity within one window",
    )
    rate_limit_window_seconds: int = Field(
        default=60,
        description="Length of the fixed rate-limit window in whole seconds",
    )

    # Client
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the proxy API used by the client",
    )
    job_service_provider: Literal["webhook", "stub"] = Field(
        default="webhook",
        description="Job service used by the client (webhook, stub)",
    )
    poll_interval_seconds: float = Field(
        default=5.0,
        description="Seconds between job status polls",
    )
    history_limit: int = Field(
        default=20,
        description="Number of completed jobs kept in local history",
    )
    default_quota: int = Field(
        default=2,
        description="Free generations assumed before the webhook reports a quota",
    )
    data_dir: Path = Field(
        default=Path.home() / ".ugc-engine",
        description="Directory holding persisted stats, history and credential",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


# Convenience alias
settings = get_settings()
