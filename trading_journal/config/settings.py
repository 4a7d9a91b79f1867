"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"
DEFAULT_BASE_CURRENCY = "VND"


class AppSettings(BaseSettings):
    """Configuration options for the Trading Journal gateway."""

    app_name: str = Field(default="Trading Journal Gateway")
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY)
    log_level: str = Field(default="INFO")

    journal_api_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the Trading Journal REST API.",
    )
    journal_api_token: str | None = Field(
        default=None,
        description="Optional bearer token forwarded to the Trading Journal API",
    )
    journal_api_timeout_seconds: float = Field(default=15.0)

    market_data_dedupe_seconds: float = Field(
        default=60.0,
        description="How long a successful market data response is reused.",
    )
    market_data_retry_count: int = Field(default=2, ge=0)
    market_data_retry_backoff_seconds: float = Field(default=1.0, ge=0.0)

    portfolio_cache_ttl_seconds: float = Field(
        default=30.0,
        description="Window in which an identical portfolio fetch is skipped.",
    )
    default_page_size: int = Field(default=10, ge=1)
    notification_duration_ms: int = Field(default=3000, ge=0)
    risk_free_rate: float = Field(default=0.02)

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="trading-journal-gateway")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"journal_api_token"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_TIMEZONE",
    "DEFAULT_BASE_CURRENCY",
    "get_settings",
]
