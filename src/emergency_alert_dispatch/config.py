"""Configuration management service with Pydantic Settings.

This module provides centralized configuration management for the
emergency alert dispatcher, loading and validating environment
variables at startup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SmsGatewaySettings(BaseSettings):
    """HTTP SMS gateway settings."""

    model_config = SettingsConfigDict(env_prefix="SMS_GATEWAY_")

    url: str | None = Field(
        default=None,
        alias="SMS_GATEWAY_URL",
        description="SMS gateway endpoint accepting message submissions",
    )
    api_key: SecretStr | None = Field(
        default=None,
        alias="SMS_GATEWAY_API_KEY",
        description="Bearer token for the SMS gateway",
    )
    sender_id: str | None = Field(
        default=None,
        alias="SMS_GATEWAY_SENDER_ID",
        description="Sender name or number shown to recipients",
    )
    timeout: float = Field(
        default=10.0,
        alias="SMS_GATEWAY_TIMEOUT",
        description="HTTP timeout in seconds for one send",
        gt=0,
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Validate gateway URL format."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("SMS gateway URL must be an HTTP(S) endpoint")
        return v

    @property
    def enabled(self) -> bool:
        """Check if the SMS gateway is configured."""
        return self.url is not None and self.api_key is not None


class DispatchSettings(BaseSettings):
    """Dispatch engine settings."""

    model_config = SettingsConfigDict(env_prefix="DISPATCH_")

    send_interval_ms: int = Field(
        default=100,
        alias="DISPATCH_SEND_INTERVAL_MS",
        description="Minimum pause between consecutive sends in one dispatch",
        ge=0,
    )
    recipients_file: Path | None = Field(
        default=None,
        alias="ALERT_RECIPIENTS_FILE",
        description="JSON file with recipient lists per alert category",
    )

    @property
    def send_interval_seconds(self) -> float:
        """Return the send interval in seconds."""
        return self.send_interval_ms / 1000


class Settings(BaseSettings):
    """Main application settings.

    Loads configuration from environment variables with support for
    .env files via python-dotenv.

    Example:
        ```python
        from emergency_alert_dispatch.config import get_settings

        settings = get_settings()
        print(settings.dispatch.send_interval_ms)
        print(settings.log_level)
        ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nested configuration groups
    sms_gateway: SmsGatewaySettings = Field(default_factory=SmsGatewaySettings)
    dispatch: DispatchSettings = Field(default_factory=DispatchSettings)

    # Application settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    sms_permission_granted: bool = Field(
        default=False,
        alias="SMS_PERMISSION_GRANTED",
        description="Whether this host is authorized to send SMS",
    )
    metrics_port: int | None = Field(
        default=None,
        alias="METRICS_PORT",
        description="HTTP port for Prometheus metrics (disabled when unset)",
        ge=1,
        le=65535,
    )
    dry_run: bool = Field(
        default=False,
        alias="DRY_RUN",
        description="Log alerts instead of sending them",
    )

    def redacted_summary(self) -> dict[str, str | dict[str, str]]:
        """Get a summary of settings with secrets redacted.

        Returns:
            Dictionary of settings with sensitive values masked.
        """
        return {
            "sms_gateway": {
                "url": self.sms_gateway.url or "(not set)",
                "api_key": "(set)" if self.sms_gateway.api_key else "(not set)",
                "sender_id": self.sms_gateway.sender_id or "(not set)",
            },
            "sms_gateway_enabled": str(self.sms_gateway.enabled),
            "send_interval_ms": str(self.dispatch.send_interval_ms),
            "recipients_file": (
                str(self.dispatch.recipients_file)
                if self.dispatch.recipients_file
                else "(built-in)"
            ),
            "sms_permission_granted": str(self.sms_permission_granted),
            "log_level": self.log_level,
            "metrics_port": str(self.metrics_port) if self.metrics_port else "(disabled)",
            "dry_run": str(self.dry_run),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Uses LRU cache to ensure settings are loaded only once and
    reused across the application.

    Returns:
        The Settings instance.

    Raises:
        ValidationError: If environment variables have invalid values.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when you need to reload settings with
    different environment variables.
    """
    get_settings.cache_clear()
