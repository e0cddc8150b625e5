"""Environment configuration and validation.

This module defines strongly-typed client settings loaded from environment variables
(optionally via a local `.env` file).

The display timezone decides how canonical `YYYY-MM-DD HH:mm:ss` text is interpreted, so it is
validated at startup instead of failing on the first parsed expression.
"""

from __future__ import annotations

from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.timerange.expressions import has_fixed_offset

ExecMode = Literal["translate", "query"]

DEFAULT_LOGS_ENDPOINT = "https://play-vmlogs.victoriametrics.com"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_url: str = Field(default="http://localhost:8080", alias="SQL_TO_LOGSQL_API_URL")
    logs_endpoint: str = Field(default=DEFAULT_LOGS_ENDPOINT, alias="LOGS_ENDPOINT")
    logs_bearer_token: str = Field(default="", alias="LOGS_BEARER_TOKEN")
    exec_mode: ExecMode = Field(default="query", alias="EXEC_MODE")
    display_timezone: str = Field(default="UTC", alias="DISPLAY_TIMEZONE")

    # Unset means no client-side timeout; the transport decides.
    http_timeout_s: float | None = Field(default=None, alias="HTTP_TIMEOUT_S")

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Validate that the translation service URL is an absolute http(s) URL."""

        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("SQL_TO_LOGSQL_API_URL must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("display_timezone")
    @classmethod
    def validate_display_timezone(cls, value: str) -> str:
        """Validate that the display timezone is a known IANA name with a fixed UTC offset.

        Zones with daylight saving time are rejected: canonical wall-clock text would be ambiguous
        in the fall-back hour.
        """

        try:
            tz = ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"DISPLAY_TIMEZONE is not a known timezone: {value}") from exc
        if not has_fixed_offset(tz):
            raise ValueError(f"DISPLAY_TIMEZONE must have a fixed UTC offset: {value}")
        return value

    @field_validator("http_timeout_s")
    @classmethod
    def validate_http_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("HTTP_TIMEOUT_S must be positive")
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
