"""Typed configuration for the HTTP client, decoding defaults, and logging.

Values come from (lowest to highest precedence) model defaults, environment
variables prefixed with ``HTTPENVELOPE_`` and explicit keyword arguments.
Nested sections use ``__`` as the delimiter, for example
``HTTPENVELOPE_HTTP__TIMEOUT_READ=10`` or ``HTTPENVELOPE_LOGGING__LEVEL=debug``.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "DecodeSettings",
    "HttpSettings",
    "LoggingSettings",
    "Settings",
    "get_settings",
    "reset_settings_for_tests",
]

DEFAULT_USER_AGENT = "HttpEnvelope/0.1 (+https://pypi.org/project/http-envelope/)"


class HttpSettings(BaseModel):
    """Transport settings for the HTTPX-backed executor."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    base_url: Optional[str] = Field(
        default=None,
        description="Base URL prepended to resolved path templates",
    )
    timeout_connect: float = Field(
        default=5.0,
        gt=0.0,
        le=60.0,
        description="Connect timeout in seconds",
    )
    timeout_read: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Read timeout in seconds",
    )
    timeout_write: float = Field(
        default=30.0,
        gt=0.0,
        le=300.0,
        description="Write timeout in seconds",
    )
    timeout_pool: float = Field(
        default=5.0,
        gt=0.0,
        le=60.0,
        description="Acquire-from-pool timeout in seconds",
    )
    verify_tls: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = Field(
        default=True,
        description="Follow redirects; the final URL is reported in the info map",
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header value")

    @field_validator("base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class DecodeSettings(BaseModel):
    """Defaults applied when decoding response payloads."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    default_content_type: Optional[str] = Field(
        default=None,
        description="Content type assumed when a response carries none",
    )

    @field_validator("default_content_type", mode="before")
    @classmethod
    def normalize_content_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip().lower()
        return text or None


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True, validate_assignment=False)

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    emit_json_logs: bool = Field(default=True, description="Emit JSON-formatted log lines")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Normalize and validate logging level."""
        upper = str(v).upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if upper not in valid_levels:
            raise ValueError(f"level must be one of {sorted(valid_levels)}, got '{v}'")
        return upper

    def level_int(self) -> int:
        """Convert level string to logging module integer."""
        return logging.getLevelName(self.level)


class Settings(BaseSettings):
    """Top-level settings aggregating every section."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPENVELOPE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    http: HttpSettings = Field(default_factory=HttpSettings)
    decode: DecodeSettings = Field(default_factory=DecodeSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


_SETTINGS: Optional[Settings] = None
_SETTINGS_LOCK = threading.Lock()


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""

    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            _SETTINGS = Settings()
        return _SETTINGS


def reset_settings_for_tests() -> None:
    """Drop cached settings so the next :func:`get_settings` re-reads the environment."""

    global _SETTINGS
    with _SETTINGS_LOCK:
        _SETTINGS = None
