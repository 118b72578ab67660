"""
Configuration models for the AppSync client.

This module defines the process-level settings and the per-call request
configuration with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..auth import APIKeyConfig, IAMAuthConfig
from ..cancellation import CancellationToken
from ..constants import (
    APPSYNC_MAX_QUERY_RUNTIME_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_MAX_DELAY_MS,
    DEFAULT_RETRY_MIN_DELAY_MS,
)


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )
    mask_credentials: bool = Field(default=True, description="Mask credentials in logs")


class _RetryBounds(BaseModel):
    """Timeout, retry budget and backoff bounds shared by settings and requests."""

    timeout_ms: int = Field(
        default=APPSYNC_MAX_QUERY_RUNTIME_MS, gt=0, description="Per-attempt timeout in ms"
    )
    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES, ge=0, description="Maximum number of attempts"
    )
    retry_min_delay_ms: int = Field(
        default=DEFAULT_RETRY_MIN_DELAY_MS, ge=0, description="Lower backoff bound in ms"
    )
    retry_max_delay_ms: int = Field(
        default=DEFAULT_RETRY_MAX_DELAY_MS, ge=0, description="Upper backoff bound in ms"
    )

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "_RetryBounds":
        if self.retry_min_delay_ms > self.retry_max_delay_ms:
            raise ValueError("retry_min_delay_ms must not exceed retry_max_delay_ms")
        return self


def _validate_endpoint(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"Endpoint must be an absolute http(s) URL, got {value!r}")
    return value


class RequestConfig(_RetryBounds):
    """
    Per-call request configuration.

    Exactly one authentication mode is active per request.
    """

    url: str = Field(description="GraphQL endpoint URL")
    auth: Union[APIKeyConfig, IAMAuthConfig] = Field(
        default_factory=IAMAuthConfig, description="Authentication mode"
    )
    cancel_token: Optional[CancellationToken] = Field(
        default=None, description="Token aborting the request"
    )
    trace_context: Optional[Any] = Field(
        default=None, description="Trace identity propagated to transport spans"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_endpoint(value)


class ClientSettings(_RetryBounds):
    """
    Process-level client settings.

    Built once at startup (usually from the environment) and threaded through
    every call instead of consulting the environment per request.
    """

    endpoint: Optional[str] = Field(default=None, description="Default GraphQL endpoint")
    region: Optional[str] = Field(default=None, description="Ambient AWS region")
    api_key: Optional[str] = Field(
        default=None, description="Default API key; IAM signing is used when unset"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: Optional[str]) -> Optional[str]:
        return _validate_endpoint(value)

    def auth_config(self) -> Union[APIKeyConfig, IAMAuthConfig]:
        """Authentication mode implied by these settings."""
        if self.api_key:
            return APIKeyConfig(api_key=self.api_key)
        return IAMAuthConfig(default_region=self.region)

    def to_request_config(self, url: str, **overrides: Any) -> RequestConfig:
        """
        Build a RequestConfig for ``url`` from these settings.

        Args:
            url: Target endpoint
            **overrides: RequestConfig fields that take precedence
        """
        values: Dict[str, Any] = {
            "url": url,
            "auth": self.auth_config(),
            "timeout_ms": self.timeout_ms,
            "max_retries": self.max_retries,
            "retry_min_delay_ms": self.retry_min_delay_ms,
            "retry_max_delay_ms": self.retry_max_delay_ms,
        }
        values.update(overrides)
        return RequestConfig(**values)
