"""
Configuration loader for the AppSync client.

This module builds ClientSettings from environment variables.
"""

import os
from typing import Any, Dict, Mapping, Optional, Tuple

from ..constants import GRAPHQL_API_ENDPOINT_ENV_NAME
from .models import ClientSettings


class ConfigLoader:
    """Configuration loader reading the process environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            environ: Mapping to read instead of ``os.environ``
        """
        self.environ = environ

        # Environment variable prefix
        self.env_prefix = "APPSYNC_CLIENT_"

    def load_config(self, **overrides: Any) -> ClientSettings:
        """
        Load settings from the environment.

        Args:
            **overrides: Settings fields that take precedence over the environment

        Returns:
            ClientSettings instance
        """
        config_data = self._load_from_environment()
        config_data = self._deep_merge(config_data, overrides)
        return ClientSettings(**config_data)

    def _env_mappings(self) -> Dict[str, Tuple[str, ...]]:
        return {
            GRAPHQL_API_ENDPOINT_ENV_NAME: ("endpoint",),
            # AWS_REGION wins over AWS_DEFAULT_REGION, see _load_from_environment
            "AWS_DEFAULT_REGION": ("region",),
            "AWS_REGION": ("region",),
            "APPSYNC_API_KEY": ("api_key",),
            f"{self.env_prefix}TIMEOUT_MS": ("timeout_ms",),
            f"{self.env_prefix}MAX_RETRIES": ("max_retries",),
            f"{self.env_prefix}RETRY_MIN_DELAY_MS": ("retry_min_delay_ms",),
            f"{self.env_prefix}RETRY_MAX_DELAY_MS": ("retry_max_delay_ms",),
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FORMAT": ("logging", "format"),
            f"{self.env_prefix}LOG_STRUCTURED": ("logging", "enable_structured"),
        }

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        environ = os.environ if self.environ is None else self.environ
        config: Dict[str, Any] = {}

        for env_var, config_path in self._env_mappings().items():
            value = environ.get(env_var)
            if value is None or value == "":
                continue

            converted_value = self._convert_env_value(config_path[-1], value)

            # Set nested configuration value
            current = config
            for key in config_path[:-1]:
                current = current.setdefault(key, {})
            current[config_path[-1]] = converted_value

        return config

    def _convert_env_value(self, key: str, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Numeric fields are left as strings; pydantic coerces and validates them.
        """
        value = value.strip()

        if key.startswith("enable_"):
            return value.lower() in ("true", "yes", "1", "on")

        if key == "level":
            return value.upper()

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
