"""
Configuration management for the AppSync client.

This module provides the process-level settings, the per-call request
configuration and loading from environment variables.
"""

from .loader import ConfigLoader
from .manager import ConfigManager, config_manager
from .models import ClientSettings, LoggingConfig, LogLevel, RequestConfig

__all__ = [
    "ClientSettings",
    "ConfigLoader",
    "ConfigManager",
    "LogLevel",
    "LoggingConfig",
    "RequestConfig",
    "config_manager",
]
