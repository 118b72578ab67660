"""
Logging setup for the AppSync client.

This module provides console logging with optional structured JSON output and
masking of credentials.
"""

from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter
from .manager import LoggingManager, logging_manager, setup_logging

__all__ = [
    "LoggingManager",
    "SensitiveDataFilter",
    "StructuredFormatter",
    "logging_manager",
    "setup_logging",
]
