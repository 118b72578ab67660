"""
Logging manager for the AppSync client.

This module provides centralized logging configuration.
"""

import logging
import sys
from typing import Dict, Optional

from ..config.models import LoggingConfig
from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self) -> None:
        """Initialize logging manager."""
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    def setup_logging(self, config: LoggingConfig) -> None:
        """
        Setup logging based on configuration.

        Args:
            config: Logging configuration
        """
        if self._configured:
            self.cleanup()

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.level.value))

        if config.enable_console:
            self._setup_console_handler(config)

        self._configured = True

        logger = logging.getLogger(__name__)
        logger.debug("Logging system configured")

    def _setup_console_handler(self, config: LoggingConfig) -> None:
        """Setup console logging handler."""
        handler = logging.StreamHandler(sys.stderr)

        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format)

        handler.setFormatter(formatter)
        handler.setLevel(getattr(logging, config.level.value))

        if config.mask_credentials:
            handler.addFilter(SensitiveDataFilter())

        logging.getLogger().addHandler(handler)
        self._handlers["console"] = handler

    def get_handler(self, name: str) -> Optional[logging.Handler]:
        return self._handlers.get(name)

    def cleanup(self) -> None:
        """Remove the handlers installed by this manager."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._configured = False


# Global logging manager instance
logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None) -> LoggingManager:
    """
    Setup logging with the global manager.

    Args:
        config: Logging configuration (defaults are used if omitted)

    Returns:
        The global LoggingManager
    """
    logging_manager.setup_logging(config or LoggingConfig())
    return logging_manager
