"""
Process-wide configuration manager.

Settings are loaded once and shared, so calls that rely on ambient
configuration do not re-read the environment on every request.
"""

import logging
import threading
from typing import Any, Dict, Optional

from .loader import ConfigLoader
from .models import ClientSettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """Singleton holder of the process ClientSettings."""

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._initialized = True
        self._config: Optional[ClientSettings] = None
        self._loader = ConfigLoader()

    def get_config(self) -> ClientSettings:
        """Get current settings, loading them from the environment on first use."""
        if self._config is None:
            with self._lock:
                if self._config is None:
                    self._config = self._loader.load_config()
                    logger.debug("Loaded client settings from environment")
        return self._config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> ClientSettings:
        """Replace current settings with ones built from a dictionary."""
        config = ClientSettings(**config_dict)
        self._config = config
        return config

    def set_config(self, config: ClientSettings) -> None:
        self._config = config

    def reload_config(self) -> ClientSettings:
        """Discard current settings and reload them from the environment."""
        self._config = None
        return self.get_config()


config_manager = ConfigManager()
