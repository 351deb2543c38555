"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from moviefetch.config.models.settings import Settings

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings."""

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML file if given, otherwise from the environment."""
    if config_path is None:
        return Settings()

    settings = Settings.from_toml_file(config_path)
    logger.debug("Loaded configuration from %s", config_path)
    return settings


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance."""
    return _loader.reload_config(config_path)
