"""MovieFetch Configuration Module

This module provides unified access to configuration models and settings
management for MovieFetch.
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import (
    CacheSettings,
    LoggingSettings,
    OMDbSettings,
    PagingSettings,
    QueueSettings,
    Settings,
    UISettings,
)

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "OMDbSettings",
    "PagingSettings",
    "QueueSettings",
    "Settings",
    "UISettings",
    "get_config",
    "load_settings",
    "reload_config",
]
