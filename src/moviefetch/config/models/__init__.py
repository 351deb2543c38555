"""Configuration domain models."""

from .api_settings import OMDbSettings
from .app_settings import LoggingSettings, UISettings
from .cache_settings import CacheSettings
from .paging_settings import PagingSettings, QueueSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "OMDbSettings",
    "PagingSettings",
    "QueueSettings",
    "Settings",
    "UISettings",
]
