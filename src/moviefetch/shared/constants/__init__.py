"""
MovieFetch Constants Module

This module provides centralized access to all application constants,
organized into logical groups for better maintainability.
"""

from .api import NetworkConfig, OMDbDefaults, OMDbParams
from .cache import CacheConfig
from .cli import CLIDefaults, CLIHelp
from .messages import UIConfig, UserMessages
from .paging import PagingConfig, QueueConfig
from .system import BASE_SECOND

__all__ = [
    "BASE_SECOND",
    "CLIDefaults",
    "CLIHelp",
    "CacheConfig",
    "NetworkConfig",
    "OMDbDefaults",
    "OMDbParams",
    "PagingConfig",
    "QueueConfig",
    "UIConfig",
    "UserMessages",
]
