"""
Configuration management for the agent actions system.
"""

from .settings import Settings, get_settings
from .store import StoreConfig

__all__ = [
    "Settings",
    "get_settings",
    "StoreConfig",
]
