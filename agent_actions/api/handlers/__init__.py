"""
API route handlers.
"""

from .health import HealthHandler
from .cache import CacheHandler
from .tools import ToolsHandler

__all__ = [
    "HealthHandler",
    "CacheHandler",
    "ToolsHandler",
]
