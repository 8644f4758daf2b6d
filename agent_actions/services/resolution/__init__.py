"""
Name resolution and caching.
"""

from .cache import ResourceCache, CacheEntry
from .resolver import build_name_map, get_field, lookup_name
from .service import NameResolutionService

__all__ = [
    "ResourceCache",
    "CacheEntry",
    "build_name_map",
    "get_field",
    "lookup_name",
    "NameResolutionService",
]
