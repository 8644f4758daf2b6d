"""
Cache administration handler.

Configuration-change collaborators call these routes when a service, provider,
team or flow is renamed or removed, so the next tool call rebuilds the map.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel

from ...core.enums import ResourceType
from ...services.resolution import ResourceCache
from ...utils.logging import get_logger
from ..security import AdminGuard, bearer

logger = get_logger(__name__)


class InvalidationResponse(BaseModel):
    """Result of an invalidation request."""
    organization_id: Optional[str] = None
    resource_type: Optional[str] = None
    sub_key: Optional[str] = None
    removed: int


class CacheStatsResponse(BaseModel):
    """Cache occupancy."""
    entries: int
    valid: int
    organizations: int
    ttl_seconds: float
    max_entries: Optional[int] = None


class CacheHandler:
    """Handler for cache invalidation and monitoring endpoints."""

    def __init__(self, cache: ResourceCache, guard: AdminGuard):
        self.cache = cache
        self.guard = guard

        async def authorize(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)):
            self.guard(credentials)

        self.router = APIRouter(prefix="/cache", dependencies=[Depends(authorize)])
        self._setup_routes()

    def _setup_routes(self):
        """Setup cache routes."""

        @self.router.get("/stats", response_model=CacheStatsResponse)
        async def cache_stats():
            """Entry counts for the name -> id cache."""
            return CacheStatsResponse(
                **self.cache.stats(),
                ttl_seconds=self.cache.ttl_seconds,
                max_entries=self.cache.max_entries,
            )

        @self.router.post("/sweep", response_model=InvalidationResponse)
        async def sweep_cache():
            """Drop expired entries."""
            return InvalidationResponse(removed=self.cache.sweep())

        @self.router.delete("", response_model=InvalidationResponse)
        async def clear_cache():
            """Clear every organization's entries."""
            removed = len(self.cache)
            self.cache.invalidate_all()
            return InvalidationResponse(removed=removed)

        @self.router.delete("/{organization_id}", response_model=InvalidationResponse)
        async def invalidate_organization(organization_id: str):
            """Drop every entry of one organization."""
            removed = self.cache.invalidate(organization_id)
            return InvalidationResponse(organization_id=organization_id, removed=removed)

        @self.router.delete("/{organization_id}/{resource_type}", response_model=InvalidationResponse)
        async def invalidate_resource(
            organization_id: str,
            resource_type: ResourceType,
            sub_key: Optional[str] = None,
        ):
            """Drop one resource bucket, or one schedule's partition with ``sub_key``."""
            removed = self.cache.invalidate(organization_id, resource_type, sub_key)
            return InvalidationResponse(
                organization_id=organization_id,
                resource_type=resource_type.value,
                sub_key=sub_key,
                removed=removed,
            )
