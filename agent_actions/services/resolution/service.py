"""
Read-through resolution of free-text names to identifiers.
"""

from typing import Any, Mapping, Optional, Union

from ...core.enums import ResourceType
from ...utils.logging import get_logger
from ..store import CalendarStore
from .cache import ResourceCache
from .resolver import build_name_map, lookup_name

logger = get_logger(__name__)

# (name field, id field) used to index each resource's rows.
NAME_FIELDS = {
    ResourceType.SERVICES: ("title", "id"),
    ResourceType.PROVIDERS: ("profiles.full_name", "profiles.id"),
    ResourceType.TEAMS: ("name", "id"),
    ResourceType.FLOWS: ("name", "id"),
}


class NameResolutionService:
    """Resolves names through the cache, rebuilding a partition from the store on a miss."""

    def __init__(self, store: CalendarStore, cache: ResourceCache):
        self.store = store
        self.cache = cache

    async def get_map(
        self,
        organization_id: str,
        resource_type: Union[str, ResourceType],
        sub_key: Optional[str] = None,
    ) -> Optional[Mapping[str, str]]:
        """
        Return the name map for a partition, or None when the source has no rows.

        A cache miss fetches from the store, builds the map and stores it before
        returning. Empty sources are not cached.
        """
        rtype = ResourceType(resource_type)
        cached = self.cache.get(organization_id, rtype, sub_key)
        if cached is not None:
            logger.info("[cache] hit %s for %s%s", rtype.value, organization_id, _suffix(sub_key))
            return cached

        rows = await self._fetch(organization_id, rtype, sub_key)
        if not rows:
            logger.info("[cache] no %s found for %s%s", rtype.value, organization_id, _suffix(sub_key))
            return None

        name_field, id_field = NAME_FIELDS[rtype]
        name_map = build_name_map(rows, name_field, id_field)
        self.cache.set(organization_id, rtype, name_map, sub_key)
        logger.info(
            "[cache] built %s map for %s%s (%d names)",
            rtype.value, organization_id, _suffix(sub_key), len(name_map),
        )
        return self.cache.get(organization_id, rtype, sub_key) or name_map

    async def resolve(
        self,
        organization_id: str,
        resource_type: Union[str, ResourceType],
        name: Any,
        sub_key: Optional[str] = None,
    ) -> Optional[str]:
        """Resolve ``name`` to an identifier, or None when unknown."""
        name_map = await self.get_map(organization_id, resource_type, sub_key)
        return lookup_name(name_map, name)

    async def _fetch(self, organization_id: str, rtype: ResourceType, sub_key: Optional[str]):
        if rtype is ResourceType.SERVICES:
            return await self.store.list_active_services(sub_key)
        if rtype is ResourceType.PROVIDERS:
            return await self.store.list_active_providers(sub_key)
        if rtype is ResourceType.TEAMS:
            return await self.store.list_teams(organization_id)
        return await self.store.list_active_flows(organization_id)


def _suffix(sub_key: Optional[str]) -> str:
    return f", schedule {sub_key}" if sub_key else ""
