"""
Per-tenant name -> identifier cache.

Entries are keyed by ``(organization, resource type, sub key)``. Services and
providers are partitioned by schedule (the sub key); teams and flows have one
entry per organization. An entry is valid while ``now - timestamp < ttl``.
Expired entries are ignored on read and overwritten on the next build; they
are only dropped physically by :meth:`ResourceCache.sweep`, by invalidation or
by the ``max_entries`` ceiling.

Every write replaces a whole entry with a new read-only mapping, so a reader
never sees a partially built map.
"""

import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from ...core.enums import ResourceType
from ...utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60

CacheKey = Tuple[str, ResourceType, Optional[str]]


@dataclass(frozen=True)
class CacheEntry:
    """One cached name map and the time it was built."""

    data: Mapping[str, str]
    timestamp: float


class ResourceCache:
    """TTL cache of name -> id maps, scoped per organization and resource type."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}

    @classmethod
    def from_settings(cls, settings) -> "ResourceCache":
        return cls(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    def _key(
        self,
        organization_id: str,
        resource_type: Union[str, ResourceType],
        sub_key: Optional[str],
    ) -> Optional[CacheKey]:
        rtype = ResourceType(resource_type)
        if rtype.is_schedule_scoped:
            if not sub_key:
                return None
            return (organization_id, rtype, str(sub_key))
        return (organization_id, rtype, None)

    def is_valid(self, entry: Optional[CacheEntry]) -> bool:
        """Whether an entry is still inside its TTL window."""
        return entry is not None and (self._clock() - entry.timestamp) < self.ttl_seconds

    def get(
        self,
        organization_id: str,
        resource_type: Union[str, ResourceType],
        sub_key: Optional[str] = None,
    ) -> Optional[Mapping[str, str]]:
        """
        Return the cached map, or None when absent or expired.

        Services and providers need ``sub_key`` (the schedule id); without it
        the lookup is always a miss.
        """
        if not organization_id:
            return None

        key = self._key(organization_id, resource_type, sub_key)
        if key is None:
            return None

        entry = self._entries.get(key)
        if not self.is_valid(entry):
            return None
        return entry.data

    def set(
        self,
        organization_id: str,
        resource_type: Union[str, ResourceType],
        data: Mapping[str, str],
        sub_key: Optional[str] = None,
    ) -> None:
        """Store ``data``, replacing any previous entry for the same partition."""
        if not organization_id:
            return

        key = self._key(organization_id, resource_type, sub_key)
        if key is None:
            logger.warning(
                "[cache] refusing to store %s for %s without a schedule key",
                resource_type, organization_id,
            )
            return

        self._entries[key] = CacheEntry(
            data=MappingProxyType(dict(data)),
            timestamp=self._clock(),
        )
        self._enforce_ceiling()

    def invalidate(
        self,
        organization_id: str,
        resource_type: Optional[Union[str, ResourceType]] = None,
        sub_key: Optional[str] = None,
    ) -> int:
        """
        Drop cached entries for an organization.

        - no ``resource_type``: every entry of the organization
        - services/providers with ``sub_key``: that schedule's partition only
        - services/providers without ``sub_key``: the whole type bucket
        - teams/flows: the organization's single entry

        Returns the number of entries removed.
        """
        if not organization_id:
            return 0

        rtype = ResourceType(resource_type) if resource_type else None
        if rtype is not None and rtype.is_schedule_scoped and sub_key:
            sub_key = str(sub_key)
        else:
            sub_key = None

        doomed: List[CacheKey] = [
            key for key in list(self._entries)
            if key[0] == organization_id
            and (rtype is None or key[1] == rtype)
            and (sub_key is None or key[2] == sub_key)
        ]
        for key in doomed:
            self._entries.pop(key, None)

        if doomed:
            logger.info(
                "[cache] invalidated %d entr%s for %s (%s%s)",
                len(doomed), "y" if len(doomed) == 1 else "ies", organization_id,
                rtype.value if rtype else "all",
                f"/{sub_key}" if sub_key else "",
            )
        return len(doomed)

    def invalidate_all(self) -> None:
        """Clear every tenant."""
        self._entries = {}
        logger.info("[cache] cleared")

    def sweep(self) -> int:
        """Physically drop expired entries. Returns how many were removed."""
        expired = [key for key, entry in list(self._entries.items()) if not self.is_valid(entry)]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.info("[cache] swept %d expired entries", len(expired))
        return len(expired)

    def stats(self) -> Dict[str, int]:
        """Entry counts for monitoring."""
        entries = list(self._entries.items())
        return {
            "entries": len(entries),
            "valid": sum(1 for _, entry in entries if self.is_valid(entry)),
            "organizations": len({key[0] for key, _ in entries}),
        }

    def __len__(self) -> int:
        return len(self._entries)

    def _enforce_ceiling(self) -> None:
        if not self.max_entries or len(self._entries) <= self.max_entries:
            return

        self.sweep()
        while len(self._entries) > self.max_entries:
            oldest = min(self._entries.items(), key=lambda item: item[1].timestamp)[0]
            self._entries.pop(oldest, None)
