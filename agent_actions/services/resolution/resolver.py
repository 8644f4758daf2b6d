"""
Name -> identifier resolution.

Builds case-insensitive lookup maps from raw resource rows. Field paths may be
dotted to reach into joined records, e.g. ``profiles.full_name``.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from ...utils.logging import get_logger
from ...utils.text import TextProcessor

logger = get_logger(__name__)

_MISSING = object()


def get_field(item: Any, path: str) -> Any:
    """
    Read ``path`` from a row, following dots into nested mappings.

    A direct key wins over path traversal, so a literal ``"a.b"`` key is still
    found. Returns None when any step of the path is absent.
    """
    if not isinstance(item, Mapping):
        return None

    value = item.get(path, _MISSING)
    if value is not _MISSING and value is not None:
        return value
    if "." not in path:
        return None

    nested: Any = item
    for key in path.split("."):
        if not isinstance(nested, Mapping):
            return None
        nested = nested.get(key)
        if nested is None:
            return None
    return nested


def build_name_map(
    items: Optional[Iterable[Any]],
    name_field: str = "name",
    id_field: str = "id",
) -> Dict[str, str]:
    """
    Build a ``{lowercase name: id}`` map from resource rows.

    Rows missing either field are skipped. When two rows share a name the last
    one wins. Pure: never touches the cache.
    """
    name_map: Dict[str, str] = {}
    if not items:
        return name_map

    for item in items:
        if not item:
            continue

        name = get_field(item, name_field)
        identifier = get_field(item, id_field)
        if not name or identifier in (None, ""):
            logger.debug("[resolver] skipping row without %s/%s", name_field, id_field)
            continue

        key = TextProcessor.normalize_name(name)
        if key:
            name_map[key] = identifier

    return name_map


def lookup_name(name_map: Optional[Mapping[str, str]], name: Any) -> Optional[str]:
    """Resolve a free-text name against a map built by :func:`build_name_map`."""
    if not name_map or name is None:
        return None
    return name_map.get(TextProcessor.normalize_name(name))
