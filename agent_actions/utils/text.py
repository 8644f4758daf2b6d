"""
Text processing utilities.
"""

import re
from typing import Any, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class TextProcessor:
    """Text processing utilities."""

    @staticmethod
    def slugify_tool_name(name: Optional[str]) -> str:
        """
        Turn a display name into a tool name matching ``^[a-zA-Z0-9_-]+$``.

        Lowercases, collapses every run of non-alphanumeric characters into a
        single underscore and trims underscores at both ends, so
        ``"Agendar Consulta!"`` becomes ``"agendar_consulta"``.
        """
        if not name:
            return ""
        return _NON_ALNUM.sub("_", str(name).lower()).strip("_")

    @staticmethod
    def normalize_name(name: Any) -> str:
        """Normalize a resource name for case-insensitive lookups."""
        if name is None:
            return ""
        return str(name).strip().lower()

    @staticmethod
    def sanitize_text(text: Optional[str]) -> str:
        """Remove control characters and collapse whitespace."""
        if not text:
            return ""

        text = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", str(text))
        text = re.sub(r"[ \t]+", " ", text)
        return text.strip()
