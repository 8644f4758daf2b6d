"""
Validation utilities for tool-call arguments.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..core.exceptions import ActionValidationError
from .date import DateParser, TimeParser


class ValidationUtils:
    """Validation utilities for tool-call arguments."""

    @staticmethod
    def missing_fields(values: Dict[str, Any], required: Iterable[str]) -> List[str]:
        """
        List required fields that are absent or empty.

        Args:
            values: Mapping of field name to value
            required: Field names that must be present

        Returns:
            Missing field names, in the order given
        """
        return [name for name in required if values.get(name) in (None, "", [])]

    @staticmethod
    def require(values: Dict[str, Any], required: Iterable[str]) -> None:
        """Raise ActionValidationError naming every missing field."""
        missing = ValidationUtils.missing_fields(values, required)
        if missing:
            raise ActionValidationError(
                f"Missing required parameters: {', '.join(missing)}",
                missing=missing,
            )

    @staticmethod
    def normalize_date(value: Optional[str], date_parser: DateParser) -> Optional[str]:
        """Normalize an optional date argument, raising when it cannot be understood."""
        if value in (None, ""):
            return None
        normalized = date_parser.normalize(value)
        if not normalized:
            raise ActionValidationError(
                f"Invalid date: {value}. Use the format YYYY-MM-DD.",
                missing=["date"],
            )
        return normalized

    @staticmethod
    def normalize_time(value: Optional[str], time_parser: TimeParser) -> Optional[str]:
        """Normalize an optional time argument, raising when it cannot be understood."""
        if value in (None, ""):
            return None
        normalized = time_parser.normalize(value)
        if not normalized:
            raise ActionValidationError(
                f"Invalid time: {value}. Use the format HH:MM.",
                missing=["time"],
            )
        return normalized
