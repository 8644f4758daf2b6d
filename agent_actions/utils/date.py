"""
Date and time parsing utilities.
"""

import re
from datetime import date as date_cls, datetime, timedelta
from typing import Optional, Union
import pytz
from dateparser import parse as parse_date

from ..config import get_settings

_TIME_RE = re.compile(r"^\s*(\d{1,2})(?::|h)(\d{2})?(?::(\d{2}))?\s*(?:h)?\s*$", re.IGNORECASE)


def time_to_minutes(value: Optional[str]) -> int:
    """Convert ``HH:MM`` (or ``HH:MM:SS``) to minutes since midnight."""
    if not value:
        return 0
    parts = str(value).strip().split(":")
    hours = int(parts[0])
    minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_duration_minutes(value: Union[str, int, None], default: int = 30) -> int:
    """
    Parse a service duration stored as ``HH:MM`` (hours:minutes).

    Integers are taken as minutes. Missing or malformed values fall back to
    ``default``.
    """
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    try:
        parts = str(value).strip().split(":")
        if len(parts) == 1:
            return int(parts[0])
        return int(parts[0]) * 60 + int(parts[1])
    except (ValueError, IndexError):
        return default


def day_of_week(value: Union[str, date_cls]) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    if isinstance(value, str):
        value = datetime.strptime(value, "%Y-%m-%d").date()
    return (value.weekday() + 1) % 7


def format_display_date(value: Optional[str], fmt: str = "%d/%m/%Y") -> Optional[str]:
    """Format an ISO date for end-user display; unparseable input is returned unchanged."""
    if not value:
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").strftime(fmt)
    except ValueError:
        return value


class DateParser:
    """Normalizes dates supplied by the agent to ``YYYY-MM-DD``."""

    def __init__(self, timezone: Optional[str] = None):
        self.settings = get_settings()
        self.tz = pytz.timezone(timezone or self.settings.default_timezone)

    def normalize(self, text: Optional[str]) -> Optional[str]:
        """
        Normalize a date argument.

        ISO dates pass through untouched. Anything else goes through natural
        language parsing, preferring future dates.

        Args:
            text: Date string from the tool call

        Returns:
            Date in YYYY-MM-DD format or None if parsing fails
        """
        if not text or not isinstance(text, str):
            return None

        candidate = text.strip()
        if self.is_valid_iso_date(candidate):
            return candidate

        return self.parse_natural_date(candidate)

    def parse_natural_date(self, text: str) -> Optional[str]:
        """Parse natural language dates like 'next monday' or 'amanhã'."""
        try:
            parsed = parse_date(
                text,
                settings={
                    "PREFER_DATES_FROM": "future",
                    "TIMEZONE": self.tz.zone,
                    "RETURN_AS_TIMEZONE_AWARE": False,
                },
            )
        except Exception:
            return None

        if not parsed:
            return None

        return parsed.strftime("%Y-%m-%d")

    @staticmethod
    def is_valid_iso_date(date_str: str) -> bool:
        """Check if string is a valid ISO date (YYYY-MM-DD)."""
        try:
            datetime.strptime(date_str, "%Y-%m-%d")
            return True
        except (TypeError, ValueError):
            return False


class TimeParser:
    """Normalizes times supplied by the agent to ``HH:MM``."""

    def normalize(self, text: Optional[str]) -> Optional[str]:
        """
        Normalize a time argument.

        Accepts ``9:00``, ``09:00``, ``09:00:00``, ``9h`` and ``9h30``.

        Returns:
            Time in HH:MM format or None if parsing fails
        """
        if not text or not isinstance(text, str):
            return None

        match = _TIME_RE.match(text)
        if not match:
            return None

        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if hours > 23 or minutes > 59:
            return None

        return f"{hours:02d}:{minutes:02d}"

    @staticmethod
    def is_valid_time_format(time_str: str) -> bool:
        """Check if string is a valid time format (HH:MM)."""
        try:
            datetime.strptime(time_str, "%H:%M")
            return True
        except (TypeError, ValueError):
            return False

    @staticmethod
    def add_minutes(time_str: str, minutes: int) -> str:
        """Add minutes to an ``HH:MM`` time."""
        return minutes_to_time(time_to_minutes(time_str) + minutes)


def iso_now() -> str:
    """Current UTC timestamp in ISO format."""
    return datetime.now(pytz.utc).isoformat()


def next_weekday(start: date_cls, weekday: int) -> date_cls:
    """Next date (strictly after ``start``) falling on ``weekday`` (0=Sunday)."""
    days_ahead = (weekday - day_of_week(start) + 7) % 7 or 7
    return start + timedelta(days=days_ahead)
