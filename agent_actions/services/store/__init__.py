"""
Calendar store module.
"""

from .base import CalendarStore
from .supabase import SupabaseCalendarStore

__all__ = [
    "CalendarStore",
    "SupabaseCalendarStore",
]
