"""
Service layer for the agent actions system.
"""

from .catalog import ToolCatalogGenerator
from .dispatcher import ActionExecutors, ToolDispatcher
from .reporting import ErrorReporter, init_error_tracking
from .resolution import NameResolutionService, ResourceCache
from .scheduling import AppointmentManager, AvailabilityCalculator
from .store import CalendarStore, SupabaseCalendarStore

__all__ = [
    "ToolCatalogGenerator",
    "ActionExecutors",
    "ToolDispatcher",
    "ErrorReporter",
    "init_error_tracking",
    "NameResolutionService",
    "ResourceCache",
    "AppointmentManager",
    "AvailabilityCalculator",
    "CalendarStore",
    "SupabaseCalendarStore",
]
