"""
Custom exceptions for the agent actions system.
"""

from .actions import (
    ActionError,
    ActionValidationError,
    ConfigurationError,
    ResolutionError,
    UnknownActionError,
)
from .scheduling import SchedulingError, SlotUnavailableError, AppointmentNotFoundError
from .store import StoreError, StoreConflictError

__all__ = [
    "ActionError",
    "ActionValidationError",
    "ConfigurationError",
    "ResolutionError",
    "UnknownActionError",
    "SchedulingError",
    "SlotUnavailableError",
    "AppointmentNotFoundError",
    "StoreError",
    "StoreConflictError",
]
