"""
Scheduling-related exceptions.
"""

from typing import List, Optional


class SchedulingError(Exception):
    """Base exception for scheduling errors."""
    pass


class SlotUnavailableError(SchedulingError):
    """Exception raised when a requested slot is no longer available."""

    def __init__(self, message: str, available_times: Optional[List[str]] = None):
        self.available_times = list(available_times or [])
        super().__init__(message)


class AppointmentNotFoundError(SchedulingError):
    """Exception raised when an appointment does not exist for the customer."""
    pass
