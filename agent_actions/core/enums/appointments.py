"""
Appointment-related enums.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"

    @classmethod
    def active(cls) -> tuple:
        """Statuses that still hold a slot and can be canceled."""
        return (cls.SCHEDULED, cls.CONFIRMED)
