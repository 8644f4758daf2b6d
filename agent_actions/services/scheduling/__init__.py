"""
Scheduling services: slot availability and appointment lifecycle.
"""

from .availability import AvailabilityCalculator
from .appointments import AppointmentManager

__all__ = [
    "AvailabilityCalculator",
    "AppointmentManager",
]
