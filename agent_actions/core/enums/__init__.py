"""
Enums for the agent actions system.
"""

from .actions import ActionType, ScheduleOperation, ChatStatus, ResourceType
from .appointments import AppointmentStatus

__all__ = [
    "ActionType",
    "ScheduleOperation",
    "ChatStatus",
    "ResourceType",
    "AppointmentStatus",
]
