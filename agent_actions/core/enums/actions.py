"""
Action-related enums.
"""

from enum import Enum


class ActionType(str, Enum):
    """Kinds of system actions an organization can expose to the agent."""

    SCHEDULE = "schedule"
    UPDATE_CUSTOMER = "update_customer"
    UPDATE_CHAT = "update_chat"
    START_FLOW = "start_flow"


class ScheduleOperation(str, Enum):
    """Operations accepted by a schedule tool."""

    CHECK_AVAILABILITY = "checkAvailability"
    CREATE_APPOINTMENT = "createAppointment"
    CHECK_APPOINTMENT = "checkAppointment"
    DELETE_APPOINTMENT = "deleteAppointment"

    @classmethod
    def from_string(cls, value: str) -> "ScheduleOperation":
        """Convert a raw operation name, raising ValueError when unknown."""
        if not value:
            raise ValueError("operation is required")

        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member

        raise ValueError(f"Unsupported operation: {value}")


class ChatStatus(str, Enum):
    """Chat statuses the agent is allowed to set."""

    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    CLOSED = "closed"
    TRANSFERRED = "transferred"


class ResourceType(str, Enum):
    """Resource kinds held in the name -> id cache."""

    SERVICES = "services"
    PROVIDERS = "providers"
    TEAMS = "teams"
    FLOWS = "flows"

    @property
    def is_schedule_scoped(self) -> bool:
        """Services and providers are partitioned by schedule."""
        return self in (ResourceType.SERVICES, ResourceType.PROVIDERS)
