"""
Scheduling data models.

Rows come from the calendar store as plain dicts; these models give the
availability and appointment logic typed access to the fields it reads.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums import AppointmentStatus
from ...utils.date import parse_duration_minutes, time_to_minutes


class Schedule(BaseModel):
    """A calendar unit an organization books against."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: Optional[str] = None
    timezone: Optional[str] = None
    organization_id: Optional[str] = None
    status: Optional[str] = None


class ScheduleService(BaseModel):
    """A bookable offering with a fixed duration."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    duration: Optional[str] = None
    by_arrival_time: bool = False
    capacity: Optional[int] = None
    schedule_id: Optional[str] = None
    status: Optional[str] = None

    @field_validator("by_arrival_time", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> bool:
        return bool(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_as_text(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    def duration_minutes(self, default: int = 30) -> int:
        """Service duration in minutes."""
        return parse_duration_minutes(self.duration, default)


class ScheduleProvider(BaseModel):
    """A staff member attached to a schedule, joined to a profile."""

    model_config = ConfigDict(extra="ignore")

    id: str
    profile_id: Optional[str] = None
    schedule_id: Optional[str] = None
    status: Optional[str] = None
    profiles: Optional[Dict[str, Any]] = None

    @property
    def display_name(self) -> Optional[str]:
        return (self.profiles or {}).get("full_name")


class AvailabilityWindow(BaseModel):
    """Weekly working-hour window of a provider."""

    model_config = ConfigDict(extra="ignore")

    provider_id: Optional[str] = None
    day_of_week: Optional[int] = None
    start_time: str
    end_time: str

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)


class Appointment(BaseModel):
    """A booking in the shared calendar store."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    schedule_id: Optional[str] = None
    customer_id: Optional[str] = None
    provider_id: Optional[str] = None
    service_id: Optional[str] = None
    date: Optional[str] = None
    start_time: str
    end_time: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None
    chat_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Dict[str, Any]:
        return value or {}

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    def covers(self, minute: int) -> bool:
        """Whether the half-open interval [start, end) contains ``minute``."""
        return self.start_minutes <= minute < self.end_minutes

    def overlaps(self, start: int, end: int) -> bool:
        """Whether [start, end) intersects this appointment's interval."""
        return self.start_minutes < end and start < self.end_minutes


class ScheduleRequest(BaseModel):
    """Internal payload the dispatcher forwards to the appointment manager."""

    model_config = ConfigDict(extra="forbid")

    schedule_id: str
    operation: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    service_id: Optional[str] = None
    provider_id: Optional[str] = None
    appointment_id: Optional[str] = None
    notes: Optional[str] = None
