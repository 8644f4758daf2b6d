"""
Slot availability calculation.

Candidate start times are generated every ``slot_interval_minutes`` inside each
provider working-hour window, up to ``window_end - duration``. A candidate is
occupied when any non-canceled appointment of the schedule on that date
satisfies ``start <= candidate < end``, whatever its provider.
"""

from typing import List, Optional

from ...core.models import Appointment, AvailabilityWindow, OperationResult, ScheduleService
from ...core.enums import AppointmentStatus
from ...utils.date import day_of_week, format_display_date, minutes_to_time
from ...utils.logging import get_logger
from ..store import CalendarStore

logger = get_logger(__name__)

DEFAULT_SLOT_INTERVAL = 30
DEFAULT_DURATION = 30


class AvailabilityCalculator:
    """Computes open time slots for a schedule from working hours and bookings."""

    def __init__(
        self,
        store: CalendarStore,
        slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL,
        default_duration_minutes: int = DEFAULT_DURATION,
        display_date_format: str = "%d/%m/%Y",
    ):
        self.store = store
        self.slot_interval = slot_interval_minutes
        self.default_duration = default_duration_minutes
        self.display_date_format = display_date_format

    async def compute_slots(
        self,
        schedule_id: str,
        date: str,
        service_id: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        by_arrival_time: bool = False,
    ) -> List[str]:
        """
        Open start times (``HH:MM``, ascending) for ``date``.

        ``by_arrival_time`` is accepted for callers that carry it but does not
        change slot generation.
        """
        duration = duration_minutes or self.default_duration

        providers = await self.store.list_active_providers(schedule_id)
        if not providers:
            logger.info("[availability] no active providers for schedule %s", schedule_id)
            return []

        weekday = day_of_week(date)
        rows = await self.store.list_availability([p["id"] for p in providers], weekday)
        windows = [AvailabilityWindow.model_validate(row) for row in rows or []]
        if not windows:
            logger.info("[availability] no working hours for schedule %s on weekday %d", schedule_id, weekday)
            return []

        booked = [
            Appointment.model_validate(row)
            for row in await self.store.list_booked_appointments(schedule_id, date) or []
        ]
        booked = [apt for apt in booked if apt.status != AppointmentStatus.CANCELED]

        open_minutes = set()
        for window in windows:
            slot = window.start_minutes
            while slot <= window.end_minutes - duration:
                if not any(apt.covers(slot) for apt in booked):
                    open_minutes.add(slot)
                slot += self.slot_interval

        slots = [minutes_to_time(minute) for minute in sorted(open_minutes)]
        logger.info(
            "[availability] schedule %s on %s (service %s, %d min): %d slots",
            schedule_id, date, service_id, duration, len(slots),
        )
        return slots

    async def load_service(self, service_id: Optional[str]) -> Optional[ScheduleService]:
        """Service row as a model, or None."""
        if not service_id:
            return None
        row = await self.store.get_service(service_id)
        return ScheduleService.model_validate(row) if row else None

    async def check_availability(
        self,
        schedule_id: str,
        date: str,
        time: Optional[str] = None,
        service_id: Optional[str] = None,
    ) -> OperationResult:
        """
        Report open slots on ``date``.

        Without ``time`` the full list and a count message are returned; with
        ``time`` the result also says whether that exact slot is open.
        """
        schedule = await self.store.get_schedule(schedule_id)
        if not schedule:
            return OperationResult.failure(f"Schedule not found with ID {schedule_id}")

        service = await self.load_service(service_id)
        duration = service.duration_minutes(self.default_duration) if service else self.default_duration
        by_arrival_time = service.by_arrival_time if service else False

        slots = await self.compute_slots(schedule_id, date, service_id, duration, by_arrival_time)
        formatted_date = format_display_date(date, self.display_date_format)

        if not time:
            return OperationResult(
                success=True,
                available=bool(slots),
                date=date,
                formatted_date=formatted_date,
                available_times=slots,
                message=(
                    f"{len(slots)} time slots available on {formatted_date}"
                    if slots
                    else f"No available slots on {formatted_date}"
                ),
            )

        is_available = time in slots
        return OperationResult(
            success=True,
            available=is_available,
            date=date,
            formatted_date=formatted_date,
            requested_time=time,
            available_times=slots,
            message=(
                f"Slot available on {formatted_date} at {time}"
                if is_available
                else f"No availability on {formatted_date} at {time}"
            ),
        )
