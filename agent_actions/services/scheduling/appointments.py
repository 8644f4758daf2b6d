"""
Appointment booking, lookup and cancellation.

Lifecycle: ``scheduled``/``confirmed`` -> ``canceled`` (terminal). Rows are
never deleted; cancellation stamps the metadata with when and how it happened.
"""

from typing import Any, Dict, List, Optional

from ...core.enums import AppointmentStatus, ScheduleOperation
from ...core.exceptions import (
    ActionValidationError,
    AppointmentNotFoundError,
    SchedulingError,
    SlotUnavailableError,
    StoreConflictError,
)
from ...core.models import (
    Appointment,
    OperationResult,
    Schedule,
    ScheduleProvider,
    ScheduleRequest,
    Session,
    ToolCallResult,
)
from ...utils.date import DateParser, TimeParser, format_display_date, iso_now, minutes_to_time, time_to_minutes
from ...utils.logging import get_logger
from ...utils.text import TextProcessor
from ...utils.validation import ValidationUtils
from ..reporting import ErrorReporter
from ..store import CalendarStore
from .availability import AvailabilityCalculator

logger = get_logger(__name__)

SOURCE_TAG = "agent_ia_action"
DEFAULT_TIMEZONE = "America/Sao_Paulo"
ACTIVE_STATUSES = [status.value for status in AppointmentStatus.active()]


class AppointmentManager:
    """Executes scheduling operations against the calendar store."""

    def __init__(
        self,
        store: CalendarStore,
        availability: AvailabilityCalculator,
        reporter: Optional[ErrorReporter] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
        source_tag: str = SOURCE_TAG,
    ):
        self.store = store
        self.availability = availability
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.default_timezone = default_timezone
        self.source_tag = source_tag
        self.time_parser = TimeParser()

    @property
    def display_date_format(self) -> str:
        return self.availability.display_date_format

    def _format_date(self, value: Optional[str]) -> Optional[str]:
        return format_display_date(value, self.display_date_format)

    # ── Entry point from the dispatcher ─────────────────

    async def process(self, request: ScheduleRequest, session: Session) -> ToolCallResult:
        """
        Run one schedule operation and wrap it in a tool-call envelope.

        The envelope carries ``status``, ``message``, ``operation`` and a
        ``data`` dict with the operation fields plus schedule/service context.
        """
        if not request.operation:
            return ToolCallResult.error("Operation parameter is required for schedule actions.")
        try:
            operation = ScheduleOperation.from_string(request.operation)
        except ValueError:
            return ToolCallResult.error(f"Unsupported operation: {request.operation}")

        try:
            row = await self.store.get_schedule(request.schedule_id)
            schedule = Schedule.model_validate(row) if row else None
            timezone = (schedule and schedule.timezone) or self.default_timezone
            schedule_name = (schedule and schedule.title) or "Schedule"

            date = ValidationUtils.normalize_date(request.date, DateParser(timezone))
            time = ValidationUtils.normalize_time(request.time, self.time_parser)

            service_name = "Service not specified"
            service = await self.availability.load_service(request.service_id)
            if service and service.title:
                service_name = service.title

            logger.info(
                "[appointments] %s schedule=%s date=%s time=%s service=%s",
                operation.value, request.schedule_id, date, time, request.service_id,
            )

            result = await self._run(operation, request, session, date, time)
        except ActionValidationError as e:
            return ToolCallResult.error(str(e), operation=request.operation)
        except Exception as e:
            logger.exception("[appointments] schedule action failed")
            self.reporter.capture(
                e,
                component="appointments",
                organization_id=session.organization_id,
                schedule_id=request.schedule_id,
                operation=request.operation,
            )
            return ToolCallResult.error(f"Error processing schedule action: {e}")

        fields = result.fields()
        return ToolCallResult(
            status="success" if result.success else "error",
            message=result.message,
            operation=operation.value,
            data={
                **fields,
                "service_name": fields.get("service_name") or service_name,
                "schedule_name": schedule_name,
                "appointment_date": date,
                "appointment_time": time,
                "timezone": timezone,
            },
        )

    async def _run(
        self,
        operation: ScheduleOperation,
        request: ScheduleRequest,
        session: Session,
        date: Optional[str],
        time: Optional[str],
    ) -> OperationResult:
        if operation is ScheduleOperation.CHECK_AVAILABILITY:
            ValidationUtils.require({"date": date}, ["date"])
            return await self.check_availability(request.schedule_id, date, time, request.service_id)

        if operation is ScheduleOperation.CREATE_APPOINTMENT:
            ValidationUtils.require(
                {"date": date, "time": time, "service_id": request.service_id},
                ["date", "time", "service_id"],
            )
            return await self.create_appointment(
                request.schedule_id,
                session.customer_id,
                date,
                time,
                request.service_id,
                notes=request.notes,
                provider_id=request.provider_id,
                chat_id=session.chat_id,
            )

        if operation is ScheduleOperation.CHECK_APPOINTMENT:
            return await self.check_appointment(
                session.customer_id,
                appointment_id=request.appointment_id,
                schedule_id=request.schedule_id,
            )

        if not request.appointment_id and not date:
            raise ActionValidationError(
                "Either appointment_id or date is required to cancel appointments.",
                missing=["appointment_id", "date"],
            )
        return await self.delete_appointment(
            session.customer_id,
            appointment_id=request.appointment_id,
            date=date,
            schedule_id=request.schedule_id,
        )

    # ── Operations ──────────────────────────────────────

    async def check_availability(
        self,
        schedule_id: str,
        date: str,
        time: Optional[str] = None,
        service_id: Optional[str] = None,
    ) -> OperationResult:
        """Open slots on a date, optionally checking one specific time."""
        try:
            return await self.availability.check_availability(schedule_id, date, time, service_id)
        except Exception as e:
            logger.exception("[appointments] availability check failed")
            self.reporter.capture(e, component="availability", schedule_id=schedule_id, date=date)
            return OperationResult.failure(f"Error checking availability: {e}")

    async def create_appointment(
        self,
        schedule_id: str,
        customer_id: Optional[str],
        date: str,
        time: str,
        service_id: str,
        notes: Optional[str] = None,
        provider_id: Optional[str] = None,
        chat_id: Optional[str] = None,
    ) -> OperationResult:
        """
        Book ``time`` on ``date`` after re-checking availability.

        Refuses with the currently open times when the slot has been taken.
        Without a provider, the first active provider of the schedule is used.
        """
        try:
            return await self._create(
                schedule_id, customer_id, date, time, service_id, notes, provider_id, chat_id
            )
        except SlotUnavailableError as e:
            logger.info("[appointments] slot %s %s refused: %s", date, time, e)
            return OperationResult.failure(str(e), available_times=e.available_times)
        except (SchedulingError, ActionValidationError) as e:
            return OperationResult.failure(str(e))
        except Exception as e:
            logger.exception("[appointments] create failed")
            self.reporter.capture(e, component="appointments", schedule_id=schedule_id, date=date, time=time)
            return OperationResult.failure(f"Error creating appointment: {e}")

    async def _create(
        self,
        schedule_id: str,
        customer_id: Optional[str],
        date: str,
        time: str,
        service_id: str,
        notes: Optional[str],
        provider_id: Optional[str],
        chat_id: Optional[str],
    ) -> OperationResult:
        ValidationUtils.require({"customer_id": customer_id}, ["customer_id"])

        service = await self.availability.load_service(service_id)
        if not service:
            return OperationResult.failure(f"Service not found with ID {service_id}")
        if service.schedule_id != schedule_id:
            raise SchedulingError(f"Service {service_id} is not offered on this schedule")

        check = await self.availability.check_availability(schedule_id, date, time, service_id)
        if not check.success:
            return check
        if not check.available:
            raise SlotUnavailableError(
                "The requested time slot is not available. "
                f"Available times: {', '.join(check.available_times)}",
                check.available_times,
            )

        duration = service.duration_minutes(self.availability.default_duration)
        end_time = TimeParser.add_minutes(time, duration)

        selected_provider = await self._select_provider(schedule_id, provider_id)
        await self._guard_overlap(schedule_id, date, time, end_time, selected_provider, service_id)

        row = {
            "schedule_id": schedule_id,
            "customer_id": customer_id,
            "provider_id": selected_provider,
            "service_id": service_id,
            "date": date,
            "start_time": time,
            "end_time": end_time,
            "status": AppointmentStatus.SCHEDULED.value,
            "notes": TextProcessor.sanitize_text(notes) or None,
            "chat_id": chat_id,
            "metadata": {
                "created_via": self.source_tag,
                "creation_date": iso_now(),
            },
        }

        try:
            appointment = await self.store.insert_appointment(row)
        except StoreConflictError:
            slots = await self.availability.compute_slots(schedule_id, date, service_id, duration)
            raise SlotUnavailableError(
                "The requested time slot was just booked. "
                f"Available times: {', '.join(slots)}",
                slots,
            )

        formatted_date = self._format_date(date)
        logger.info(
            "[appointments] booked %s on %s %s-%s (provider %s)",
            appointment.get("id"), date, time, end_time, selected_provider,
        )
        return OperationResult(
            success=True,
            appointment_id=appointment.get("id"),
            date=date,
            formatted_date=formatted_date,
            time=time,
            end_time=end_time,
            service_id=service_id,
            service_name=service.title,
            provider_id=selected_provider,
            message=f"Appointment successfully created for {formatted_date} at {time}",
        )

    async def _select_provider(self, schedule_id: str, provider_id: Optional[str]) -> Optional[str]:
        """Requested provider if active on the schedule, else the first active one."""
        providers = [
            ScheduleProvider.model_validate(row)
            for row in await self.store.list_active_providers(schedule_id) or []
        ]
        if provider_id:
            if not any(provider_id in (p.profile_id, p.id) for p in providers):
                raise SchedulingError(f"Provider {provider_id} is not active on this schedule")
            return provider_id
        if not providers:
            return None
        return providers[0].profile_id or providers[0].id

    async def _guard_overlap(
        self,
        schedule_id: str,
        date: str,
        start_time: str,
        end_time: str,
        provider_id: Optional[str],
        service_id: str,
    ) -> None:
        """Refuse a booking whose interval overlaps another booking of the same provider."""
        if not provider_id:
            return

        start = TimeParser.add_minutes(start_time, 0)
        booked = [
            Appointment.model_validate(row)
            for row in await self.store.list_booked_appointments(schedule_id, date) or []
        ]
        new = Appointment(start_time=start, end_time=end_time)
        clash = any(
            apt.provider_id == provider_id
            and apt.status != AppointmentStatus.CANCELED
            and apt.overlaps(new.start_minutes, new.end_minutes)
            for apt in booked
        )
        if clash:
            duration = new.end_minutes - new.start_minutes
            slots = await self.availability.compute_slots(schedule_id, date, service_id, duration)
            slots = [slot for slot in slots if slot != start]
            raise SlotUnavailableError(
                "The requested time overlaps another appointment. "
                f"Available times: {', '.join(slots)}",
                slots,
            )

    async def check_appointment(
        self,
        customer_id: Optional[str],
        appointment_id: Optional[str] = None,
        schedule_id: Optional[str] = None,
    ) -> OperationResult:
        """The customer's scheduled/confirmed appointments, earliest first."""
        try:
            ValidationUtils.require({"customer_id": customer_id}, ["customer_id"])
            rows = await self.store.list_customer_appointments(
                customer_id,
                ACTIVE_STATUSES,
                schedule_id=schedule_id,
                appointment_id=appointment_id,
            )
        except ActionValidationError as e:
            return OperationResult.failure(str(e))
        except Exception as e:
            logger.exception("[appointments] lookup failed")
            self.reporter.capture(e, component="appointments", customer_id=customer_id)
            return OperationResult.failure(f"Error checking appointments: {e}")

        appointments = [self._present(row) for row in rows or []]
        return OperationResult(
            success=True,
            appointments=appointments,
            count=len(appointments),
            message=(
                f"Found {len(appointments)} appointment(s)"
                if appointments
                else "No appointments found"
            ),
        )

    def _present(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": row.get("id"),
            "date": row.get("date"),
            "formatted_date": self._format_date(row.get("date")),
            "time": _hhmm(row.get("start_time")),
            "end_time": _hhmm(row.get("end_time")),
            "status": row.get("status"),
            "schedule_name": (row.get("schedules") or {}).get("title") or "Schedule not specified",
            "service_name": (row.get("schedule_services") or {}).get("title") or "Service not specified",
        }

    async def delete_appointment(
        self,
        customer_id: Optional[str],
        appointment_id: Optional[str] = None,
        date: Optional[str] = None,
        schedule_id: Optional[str] = None,
    ) -> OperationResult:
        """
        Cancel by id, or cancel every active appointment of the customer on a date.

        Cancellation by date tries each row independently and reports how many
        succeeded.
        """
        try:
            ValidationUtils.require({"customer_id": customer_id}, ["customer_id"])
            if appointment_id:
                return await self._cancel_one(customer_id, appointment_id)
            if date:
                return await self._cancel_by_date(customer_id, date, schedule_id)
            return OperationResult.failure("Either appointment_id or date is required to cancel appointments")
        except (SchedulingError, ActionValidationError) as e:
            return OperationResult.failure(str(e))
        except Exception as e:
            logger.exception("[appointments] cancel failed")
            self.reporter.capture(e, component="appointments", customer_id=customer_id, appointment_id=appointment_id)
            return OperationResult.failure(f"Error canceling appointment: {e}")

    def _cancellation(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "status": AppointmentStatus.CANCELED.value,
            "metadata": {
                **(row.get("metadata") or {}),
                "canceled_at": iso_now(),
                "canceled_via": self.source_tag,
            },
        }

    async def _cancel_one(self, customer_id: str, appointment_id: str) -> OperationResult:
        row = await self.store.get_customer_appointment(appointment_id, customer_id, ACTIVE_STATUSES)
        if not row:
            raise AppointmentNotFoundError(
                f"Appointment not found with ID {appointment_id} or it doesn't belong to this customer"
            )

        await self.store.update_appointment(appointment_id, self._cancellation(row))

        formatted_date = self._format_date(row.get("date"))
        time = _hhmm(row.get("start_time"))
        logger.info("[appointments] canceled %s", appointment_id)
        return OperationResult(
            success=True,
            appointment_id=appointment_id,
            date=row.get("date"),
            formatted_date=formatted_date,
            time=time,
            message=f"Appointment successfully canceled for {formatted_date} at {time}",
        )

    async def _cancel_by_date(self, customer_id: str, date: str, schedule_id: Optional[str]) -> OperationResult:
        rows = await self.store.list_customer_appointments(
            customer_id,
            ACTIVE_STATUSES,
            schedule_id=schedule_id,
            date=date,
        )
        if not rows:
            return OperationResult.failure(f"No appointments found for date {date}")

        canceled: List[Dict[str, Any]] = []
        for row in rows:
            try:
                await self.store.update_appointment(row["id"], self._cancellation(row))
            except Exception as e:
                logger.error("[appointments] could not cancel %s: %s", row.get("id"), e)
                self.reporter.capture(e, component="appointments", appointment_id=row.get("id"))
                continue
            canceled.append({"id": row["id"], "date": row.get("date"), "time": _hhmm(row.get("start_time"))})

        formatted_date = self._format_date(date)
        logger.info("[appointments] canceled %d/%d on %s for %s", len(canceled), len(rows), date, customer_id)
        return OperationResult(
            success=True,
            canceled_count=len(canceled),
            canceled_appointments=canceled,
            date=date,
            formatted_date=formatted_date,
            message=f"Successfully canceled {len(canceled)} appointment(s) for {formatted_date}",
        )


def _hhmm(value: Optional[str]) -> Optional[str]:
    """Stored ``HH:MM:SS`` as ``HH:MM``."""
    return minutes_to_time(time_to_minutes(value)) if value else None
