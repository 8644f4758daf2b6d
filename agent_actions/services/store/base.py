"""
Calendar store interface.

The store is the source of truth for schedules, services, providers, teams,
flows and appointments. Rows are exchanged as plain dicts.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional


class CalendarStore(ABC):
    """Async access to the multi-tenant calendar and resource tables."""

    @abstractmethod
    async def get_active_schedule(self, organization_id: str, schedule_id: str) -> Optional[Dict[str, Any]]:
        """Active schedule ``schedule_id`` owned by ``organization_id``."""

    @abstractmethod
    async def get_schedule(self, schedule_id: str) -> Optional[Dict[str, Any]]:
        """Schedule row regardless of status."""

    @abstractmethod
    async def list_active_services(self, schedule_id: str) -> List[Dict[str, Any]]:
        """Active services of a schedule."""

    @abstractmethod
    async def get_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        """Service row by id."""

    @abstractmethod
    async def list_active_providers(self, schedule_id: str) -> List[Dict[str, Any]]:
        """Active providers of a schedule with their joined ``profiles`` record."""

    @abstractmethod
    async def list_availability(self, provider_ids: Iterable[str], day_of_week: int) -> List[Dict[str, Any]]:
        """Working-hour windows of the given providers on a weekday (0=Sunday)."""

    @abstractmethod
    async def list_booked_appointments(self, schedule_id: str, date: str) -> List[Dict[str, Any]]:
        """Non-canceled appointments of a schedule on a date."""

    @abstractmethod
    async def list_teams(self, organization_id: str) -> List[Dict[str, Any]]:
        """All teams of an organization."""

    @abstractmethod
    async def list_active_flows(self, organization_id: str) -> List[Dict[str, Any]]:
        """Active automation flows of an organization."""

    @abstractmethod
    async def list_customer_appointments(
        self,
        customer_id: str,
        statuses: Iterable[str],
        schedule_id: Optional[str] = None,
        appointment_id: Optional[str] = None,
        date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        A customer's appointments in ``statuses``, ordered by date then start time.

        Rows carry joined ``schedules.title`` and ``schedule_services.title``.
        """

    @abstractmethod
    async def get_customer_appointment(
        self,
        appointment_id: str,
        customer_id: str,
        statuses: Iterable[str],
    ) -> Optional[Dict[str, Any]]:
        """Appointment ``appointment_id`` if it belongs to the customer and is in ``statuses``."""

    @abstractmethod
    async def insert_appointment(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert an appointment and return the stored row."""

    @abstractmethod
    async def update_appointment(self, appointment_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply ``changes`` to an appointment and return the stored row."""
