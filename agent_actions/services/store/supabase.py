"""
PostgREST-backed calendar store.
"""

from typing import Any, Dict, Iterable, List, Optional
import httpx

from ...config import StoreConfig
from ...core.enums import AppointmentStatus
from ...core.exceptions import StoreConflictError, StoreError
from ...utils.logging import get_logger
from .base import CalendarStore

logger = get_logger(__name__)


def _in(values: Iterable[Any]) -> str:
    return "in.(" + ",".join(str(v) for v in values) + ")"


class SupabaseCalendarStore(CalendarStore):
    """Calendar store speaking the Supabase REST (PostgREST) dialect over httpx."""

    def __init__(self, config: StoreConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.timeout = config.timeout
        self._transport = transport

    async def _make_request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make HTTP request with error handling."""
        url = f"{self.config.get_rest_url()}/{table}"
        request_headers = {**self.config.get_headers(), **(headers or {})}
        logger.debug("[store] %s %s %s", method, table, params or {})
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json,
                    headers=request_headers,
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()
        except httpx.TimeoutException:
            raise StoreError(f"Request to {table} timed out")
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code == 409:
                raise StoreConflictError(f"Conflict writing {table}: {e.response.text}", status_code)
            raise StoreError(f"HTTP error {status_code} on {table}", status_code)
        except Exception as e:
            raise StoreError(f"Request to {table} failed: {str(e)}")

    async def _select(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        result = await self._make_request("GET", table, params=params)
        return result or []

    async def _select_one(self, table: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self._select(table, {**params, "limit": 1})
        return rows[0] if rows else None

    async def get_active_schedule(self, organization_id: str, schedule_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one("schedules", {
            "select": "id,title,timezone,organization_id,status",
            "organization_id": f"eq.{organization_id}",
            "id": f"eq.{schedule_id}",
            "status": "eq.active",
        })

    async def get_schedule(self, schedule_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one("schedules", {
            "select": "id,title,timezone,organization_id,status",
            "id": f"eq.{schedule_id}",
        })

    async def list_active_services(self, schedule_id: str) -> List[Dict[str, Any]]:
        return await self._select("schedule_services", {
            "select": "id,title,duration,by_arrival_time,capacity,schedule_id,status",
            "schedule_id": f"eq.{schedule_id}",
            "status": "eq.active",
        })

    async def get_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        return await self._select_one("schedule_services", {
            "select": "id,title,duration,by_arrival_time,capacity,schedule_id,status",
            "id": f"eq.{service_id}",
        })

    async def list_active_providers(self, schedule_id: str) -> List[Dict[str, Any]]:
        return await self._select("schedule_providers", {
            "select": "id,profile_id,schedule_id,status,profiles(id,full_name)",
            "schedule_id": f"eq.{schedule_id}",
            "status": "eq.active",
        })

    async def list_availability(self, provider_ids: Iterable[str], day_of_week: int) -> List[Dict[str, Any]]:
        provider_ids = list(provider_ids)
        if not provider_ids:
            return []
        return await self._select("schedule_availability", {
            "select": "provider_id,day_of_week,start_time,end_time",
            "provider_id": _in(provider_ids),
            "day_of_week": f"eq.{day_of_week}",
        })

    async def list_booked_appointments(self, schedule_id: str, date: str) -> List[Dict[str, Any]]:
        return await self._select("appointments", {
            "select": "id,provider_id,start_time,end_time,status",
            "schedule_id": f"eq.{schedule_id}",
            "date": f"eq.{date}",
            "status": f"not.{_in([AppointmentStatus.CANCELED.value])}",
        })

    async def list_teams(self, organization_id: str) -> List[Dict[str, Any]]:
        return await self._select("teams", {
            "select": "id,name",
            "organization_id": f"eq.{organization_id}",
        })

    async def list_active_flows(self, organization_id: str) -> List[Dict[str, Any]]:
        return await self._select("flows", {
            "select": "id,name",
            "organization_id": f"eq.{organization_id}",
            "is_active": "eq.true",
        })

    async def list_customer_appointments(
        self,
        customer_id: str,
        statuses: Iterable[str],
        schedule_id: Optional[str] = None,
        appointment_id: Optional[str] = None,
        date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "select": (
                "id,date,start_time,end_time,status,schedule_id,service_id,metadata,"
                "schedules(title),schedule_services(title)"
            ),
            "customer_id": f"eq.{customer_id}",
            "status": _in(statuses),
            "order": "date.asc,start_time.asc",
        }
        if schedule_id:
            params["schedule_id"] = f"eq.{schedule_id}"
        if appointment_id:
            params["id"] = f"eq.{appointment_id}"
        if date:
            params["date"] = f"eq.{date}"
        return await self._select("appointments", params)

    async def get_customer_appointment(
        self,
        appointment_id: str,
        customer_id: str,
        statuses: Iterable[str],
    ) -> Optional[Dict[str, Any]]:
        return await self._select_one("appointments", {
            "select": "*",
            "id": f"eq.{appointment_id}",
            "customer_id": f"eq.{customer_id}",
            "status": _in(statuses),
        })

    async def insert_appointment(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._make_request(
            "POST",
            "appointments",
            json=row,
            headers={"Prefer": "return=representation"},
        )
        if not result:
            raise StoreError("Insert into appointments returned no row")
        return result[0] if isinstance(result, list) else result

    async def update_appointment(self, appointment_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._make_request(
            "PATCH",
            "appointments",
            params={"id": f"eq.{appointment_id}"},
            json=changes,
            headers={"Prefer": "return=representation"},
        )
        if not result:
            raise StoreError(f"Appointment {appointment_id} was not updated")
        return result[0] if isinstance(result, list) else result
