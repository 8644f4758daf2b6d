"""
Pytest configuration and fixtures.
"""

import copy
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

import pytest
from unittest.mock import Mock

from agent_actions.config import Settings
from agent_actions.container import ActionsContainer
from agent_actions.core.exceptions import StoreError
from agent_actions.core.models import Session
from agent_actions.services import (
    AppointmentManager,
    AvailabilityCalculator,
    ErrorReporter,
    NameResolutionService,
    ResourceCache,
    ToolCatalogGenerator,
    ToolDispatcher,
)
from agent_actions.services.store import CalendarStore

ORG_ID = "org-1"
SCHEDULE_ID = "sched-1"
CUSTOMER_ID = "cust-1"
# 2030-01-07 is a Monday
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"


class InMemoryCalendarStore(CalendarStore):
    """Calendar store over plain lists, counting calls per method."""

    def __init__(self):
        self.schedules: List[Dict[str, Any]] = []
        self.services: List[Dict[str, Any]] = []
        self.providers: List[Dict[str, Any]] = []
        self.availability: List[Dict[str, Any]] = []
        self.appointments: List[Dict[str, Any]] = []
        self.teams: List[Dict[str, Any]] = []
        self.flows: List[Dict[str, Any]] = []
        self.calls: Counter = Counter()
        self.failures: Dict[str, Exception] = {}
        self._next_id = 1

    def _enter(self, method: str) -> None:
        self.calls[method] += 1
        if method in self.failures:
            raise self.failures[method]

    async def get_active_schedule(self, organization_id, schedule_id):
        self._enter("get_active_schedule")
        for row in self.schedules:
            if (
                row["id"] == schedule_id
                and row.get("organization_id") == organization_id
                and row.get("status") == "active"
            ):
                return dict(row)
        return None

    async def get_schedule(self, schedule_id):
        self._enter("get_schedule")
        return next((dict(row) for row in self.schedules if row["id"] == schedule_id), None)

    async def list_active_services(self, schedule_id):
        self._enter("list_active_services")
        return [
            dict(row) for row in self.services
            if row.get("schedule_id") == schedule_id and row.get("status") == "active"
        ]

    async def get_service(self, service_id):
        self._enter("get_service")
        return next((dict(row) for row in self.services if row["id"] == service_id), None)

    async def list_active_providers(self, schedule_id):
        self._enter("list_active_providers")
        return [
            copy.deepcopy(row) for row in self.providers
            if row.get("schedule_id") == schedule_id and row.get("status") == "active"
        ]

    async def list_availability(self, provider_ids: Iterable[str], day_of_week: int):
        self._enter("list_availability")
        ids = set(provider_ids)
        return [
            dict(row) for row in self.availability
            if row["provider_id"] in ids and row["day_of_week"] == day_of_week
        ]

    async def list_booked_appointments(self, schedule_id, date):
        self._enter("list_booked_appointments")
        return [
            copy.deepcopy(row) for row in self.appointments
            if row["schedule_id"] == schedule_id and row["date"] == date and row["status"] != "canceled"
        ]

    async def list_teams(self, organization_id):
        self._enter("list_teams")
        return [dict(row) for row in self.teams if row.get("organization_id") == organization_id]

    async def list_active_flows(self, organization_id):
        self._enter("list_active_flows")
        return [
            dict(row) for row in self.flows
            if row.get("organization_id") == organization_id and row.get("is_active")
        ]

    def _joined(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result = copy.deepcopy(row)
        schedule = next((s for s in self.schedules if s["id"] == row.get("schedule_id")), None)
        service = next((s for s in self.services if s["id"] == row.get("service_id")), None)
        result["schedules"] = {"title": schedule["title"]} if schedule else None
        result["schedule_services"] = {"title": service["title"]} if service else None
        return result

    async def list_customer_appointments(
        self,
        customer_id,
        statuses,
        schedule_id=None,
        appointment_id=None,
        date=None,
    ):
        self._enter("list_customer_appointments")
        statuses = set(statuses)
        rows = [
            self._joined(row) for row in self.appointments
            if row["customer_id"] == customer_id
            and row["status"] in statuses
            and (schedule_id is None or row["schedule_id"] == schedule_id)
            and (appointment_id is None or row["id"] == appointment_id)
            and (date is None or row["date"] == date)
        ]
        return sorted(rows, key=lambda row: (row["date"], row["start_time"]))

    async def get_customer_appointment(self, appointment_id, customer_id, statuses):
        self._enter("get_customer_appointment")
        for row in self.appointments:
            if row["id"] == appointment_id and row["customer_id"] == customer_id and row["status"] in set(statuses):
                return copy.deepcopy(row)
        return None

    async def insert_appointment(self, row):
        self._enter("insert_appointment")
        stored = copy.deepcopy(row)
        stored["id"] = f"apt-{self._next_id}"
        self._next_id += 1
        self.appointments.append(stored)
        return copy.deepcopy(stored)

    async def update_appointment(self, appointment_id, changes):
        self._enter("update_appointment")
        for row in self.appointments:
            if row["id"] == appointment_id:
                row.update(copy.deepcopy(changes))
                return copy.deepcopy(row)
        raise StoreError(f"Appointment {appointment_id} was not updated")

    def get(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        return next((row for row in self.appointments if row["id"] == appointment_id), None)


@pytest.fixture
def settings():
    """Settings isolated from the process environment."""
    return Settings(
        _env_file=None,
        supabase_url="http://store.test",
        supabase_service_key="service-key",
        sentry_dsn=None,
        admin_token=None,
    )


@pytest.fixture
def store():
    """Store seeded with one schedule: service Corte (30 min), provider Ana on Mondays 09:00-10:00."""
    store = InMemoryCalendarStore()
    store.schedules.append({
        "id": SCHEDULE_ID,
        "title": "Barbearia Centro",
        "timezone": "America/Sao_Paulo",
        "organization_id": ORG_ID,
        "status": "active",
    })
    store.services.append({
        "id": "svc-corte",
        "title": "Corte",
        "duration": "00:30",
        "by_arrival_time": False,
        "capacity": 1,
        "schedule_id": SCHEDULE_ID,
        "status": "active",
    })
    store.providers.append({
        "id": "prov-1",
        "profile_id": "profile-ana",
        "schedule_id": SCHEDULE_ID,
        "status": "active",
        "profiles": {"id": "profile-ana", "full_name": "Ana Souza"},
    })
    store.availability.append({
        "provider_id": "prov-1",
        "day_of_week": 1,
        "start_time": "09:00:00",
        "end_time": "10:00:00",
    })
    store.teams.append({"id": "team-sales", "name": "Vendas", "organization_id": ORG_ID})
    store.flows.append({"id": "flow-welcome", "name": "Boas Vindas", "organization_id": ORG_ID, "is_active": True})
    store.flows.append({"id": "flow-old", "name": "Legacy", "organization_id": ORG_ID, "is_active": False})
    return store


@pytest.fixture
def reporter():
    """Error reporter that records instead of sending."""
    return Mock(spec=ErrorReporter)


@pytest.fixture
def cache():
    return ResourceCache(ttl_seconds=3600)


@pytest.fixture
def availability(store):
    return AvailabilityCalculator(store)


@pytest.fixture
def appointments(store, availability, reporter):
    return AppointmentManager(store, availability, reporter=reporter)


@pytest.fixture
def resolver(store, cache):
    return NameResolutionService(store, cache)


@pytest.fixture
def catalog(store, reporter):
    return ToolCatalogGenerator(store, reporter)


@pytest.fixture
def dispatcher(store, resolver, appointments, reporter):
    return ToolDispatcher(store, resolver, appointments, reporter)


@pytest.fixture
def container(settings, store, cache, reporter):
    return ActionsContainer(settings=settings, store=store, cache=cache, reporter=reporter)


@pytest.fixture
def session():
    return Session(organization_id=ORG_ID, customer_id=CUSTOMER_ID, chat_id="chat-1")


@pytest.fixture
def configured_actions():
    """One action of each kind, as stored by configuration management."""
    return [
        {
            "id": "a1",
            "name": "Agendar Consulta",
            "description": "Agenda cortes",
            "type": "schedule",
            "config": {"schedule": SCHEDULE_ID},
        },
        {"id": "a2", "name": "Atualizar Cliente", "type": "update_customer", "config": {}},
        {"id": "a3", "name": "update_chat", "type": "update_chat", "config": None},
        {"id": "a4", "name": "Iniciar Fluxo", "type": "start_flow", "config": {}},
    ]
