"""
Tests for the PostgREST calendar store.
"""

import json

import httpx
import pytest

from agent_actions.config import StoreConfig
from agent_actions.core.exceptions import StoreConflictError, StoreError
from agent_actions.services.store import SupabaseCalendarStore


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, response=None, status_code=200):
        self.requests = []
        self.response = response if response is not None else []
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.response)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def make_store(handler) -> SupabaseCalendarStore:
    config = StoreConfig(base_url="https://project.supabase.co/", service_key="secret", timeout=5)
    return SupabaseCalendarStore(config, transport=httpx.MockTransport(handler))


class TestSupabaseCalendarStore:
    """Query shapes and error mapping."""

    @pytest.mark.asyncio
    async def test_auth_headers_and_active_schedule_filters(self):
        handler = Recorder([{"id": "sched-1", "title": "Centro"}])
        store = make_store(handler)

        row = await store.get_active_schedule("org-1", "sched-1")

        assert row == {"id": "sched-1", "title": "Centro"}
        request = handler.last
        assert request.url.path == "/rest/v1/schedules"
        assert request.headers["apikey"] == "secret"
        assert request.headers["authorization"] == "Bearer secret"
        assert request.url.params["organization_id"] == "eq.org-1"
        assert request.url.params["id"] == "eq.sched-1"
        assert request.url.params["status"] == "eq.active"
        assert request.url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_missing_row_is_none(self):
        store = make_store(Recorder([]))
        assert await store.get_schedule("nope") is None

    @pytest.mark.asyncio
    async def test_providers_join_profiles(self):
        handler = Recorder()
        await make_store(handler).list_active_providers("sched-1")
        assert "profiles(id,full_name)" in handler.last.url.params["select"]

    @pytest.mark.asyncio
    async def test_availability_filters(self):
        handler = Recorder()
        store = make_store(handler)

        assert await store.list_availability([], 1) == []
        assert handler.requests == []

        await store.list_availability(["p-1", "p-2"], 1)
        assert handler.last.url.params["provider_id"] == "in.(p-1,p-2)"
        assert handler.last.url.params["day_of_week"] == "eq.1"

    @pytest.mark.asyncio
    async def test_booked_appointments_exclude_canceled(self):
        handler = Recorder()
        await make_store(handler).list_booked_appointments("sched-1", "2030-01-07")
        assert handler.last.url.params["status"] == "not.in.(canceled)"
        assert handler.last.url.params["date"] == "eq.2030-01-07"

    @pytest.mark.asyncio
    async def test_customer_appointments_filters_and_order(self):
        handler = Recorder()
        await make_store(handler).list_customer_appointments(
            "cust-1", ["scheduled", "confirmed"], schedule_id="sched-1", date="2030-01-07"
        )
        params = handler.last.url.params
        assert params["status"] == "in.(scheduled,confirmed)"
        assert params["order"] == "date.asc,start_time.asc"
        assert params["schedule_id"] == "eq.sched-1"
        assert params["date"] == "eq.2030-01-07"
        assert "id" not in params

    @pytest.mark.asyncio
    async def test_active_flows(self):
        handler = Recorder()
        await make_store(handler).list_active_flows("org-1")
        assert handler.last.url.params["is_active"] == "eq.true"

    @pytest.mark.asyncio
    async def test_insert_returns_representation(self):
        handler = Recorder([{"id": "apt-1", "start_time": "09:00"}], status_code=201)

        row = await make_store(handler).insert_appointment({"start_time": "09:00"})

        assert row["id"] == "apt-1"
        assert handler.last.method == "POST"
        assert handler.last.headers["prefer"] == "return=representation"
        assert json.loads(handler.last.content) == {"start_time": "09:00"}

    @pytest.mark.asyncio
    async def test_update_targets_one_row(self):
        handler = Recorder([{"id": "apt-1", "status": "canceled"}])

        row = await make_store(handler).update_appointment("apt-1", {"status": "canceled"})

        assert row["status"] == "canceled"
        assert handler.last.method == "PATCH"
        assert handler.last.url.params["id"] == "eq.apt-1"

    @pytest.mark.asyncio
    async def test_conflict_maps_to_store_conflict(self):
        store = make_store(Recorder({"code": "23P01"}, status_code=409))
        with pytest.raises(StoreConflictError) as exc:
            await store.insert_appointment({"start_time": "09:00"})
        assert exc.value.status_code == 409

    @pytest.mark.asyncio
    async def test_http_error_maps_to_store_error(self):
        store = make_store(Recorder({"message": "boom"}, status_code=500))
        with pytest.raises(StoreError) as exc:
            await store.list_teams("org-1")
        assert not isinstance(exc.value, StoreConflictError)
        assert exc.value.status_code == 500

    @pytest.mark.asyncio
    async def test_timeout_maps_to_store_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(StoreError, match="timed out"):
            await make_store(handler).list_teams("org-1")


class TestStoreConfig:
    """Store configuration helpers."""

    def test_rest_url_and_headers(self, settings):
        config = StoreConfig.from_settings(settings)
        assert config.get_rest_url() == "http://store.test/rest/v1"
        assert config.get_headers()["apikey"] == "service-key"
        assert config.is_configured()

    def test_unconfigured(self):
        config = StoreConfig(service_key=None)
        assert "apikey" not in config.get_headers()
        assert not config.is_configured()
