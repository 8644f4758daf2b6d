"""
Tests for the admin HTTP surface.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from agent_actions.api import create_app
from agent_actions.container import ActionsContainer

from conftest import ORG_ID, SCHEDULE_ID


def client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
def app(container):
    return create_app(container)


@pytest.fixture
def filled_cache(cache):
    cache.set(ORG_ID, "services", {"corte": "svc-corte"}, sub_key=SCHEDULE_ID)
    cache.set(ORG_ID, "services", {"barba": "svc-barba"}, sub_key="sched-2")
    cache.set(ORG_ID, "teams", {"vendas": "team-sales"})
    cache.set("org-2", "flows", {"boas vindas": "flow-1"})
    return cache


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, app, settings):
        async with client_for(app) as ac:
            resp = await ac.get("/health/")
            live = await ac.get("/health/live")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["version"] == settings.app_version
        assert body["store_configured"] is True
        assert body["cache"] == {"entries": 0, "valid": 0, "organizations": 0}
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert live.json() == {"status": "alive"}

    @pytest.mark.asyncio
    async def test_health_reports_shared_cache(self, app, filled_cache):
        async with client_for(app) as ac:
            resp = await ac.get("/health/")
        assert resp.json()["cache"] == {"entries": 4, "valid": 4, "organizations": 2}

    @pytest.mark.asyncio
    async def test_not_ready_without_store_key(self, settings, store, cache, reporter):
        bare = settings.model_copy(update={"supabase_service_key": None})
        app = create_app(ActionsContainer(settings=bare, store=store, cache=cache, reporter=reporter))

        async with client_for(app) as ac:
            resp = await ac.get("/health/ready")

        assert resp.status_code == 503
        assert resp.json()["status"] == "not_ready"


class TestCacheAdmin:

    @pytest.mark.asyncio
    async def test_invalidate_schedule_partition(self, app, filled_cache):
        async with client_for(app) as ac:
            resp = await ac.delete(f"/cache/{ORG_ID}/services", params={"sub_key": SCHEDULE_ID})

        assert resp.status_code == 200
        assert resp.json()["removed"] == 1
        assert filled_cache.get(ORG_ID, "services", SCHEDULE_ID) is None
        assert filled_cache.get(ORG_ID, "services", "sched-2") is not None

    @pytest.mark.asyncio
    async def test_invalidate_organization(self, app, filled_cache):
        async with client_for(app) as ac:
            resp = await ac.delete(f"/cache/{ORG_ID}")

        assert resp.json() == {
            "organization_id": ORG_ID,
            "resource_type": None,
            "sub_key": None,
            "removed": 3,
        }
        assert len(filled_cache) == 1

    @pytest.mark.asyncio
    async def test_clear_and_stats(self, app, filled_cache):
        async with client_for(app) as ac:
            before = await ac.get("/cache/stats")
            cleared = await ac.delete("/cache")
            after = await ac.get("/cache/stats")

        assert before.json()["entries"] == 4
        assert before.json()["organizations"] == 2
        assert cleared.json()["removed"] == 4
        assert after.json()["entries"] == 0

    @pytest.mark.asyncio
    async def test_sweep(self, app, filled_cache):
        async with client_for(app) as ac:
            resp = await ac.post("/cache/sweep")
        assert resp.json()["removed"] == 0

    @pytest.mark.asyncio
    async def test_unknown_resource_type(self, app):
        async with client_for(app) as ac:
            resp = await ac.delete(f"/cache/{ORG_ID}/customers")
        assert resp.status_code == 422


class TestToolsCatalog:

    @pytest.mark.asyncio
    async def test_catalog(self, app, configured_actions):
        async with client_for(app) as ac:
            resp = await ac.post("/tools/catalog", json={"organization_id": ORG_ID, "actions": configured_actions})

        assert resp.status_code == 200
        names = [tool["name"] for tool in resp.json()["tools"]]
        assert names == ["agendar_consulta", "atualizar_cliente", "update_chat", "iniciar_fluxo"]


class TestAdminToken:

    @pytest.fixture
    def guarded_app(self, settings, store, cache, reporter):
        guarded = settings.model_copy(update={"admin_token": "s3cret"})
        return create_app(ActionsContainer(settings=guarded, store=store, cache=cache, reporter=reporter))

    @pytest.mark.asyncio
    async def test_admin_routes_require_token(self, guarded_app):
        async with client_for(guarded_app) as ac:
            missing = await ac.get("/cache/stats")
            wrong = await ac.get("/cache/stats", headers={"Authorization": "Bearer nope"})
            right = await ac.get("/cache/stats", headers={"Authorization": "Bearer s3cret"})
            catalog = await ac.post("/tools/catalog", json={"organization_id": ORG_ID, "actions": []})

        assert missing.status_code == 401
        assert wrong.status_code == 403
        assert right.status_code == 200
        assert catalog.status_code == 401

    @pytest.mark.asyncio
    async def test_health_is_public(self, guarded_app):
        async with client_for(guarded_app) as ac:
            resp = await ac.get("/health/ready")
        assert resp.status_code == 200
