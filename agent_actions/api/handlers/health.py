"""
Health and readiness endpoints.

Readiness depends on the calendar store being configured; the cache figures
let operators see how many tenant name maps are held in memory.
"""

from datetime import datetime
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...config import Settings
from ...services import ResourceCache


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    timestamp: str
    version: str
    uptime: float
    store_configured: bool
    cache: Dict[str, int]


class HealthHandler:
    """Handler for health check endpoints."""

    def __init__(self, settings: Settings, cache: ResourceCache):
        self.settings = settings
        self.cache = cache
        self.started_at = datetime.now()
        self.router = APIRouter()
        self._setup_routes()

    @property
    def store_configured(self) -> bool:
        return bool(self.settings.supabase_url and self.settings.supabase_service_key)

    def _setup_routes(self):
        @self.router.get("/", response_model=HealthResponse)
        async def health_check():
            return HealthResponse(
                status="healthy",
                service=self.settings.app_name,
                timestamp=datetime.now().isoformat(),
                version=self.settings.app_version,
                uptime=(datetime.now() - self.started_at).total_seconds(),
                store_configured=self.store_configured,
                cache=self.cache.stats(),
            )

        @self.router.get("/ready")
        async def readiness_check():
            """503 until the calendar store has credentials."""
            if not self.store_configured:
                return JSONResponse(status_code=503, content={"status": "not_ready", "reason": "store not configured"})
            return {"status": "ready"}

        @self.router.get("/live")
        async def liveness_check():
            return {"status": "alive"}
