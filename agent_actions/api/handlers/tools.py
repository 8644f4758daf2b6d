"""
Tool catalog handler.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from ...services.catalog import ToolCatalogGenerator
from ..security import AdminGuard, bearer


class CatalogRequest(BaseModel):
    """Organization and its configured system actions."""
    organization_id: str
    actions: List[Dict[str, Any]] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    """Generated tool definitions."""
    organization_id: str
    tools: List[Dict[str, Any]]


class ToolsHandler:
    """Handler for tool catalog generation."""

    def __init__(self, catalog: ToolCatalogGenerator, guard: AdminGuard):
        self.catalog = catalog
        self.guard = guard

        async def authorize(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)):
            self.guard(credentials)

        self.router = APIRouter(dependencies=[Depends(authorize)])
        self._setup_routes()

    def _setup_routes(self):
        """Setup tool routes."""

        @self.router.post("/catalog", response_model=CatalogResponse)
        async def generate_catalog(request: CatalogRequest):
            """Tool definitions for an organization's configured actions."""
            tools = await self.catalog.generate(request.organization_id, request.actions)
            return CatalogResponse(
                organization_id=request.organization_id,
                tools=[tool.model_dump() for tool in tools],
            )
