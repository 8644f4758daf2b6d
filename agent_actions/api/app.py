"""
FastAPI application factory and configuration.
"""

from typing import Optional

from fastapi import FastAPI

from ..config import get_settings
from ..container import ActionsContainer
from ..services.reporting import init_error_tracking
from ..utils.logging import configure_logging
from .middleware import SecurityHeaders, LoggingMiddleware
from .handlers import HealthHandler, CacheHandler, ToolsHandler
from .security import AdminGuard


def create_app(container: Optional[ActionsContainer] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    container = container or ActionsContainer(get_settings())
    settings = container.settings

    configure_logging(settings.log_level)
    init_error_tracking(settings)

    app = FastAPI(
        title=settings.app_name,
        description="System tool catalog and cache administration for the AI agent",
        version=settings.app_version,
        debug=settings.debug,
    )
    app.state.container = container

    # Add custom middleware
    app.add_middleware(SecurityHeaders)
    app.add_middleware(LoggingMiddleware)

    # Initialize handlers
    guard = AdminGuard(settings)
    health_handler = HealthHandler(settings, container.cache)
    cache_handler = CacheHandler(container.cache, guard)
    tools_handler = ToolsHandler(container.catalog, guard)

    # Register routes
    app.include_router(health_handler.router, prefix="/health", tags=["health"])
    app.include_router(cache_handler.router, tags=["cache"])
    app.include_router(tools_handler.router, prefix="/tools", tags=["tools"])

    return app
