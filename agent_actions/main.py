"""
ASGI entry point: ``uvicorn agent_actions.main:app``.
"""

from .api.app import create_app

app = create_app()
