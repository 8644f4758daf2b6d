"""
Entry point for running the application as a module.
"""

import uvicorn

from .config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("agent_actions.main:app", host="0.0.0.0", port=8001, reload=settings.debug)


if __name__ == "__main__":
    main()
