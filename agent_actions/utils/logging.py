"""
Logging helpers.
"""

import logging
import sys
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stream handler on the package logger."""
    global _configured
    root = logging.getLogger("agent_actions")
    if level:
        root.setLevel(level.upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``agent_actions`` namespace."""
    if not name.startswith("agent_actions"):
        name = f"agent_actions.{name}"
    return logging.getLogger(name)
