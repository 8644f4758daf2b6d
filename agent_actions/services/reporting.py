"""
Error reporting to Sentry.
"""

from typing import Any, Optional
import sentry_sdk

from ..config import Settings
from ..utils.logging import get_logger

logger = get_logger(__name__)


def init_error_tracking(settings: Settings) -> bool:
    """Initialize the Sentry SDK when a DSN is configured."""
    if not settings.sentry_dsn:
        logger.info("[reporting] Sentry DSN not configured; error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"{settings.app_name}@{settings.app_version}",
        traces_sample_rate=0.0,
    )
    return True


class ErrorReporter:
    """Reports caught failures once to the error tracker."""

    def capture(self, error: BaseException, component: Optional[str] = None, **context: Any) -> None:
        """Send ``error`` to Sentry with the call context attached as extras."""
        extras = {key: value for key, value in context.items() if value is not None}
        tags = {"component": component} if component else {}
        try:
            sentry_sdk.capture_exception(error, tags=tags, extras=extras)
        except Exception:
            logger.exception("[reporting] failed to report %s", type(error).__name__)
