"""
Bearer token guard for the admin routes.
"""

import secrets
from typing import Optional

from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings
from ..utils.logging import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


class AdminGuard:
    """Checks ``Authorization: Bearer <admin_token>`` when a token is configured."""

    def __init__(self, settings: Settings):
        self.token = settings.admin_token

    def __call__(self, credentials: Optional[HTTPAuthorizationCredentials]) -> None:
        if not self.token:
            return

        if credentials is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing admin token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not secrets.compare_digest(credentials.credentials, self.token):
            logger.warning("[api] rejected admin request with an invalid token")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid admin token",
            )
