"""
Source-of-truth store configuration.
"""

from typing import Dict, Optional
from pydantic import BaseModel

from .settings import Settings


class StoreConfig(BaseModel):
    """Connection settings for the PostgREST endpoint backing the calendar store."""

    base_url: str = "http://localhost:54321"
    service_key: Optional[str] = None
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        """Build the store configuration from application settings."""
        return cls(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            timeout=settings.store_timeout,
        )

    def get_rest_url(self) -> str:
        """Get the REST root for table queries."""
        return f"{self.base_url.rstrip('/')}/rest/v1"

    def get_headers(self) -> Dict[str, str]:
        """Get auth headers for every request."""
        headers = {"Accept": "application/json"}
        if self.service_key:
            headers["apikey"] = self.service_key
            headers["Authorization"] = f"Bearer {self.service_key}"
        return headers

    def is_configured(self) -> bool:
        """Check if the store has credentials."""
        return bool(self.base_url and self.service_key)
