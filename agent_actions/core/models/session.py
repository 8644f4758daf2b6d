"""
Conversation session model.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """Identifiers supplied by the messaging layer for the current conversation."""

    model_config = ConfigDict(extra="allow")

    organization_id: str
    customer_id: Optional[str] = None
    chat_id: Optional[str] = None
