"""
Source-of-truth store exceptions.
"""

from typing import Optional


class StoreError(Exception):
    """Base exception for storage and query failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class StoreConflictError(StoreError):
    """Exception raised when the store rejects a write on a uniqueness or exclusion constraint."""
    pass
