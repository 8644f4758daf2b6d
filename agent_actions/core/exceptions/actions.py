"""
Action dispatch exceptions.
"""

from typing import List, Optional


class ActionError(Exception):
    """Base exception for system action errors."""
    pass


class ConfigurationError(ActionError):
    """Exception raised when an action's configuration cannot be honoured."""
    pass


class ResolutionError(ActionError):
    """Exception raised when a free-text name does not match any resource."""

    def __init__(self, resource: str, name: str, message: Optional[str] = None):
        self.resource = resource
        self.name = name
        super().__init__(message or f'{resource.capitalize()} "{name}" not found. Please choose a valid {resource}.')


class ActionValidationError(ActionError):
    """Exception raised when required action parameters are missing or malformed."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = list(missing or [])
        super().__init__(message)


class UnknownActionError(ActionError):
    """Exception raised for tools, action types or operations that are not recognised."""
    pass
