"""
Core data models for the agent actions system.
"""

from .actions import (
    ActionPayload,
    ScheduleAction,
    ScheduleActionConfig,
    StartFlowAction,
    SystemAction,
    UpdateChatAction,
    UpdateCustomerAction,
    parse_action,
    parse_actions,
)
from .schedule import (
    Appointment,
    AvailabilityWindow,
    Schedule,
    ScheduleProvider,
    ScheduleRequest,
    ScheduleService,
)
from .session import Session
from .tools import OperationResult, ToolCallResult, ToolDefinition

__all__ = [
    "ActionPayload",
    "ScheduleAction",
    "ScheduleActionConfig",
    "StartFlowAction",
    "SystemAction",
    "UpdateChatAction",
    "UpdateCustomerAction",
    "parse_action",
    "parse_actions",
    "Appointment",
    "AvailabilityWindow",
    "Schedule",
    "ScheduleProvider",
    "ScheduleRequest",
    "ScheduleService",
    "Session",
    "OperationResult",
    "ToolCallResult",
    "ToolDefinition",
]
