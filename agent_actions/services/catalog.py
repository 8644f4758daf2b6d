"""
Tool catalog generation.

Turns an organization's configured system actions into tool definitions the
agent can call. Enumerations (services, providers, flows) are read live from
the store on every build and never cached.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.enums import ChatStatus, ScheduleOperation
from ..core.models import (
    ScheduleAction,
    ScheduleProvider,
    StartFlowAction,
    ToolDefinition,
    UpdateChatAction,
    UpdateCustomerAction,
    parse_action,
)
from ..utils.logging import get_logger
from ..utils.text import TextProcessor
from .reporting import ErrorReporter
from .resolution import get_field
from .store import CalendarStore

logger = get_logger(__name__)

DEFAULT_TOOL_NAMES = {
    "schedule": "schedule_appointment",
    "update_customer": "update_customer",
    "update_chat": "update_chat",
    "start_flow": "start_flow",
}


def tool_name_for(action) -> str:
    """Published tool name of a configured action."""
    return TextProcessor.slugify_tool_name(action.name or DEFAULT_TOOL_NAMES[action.type])


class ToolCatalogGenerator:
    """Builds tool definitions for the four supported action kinds."""

    def __init__(self, store: CalendarStore, reporter: Optional[ErrorReporter] = None):
        self.store = store
        self.reporter = reporter if reporter is not None else ErrorReporter()

    async def generate(self, organization_id: str, actions: Optional[Sequence[Any]]) -> List[ToolDefinition]:
        """
        Generate one tool per usable configured action.

        Actions with an unknown type, an inactive schedule or no active flows are
        skipped. A failure while building one tool is reported and the others
        are still generated.
        """
        try:
            tools: List[ToolDefinition] = []
            for raw in actions or []:
                action = parse_action(raw)
                if action is None:
                    logger.info("[catalog] skipping unsupported action %r", _label(raw))
                    continue

                try:
                    tool = await self._build(organization_id, action)
                except Exception as e:
                    logger.exception("[catalog] failed to build tool for action %r", action.name)
                    self.reporter.capture(
                        e,
                        component="catalog",
                        organization_id=organization_id,
                        action_type=action.type,
                        action_name=action.name,
                    )
                    continue

                if tool is not None:
                    tools.append(tool)

            logger.info("[catalog] %d tool(s) generated for %s", len(tools), organization_id)
            return tools
        except Exception as e:
            logger.exception("[catalog] tool generation failed for %s", organization_id)
            self.reporter.capture(e, component="catalog", organization_id=organization_id)
            return []

    async def _build(self, organization_id: str, action) -> Optional[ToolDefinition]:
        if isinstance(action, ScheduleAction):
            return await self.schedule_tool(organization_id, action)
        if isinstance(action, UpdateCustomerAction):
            return self.update_customer_tool(action)
        if isinstance(action, UpdateChatAction):
            return self.update_chat_tool(action)
        if isinstance(action, StartFlowAction):
            return await self.start_flow_tool(organization_id, action)
        return None

    async def schedule_tool(self, organization_id: str, action: ScheduleAction) -> Optional[ToolDefinition]:
        """Booking tool bound to the action's schedule, or None when the schedule is not active."""
        schedule_id = action.config.schedule
        if not schedule_id:
            logger.info("[catalog] no schedule configured for action %r", action.name)
            return None

        schedule = await self.store.get_active_schedule(organization_id, schedule_id)
        if not schedule:
            logger.info("[catalog] schedule %s not active for %s", schedule_id, organization_id)
            return None

        services = await self.store.list_active_services(schedule_id)
        providers = await self.store.list_active_providers(schedule_id)

        service_names = _names(services, "title")
        provider_names = _unique(ScheduleProvider.model_validate(row).display_name for row in providers or [])

        properties: Dict[str, Any] = {
            "operation": {
                "type": "string",
                "enum": [op.value for op in ScheduleOperation],
                "description": "Operation to perform on the schedule.",
            },
            "date": {
                "type": "string",
                "description": "Appointment date in YYYY-MM-DD format (e.g. 2023-12-31).",
            },
            "time": {
                "type": "string",
                "description": "Appointment time in HH:MM format (e.g. 14:30).",
            },
        }
        if service_names:
            properties["service_name"] = {
                "type": "string",
                "enum": service_names,
                "description": "Name of the service to book.",
            }
        if provider_names:
            properties["provider_name"] = {
                "type": "string",
                "enum": provider_names,
                "description": "Name of the professional who will attend the appointment.",
            }
        properties["notes"] = {
            "type": "string",
            "description": "Additional notes for the appointment.",
        }
        properties["appointment_id"] = {
            "type": "string",
            "description": "Appointment ID for lookup or cancellation.",
        }

        title = schedule.get("title") or "Schedule"
        return ToolDefinition(
            name=tool_name_for(action),
            description=action.description or (
                f'Book, check or cancel appointments on the "{title}" schedule. '
                "Use this tool when the customer wants to book, check availability "
                "or cancel an existing appointment."
            ),
            parameters={
                "type": "object",
                "properties": properties,
                "required": ["operation"],
            },
        )

    def update_customer_tool(self, action: UpdateCustomerAction) -> ToolDefinition:
        return ToolDefinition(
            name=tool_name_for(action),
            description=action.description
            or "Update customer information such as name, email, phone or funnel stage.",
            parameters={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "New name for the customer."},
                    "email": {"type": "string", "description": "New email address for the customer."},
                    "phone": {"type": "string", "description": "New phone number for the customer."},
                    "funnel_stage": {
                        "type": "string",
                        "description": "Funnel stage to move the customer to. Use the stage name.",
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Tags to apply to the customer.",
                    },
                },
            },
        )

    def update_chat_tool(self, action: UpdateChatAction) -> ToolDefinition:
        return ToolDefinition(
            name=tool_name_for(action),
            description=action.description
            or "Update the current chat, such as its title, status or responsible team.",
            parameters={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "New title for the chat."},
                    "status": {
                        "type": "string",
                        "enum": [status.value for status in ChatStatus],
                        "description": "New status for the chat.",
                    },
                    "team_name": {
                        "type": "string",
                        "description": "Name of the team that should handle the chat.",
                    },
                },
            },
        )

    async def start_flow_tool(self, organization_id: str, action: StartFlowAction) -> Optional[ToolDefinition]:
        """Flow trigger tool, or None when the organization has no active flows."""
        flows = await self.store.list_active_flows(organization_id)
        flow_names = _names(flows, "name")
        if not flow_names:
            logger.info("[catalog] no active flows for %s", organization_id)
            return None

        return ToolDefinition(
            name=tool_name_for(action),
            description=action.description
            or "Start an automation flow to handle a specific task.",
            parameters={
                "type": "object",
                "properties": {
                    "flow_name": {
                        "type": "string",
                        "enum": flow_names,
                        "description": "Name of the flow to start.",
                    },
                    "variables": {
                        "type": "object",
                        "description": "Variables passed to the flow.",
                        "additionalProperties": True,
                    },
                },
                "required": ["flow_name"],
            },
        )


def _names(rows: Optional[List[Dict[str, Any]]], path: str) -> List[str]:
    return _unique(get_field(row, path) for row in rows or [])


def _unique(values: Iterable[Any]) -> List[str]:
    names: List[str] = []
    for value in values:
        if value and value not in names:
            names.append(value)
    return names


def _label(raw: Any) -> Any:
    if isinstance(raw, dict):
        return raw.get("name") or raw.get("type")
    return raw
