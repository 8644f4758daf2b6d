"""
System tool dispatch.

Matches an invoked tool to the organization's configured action, resolves the
free-text names in its arguments to identifiers and routes the call to the
appointment manager or to one of the external action executors.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Union

from ..core.enums import ResourceType
from ..core.exceptions import (
    ActionError,
    ActionValidationError,
    ConfigurationError,
    ResolutionError,
    UnknownActionError,
)
from ..core.models import (
    ActionPayload,
    ScheduleAction,
    ScheduleRequest,
    Session,
    StartFlowAction,
    ToolCallResult,
    UpdateChatAction,
    UpdateCustomerAction,
    parse_actions,
)
from ..utils.logging import get_logger
from ..utils.text import TextProcessor
from .catalog import tool_name_for
from .reporting import ErrorReporter
from .resolution import NameResolutionService, lookup_name
from .scheduling import AppointmentManager
from .store import CalendarStore

logger = get_logger(__name__)

ExecutorResult = Union[ToolCallResult, Dict[str, Any], None]
Executor = Callable[[ActionPayload, Dict[str, Any], Session], Union[ExecutorResult, Awaitable[ExecutorResult]]]


@dataclass
class ActionExecutors:
    """External executors for the non-scheduling action kinds.

    Each receives ``(action_payload, args, session)`` and may be sync or async.
    """

    update_customer: Executor
    update_chat: Executor
    start_flow: Executor


class ToolDispatcher:
    """Routes an invoked system tool to the code that performs it."""

    def __init__(
        self,
        store: CalendarStore,
        resolver: NameResolutionService,
        appointments: AppointmentManager,
        reporter: Optional[ErrorReporter] = None,
    ):
        self.store = store
        self.resolver = resolver
        self.appointments = appointments
        self.reporter = reporter if reporter is not None else ErrorReporter()

    async def dispatch(
        self,
        tool_name: str,
        args: Optional[Mapping[str, Any]],
        actions: Optional[Sequence[Any]],
        session: Union[Session, Mapping[str, Any]],
        executors: ActionExecutors,
    ) -> ToolCallResult:
        """
        Execute one tool call.

        Never raises: configuration, resolution and validation problems as well
        as unexpected failures come back as ``status="error"`` results.
        """
        args = dict(args or {})
        try:
            if not isinstance(session, Session):
                session = Session.model_validate(session)

            action = self.match_action(tool_name, actions)
            logger.info(
                "[dispatch] %s -> %s action for %s",
                tool_name, action.type, session.organization_id,
            )

            if isinstance(action, ScheduleAction):
                return await self._schedule(action, args, session)
            if isinstance(action, UpdateCustomerAction):
                return await self._update_customer(args, session, executors)
            if isinstance(action, UpdateChatAction):
                return await self._update_chat(args, session, executors)
            if isinstance(action, StartFlowAction):
                return await self._start_flow(args, session, executors)
            raise UnknownActionError(f"Unsupported action type: {action.type}")
        except ActionError as e:
            logger.warning("[dispatch] %s: %s", tool_name, e)
            return ToolCallResult.error(str(e))
        except Exception as e:
            logger.exception("[dispatch] system tool %s failed", tool_name)
            self.reporter.capture(
                e,
                component="dispatch",
                tool_name=tool_name,
                organization_id=getattr(session, "organization_id", None),
            )
            return ToolCallResult.error(f"Error processing system tool {tool_name}: {e}")

    def match_action(self, tool_name: str, actions: Optional[Sequence[Any]]):
        """
        Configured action for ``tool_name``.

        The configured name is tried as-is first, then in the slugified form the
        catalog publishes.
        """
        parsed = parse_actions(list(actions or []))
        for action in parsed:
            if action.name and action.name == tool_name:
                return action

        slug = TextProcessor.slugify_tool_name(tool_name)
        for action in parsed:
            if slug and tool_name_for(action) == slug:
                return action

        raise UnknownActionError(f"Unrecognized system tool: {tool_name}")

    # ── schedule ────────────────────────────────────────

    async def _schedule(self, action: ScheduleAction, args: Dict[str, Any], session: Session) -> ToolCallResult:
        schedule_id = action.config.schedule
        if not schedule_id:
            raise ConfigurationError("Schedule ID is required.")

        schedule = await self.store.get_active_schedule(session.organization_id, schedule_id)
        if not schedule:
            raise ConfigurationError("No active schedules found for this organization.")

        service_id = _text(args.get("service_id"))
        if args.get("service_name"):
            service_map = await self.resolver.get_map(
                session.organization_id, ResourceType.SERVICES, schedule_id
            )
            if service_map is None:
                raise ConfigurationError("No services found for this schedule.")
            service_id = lookup_name(service_map, args["service_name"])
            if not service_id:
                raise ResolutionError("service", args["service_name"])
            logger.info("[dispatch] service %r -> %s", args["service_name"], service_id)

        provider_id = _text(args.get("provider_id"))
        if args.get("provider_name"):
            provider_map = await self.resolver.get_map(
                session.organization_id, ResourceType.PROVIDERS, schedule_id
            )
            resolved = lookup_name(provider_map, args["provider_name"])
            if resolved:
                provider_id = resolved
                logger.info("[dispatch] provider %r -> %s", args["provider_name"], provider_id)
            else:
                logger.warning(
                    "[dispatch] provider %r not found; one will be assigned automatically",
                    args["provider_name"],
                )

        request = ScheduleRequest(
            schedule_id=str(schedule["id"]),
            operation=_text(args.get("operation")),
            date=_text(args.get("date")),
            time=_text(args.get("time")),
            service_id=service_id,
            provider_id=provider_id,
            appointment_id=_text(args.get("appointment_id")),
            notes=_text(args.get("notes")),
        )
        return await self.appointments.process(request, session)

    # ── external executors ──────────────────────────────

    async def _update_customer(
        self, args: Dict[str, Any], session: Session, executors: ActionExecutors
    ) -> ToolCallResult:
        payload = ActionPayload(
            type="update_customer",
            config={
                "name": args.get("name"),
                "email": args.get("email"),
                "phone": args.get("phone"),
                "funnel_stage": args.get("funnel_stage"),
                "tags": args.get("tags"),
            },
        )
        return await self._execute(executors.update_customer, payload, args, session)

    async def _update_chat(
        self, args: Dict[str, Any], session: Session, executors: ActionExecutors
    ) -> ToolCallResult:
        team_id = args.get("team_id")
        if args.get("team_name"):
            team_map = await self.resolver.get_map(session.organization_id, ResourceType.TEAMS)
            if team_map is None:
                logger.info("[dispatch] no teams for %s; skipping team assignment", session.organization_id)
            else:
                team_id = lookup_name(team_map, args["team_name"])
                if not team_id:
                    raise ResolutionError("team", args["team_name"])
                args["team_id"] = team_id
                logger.info("[dispatch] team %r -> %s", args["team_name"], team_id)

        payload = ActionPayload(
            type="update_chat",
            config={
                "title": args.get("title"),
                "status": args.get("status"),
                "team_id": team_id,
            },
        )
        return await self._execute(executors.update_chat, payload, args, session)

    async def _start_flow(
        self, args: Dict[str, Any], session: Session, executors: ActionExecutors
    ) -> ToolCallResult:
        if not args.get("flow_name"):
            raise ActionValidationError("Flow name is required.", missing=["flow_name"])

        flow_map = await self.resolver.get_map(session.organization_id, ResourceType.FLOWS)
        if flow_map is None:
            raise ConfigurationError("No active flows found for this organization.")

        flow_id = lookup_name(flow_map, args["flow_name"])
        if not flow_id:
            raise ResolutionError("flow", args["flow_name"])
        args["flow_id"] = flow_id
        logger.info("[dispatch] flow %r -> %s", args["flow_name"], flow_id)

        payload = ActionPayload(
            type="start_flow",
            config={"flow_id": flow_id, "variables": args.get("variables") or {}},
        )
        return await self._execute(executors.start_flow, payload, args, session)

    async def _execute(
        self,
        executor: Executor,
        payload: ActionPayload,
        args: Dict[str, Any],
        session: Session,
    ) -> ToolCallResult:
        result = executor(payload, args, session)
        if inspect.isawaitable(result):
            result = await result
        return ToolCallResult.from_executor(result)


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
