"""
System action configuration models.

An organization configures a list of system actions; each one becomes a tool
the agent can call. The ``type`` field selects one of four closed variants,
each carrying its own typed ``config``.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class _ActionBase(BaseModel):
    """Fields shared by every configured action."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class ScheduleActionConfig(BaseModel):
    """Config for a schedule action: the schedule the tool books against."""

    model_config = ConfigDict(extra="allow")

    schedule: Optional[str] = None


class EmptyActionConfig(BaseModel):
    """Config for action kinds that need no settings."""

    model_config = ConfigDict(extra="allow")


class ScheduleAction(_ActionBase):
    type: Literal["schedule"] = "schedule"
    config: ScheduleActionConfig = Field(default_factory=ScheduleActionConfig)


class UpdateCustomerAction(_ActionBase):
    type: Literal["update_customer"] = "update_customer"
    config: EmptyActionConfig = Field(default_factory=EmptyActionConfig)


class UpdateChatAction(_ActionBase):
    type: Literal["update_chat"] = "update_chat"
    config: EmptyActionConfig = Field(default_factory=EmptyActionConfig)


class StartFlowAction(_ActionBase):
    type: Literal["start_flow"] = "start_flow"
    config: EmptyActionConfig = Field(default_factory=EmptyActionConfig)


SystemAction = Annotated[
    Union[ScheduleAction, UpdateCustomerAction, UpdateChatAction, StartFlowAction],
    Field(discriminator="type"),
]

_system_action_adapter = TypeAdapter(SystemAction)


def parse_action(raw: Any) -> Optional[SystemAction]:
    """
    Parse one configured action.

    Returns None for records that are empty, carry no ``type`` or carry a type
    outside the four supported kinds.
    """
    if raw is None:
        return None
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if not isinstance(raw, dict) or not raw.get("type"):
        return None

    data = dict(raw)
    if data.get("config") is None:
        data.pop("config", None)

    try:
        return _system_action_adapter.validate_python(data)
    except ValidationError:
        return None


def parse_actions(raw_actions: Optional[List[Any]]) -> List[SystemAction]:
    """Parse a list of configured actions, dropping the unsupported ones."""
    actions = []
    for raw in raw_actions or []:
        action = parse_action(raw)
        if action is not None:
            actions.append(action)
    return actions


class ActionPayload(BaseModel):
    """Internal action handed to an external executor."""

    type: str
    config: Dict[str, Any] = Field(default_factory=dict)
