"""
Tool definition and tool result models.
"""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class ToolDefinition(BaseModel):
    """A callable capability exposed to the model's function-calling interface."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(pattern=r"^[a-zA-Z0-9_-]+$")
    description: str
    parameters: Dict[str, Any]

    def as_function(self) -> Dict[str, Any]:
        """Wrap the definition in the function-tool envelope chat models expect."""
        return {"type": "function", "function": self.model_dump()}


class OperationResult(BaseModel):
    """Uniform envelope returned by scheduling operations."""

    model_config = ConfigDict(extra="allow")

    success: bool
    message: str = ""

    @classmethod
    def failure(cls, message: str, **fields: Any) -> "OperationResult":
        return cls(success=False, message=message, **fields)

    def fields(self) -> Dict[str, Any]:
        """All fields, including the operation-specific extras."""
        return self.model_dump()


class ToolCallResult(BaseModel):
    """Result of a system tool call, returned to the conversational layer."""

    model_config = ConfigDict(extra="allow")

    status: Literal["success", "error"]
    message: str = ""
    operation: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def error(cls, message: str, **fields: Any) -> "ToolCallResult":
        return cls(status="error", message=message, **fields)

    @classmethod
    def ok(cls, message: str = "", **fields: Any) -> "ToolCallResult":
        return cls(status="success", message=message, **fields)

    @classmethod
    def from_executor(cls, value: Any) -> "ToolCallResult":
        """Normalize whatever an external executor returned."""
        if isinstance(value, cls):
            return value
        if isinstance(value, BaseModel):
            value = value.model_dump()
        if not isinstance(value, dict):
            return cls.ok(message=str(value) if value is not None else "")

        data = dict(value)
        if data.get("status") not in ("success", "error"):
            success = data.pop("success", True)
            data["status"] = "success" if success else "error"
        data.setdefault("message", "")
        return cls.model_validate(data)

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize without unset optional keys."""
        return self.model_dump(exclude_none=True)
