import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol

TOOL_TYPE_FUNCTION = "function"
PARAMETERS_TYPE_OBJECT = "object"


class ToolCallError(RuntimeError):
    """Base error for failures while handling a tool call."""


class ArgumentDecodeError(ToolCallError):
    """Raised when call arguments cannot be decoded into the shape a tool expects."""


class ToolNotFoundError(ToolCallError):
    """Raised when a required tool is not registered."""


@dataclass(frozen=True)
class ToolParameter:
    argument_type: str
    description: str
    enum: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.argument_type,
            "description": self.description,
        }
        if self.enum is not None:
            result["enum"] = list(self.enum)
        return result


@dataclass(frozen=True)
class ToolParameters:
    properties: Mapping[str, ToolParameter] = field(default_factory=lambda: MappingProxyType({}))
    required: tuple[str, ...] = ()
    type: str = PARAMETERS_TYPE_OBJECT

    # properties is a mapping proxy, so instances compare by value but cannot be hashed
    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "properties": {name: param.to_dict() for name, param in self.properties.items()},
            "required": list(self.required),
        }


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    parameters: ToolParameters = field(default_factory=ToolParameters)
    type: str = TOOL_TYPE_FUNCTION

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the function-calling schema understood by agent platforms."""
        return {
            "type": self.type,
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.to_dict(),
            },
        }


@dataclass(frozen=True)
class ToolCallRequest:
    id: str
    name: str
    arguments: str | Mapping[str, Any] = "{}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolCallRequest":
        """Parse ``{"id", "type": "function", "function": {"name", "arguments"}}``."""
        try:
            function = data["function"]
            return cls(
                id=str(data.get("id", "")),
                name=function["name"],
                arguments=function.get("arguments", "{}"),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed tool call: {data!r}") from e

    def to_dict(self) -> dict[str, Any]:
        arguments = self.arguments
        if not isinstance(arguments, str):
            arguments = json.dumps(dict(arguments))
        return {
            "id": self.id,
            "type": TOOL_TYPE_FUNCTION,
            "function": {"name": self.name, "arguments": arguments},
        }


@dataclass(frozen=True)
class ToolCallResult:
    tool_call_id: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"tool_call_id": self.tool_call_id, "content": self.content}


class Tool(Protocol):
    @property
    def definition(self) -> ToolDefinition: ...

    async def call(self, call_id: str, arguments: dict[str, Any]) -> ToolCallResult: ...
