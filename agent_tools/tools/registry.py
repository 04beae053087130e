import copy
import json
import logging
from dataclasses import dataclass, replace
from typing import Any

from agent_tools.tools.base import Tool, ToolDefinition, ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    schema: dict[str, Any]
    tool: Tool


class ToolRegistry:
    """Registry of agent tools keyed by name, with schemas computed at registration."""

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def add_tool(self, tool: Tool, *, name: str | None = None) -> "ToolRegistry":
        """
        Register a tool and return the registry for chaining.

        The schema is serialized once here, not per call. ``name`` registers the
        same handler under an alias. An existing entry with the same name is
        replaced.
        """
        definition = tool.definition
        if name is not None and name != definition.name:
            definition = replace(definition, name=name)
        key = definition.name
        if key in self._tools:
            logger.warning(f"Replacing previously registered tool: {key}")
        self._tools[key] = RegisteredTool(definition=definition, schema=definition.to_dict(), tool=tool)
        logger.info(f"Registered tool: {key}")
        return self

    def get(self, name: str) -> Tool | None:
        entry = self._tools.get(name)
        return entry.tool if entry else None

    def require(self, name: str) -> Tool:
        tool = self.get(name)
        if tool is None:
            raise ToolNotFoundError(f"Unknown tool '{name}'. Available tools: {self.names()}")
        return tool

    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        return [entry.definition for entry in self._tools.values()]

    def to_schemas(self) -> list[dict[str, Any]]:
        """Copies of the cached schemas in registration order. Handlers are never exposed."""
        return [copy.deepcopy(entry.schema) for entry in self._tools.values()]

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_schemas(), **kwargs)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
