import asyncio
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from agent_tools.tools.base import ArgumentDecodeError, ToolCallRequest, ToolCallResult
from agent_tools.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

TOOL_NOT_FOUND = "Tool not found"


def decode_arguments(arguments: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Decode a call's argument payload into a dict. Raises ArgumentDecodeError."""
    if arguments is None:
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    if not isinstance(arguments, str):
        raise ArgumentDecodeError(f"unsupported payload type {type(arguments).__name__}")
    if not arguments.strip():
        return {}
    try:
        decoded = json.loads(arguments)
    except json.JSONDecodeError as e:
        raise ArgumentDecodeError(f"invalid JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise ArgumentDecodeError(f"expected a JSON object, got {type(decoded).__name__}")
    return decoded


def parse_tool_calls(payload: Iterable[Mapping[str, Any]]) -> list[ToolCallRequest]:
    """Parse wire-format tool calls into requests."""
    return [ToolCallRequest.from_dict(item) for item in payload]


class CallDispatcher:
    """Resolves call requests against a registry and collects one result per request."""

    def __init__(self, registry: ToolRegistry, *, concurrent: bool = False) -> None:
        self._registry = registry
        self._concurrent = concurrent

    async def dispatch(self, request: ToolCallRequest) -> ToolCallResult:
        """Run a single call. Failures become the call's result instead of raising."""
        tool = self._registry.get(request.name)
        if tool is None:
            logger.warning(f"Tool not found: '{request.name}' (call {request.id})")
            return ToolCallResult(tool_call_id=request.id, content=TOOL_NOT_FOUND)

        try:
            arguments = decode_arguments(request.arguments)
            logger.info(f"Calling tool '{request.name}' (call {request.id}) with args: {arguments}")
            result = await tool.call(request.id, arguments)
        except ArgumentDecodeError as e:
            logger.warning(f"Invalid arguments for tool '{request.name}': {e}")
            return ToolCallResult(
                tool_call_id=request.id,
                content=f"Error: invalid arguments for tool '{request.name}': {e}",
            )
        except Exception as e:
            logger.exception(f"Tool '{request.name}' raised unexpected error")
            return ToolCallResult(
                tool_call_id=request.id,
                content=f"Error executing tool '{request.name}': {e}",
            )

        if isinstance(result, str):
            result = ToolCallResult(tool_call_id=request.id, content=result)
        if not isinstance(result, ToolCallResult):
            logger.error(f"Tool '{request.name}' returned {type(result).__name__}, not a ToolCallResult")
            return ToolCallResult(
                tool_call_id=request.id,
                content=f"Error executing tool '{request.name}': handler returned {type(result).__name__}",
            )
        logger.info(f"Tool '{request.name}' returned: {result.content}")
        return result

    async def dispatch_all(self, requests: Sequence[ToolCallRequest]) -> list[ToolCallResult]:
        """Dispatch a batch. Results are in request order in both modes."""
        if self._concurrent:
            return list(await asyncio.gather(*(self.dispatch(r) for r in requests)))

        results: list[ToolCallResult] = []
        for request in requests:
            results.append(await self.dispatch(request))
        return results
