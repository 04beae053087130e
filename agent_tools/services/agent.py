import logging
import time
import uuid
from collections.abc import AsyncIterator
from typing import Any

from ollama import AsyncClient

from agent_tools.config.schema import AgentConfig
from agent_tools.core.session import Message, Session
from agent_tools.tools.base import ToolCallRequest
from agent_tools.tools.dispatcher import CallDispatcher
from agent_tools.tools.registry import ToolRegistry
from agent_tools.util.prompt_loader import PromptLoader

logger = logging.getLogger(__name__)


class AgentError(Exception):
    pass


def to_call_request(tool_call: Any) -> ToolCallRequest:
    """Convert a tool call from a model response. Ollama omits call ids, so one is made up."""
    fn = tool_call["function"]
    call_id = tool_call.get("id") or f"call_{uuid.uuid4().hex[:12]}"
    return ToolCallRequest(id=call_id, name=fn["name"], arguments=fn.get("arguments") or {})


class AgentService:
    """Agentic LLM loop with streaming and tool calling via Ollama."""

    def __init__(
        self,
        config: AgentConfig,
        tool_registry: ToolRegistry,
        dispatcher: CallDispatcher,
    ) -> None:
        self._config = config
        self._tools = tool_registry
        self._dispatcher = dispatcher
        self._client: AsyncClient | None = None

    async def start(self) -> None:
        self._client = AsyncClient(host=self._config.host)
        logger.info(f"Agent initialized with model: {self._config.model}")

    async def stop(self) -> None:
        self._client = None

    def system_prompt(self) -> str:
        return PromptLoader.load_system_prompt(self._config, self._tools)

    async def run(self, user_text: str, session: Session) -> AsyncIterator[str]:
        """
        Run the agent loop. Yields text chunks as they stream.
        Tool calls are dispatched through the registry and fed back to the model.
        """
        if self._client is None:
            raise AgentError("Agent not started")

        session.add_message(Message(role="user", content=user_text))
        tools = self._tools.to_schemas() or None

        for tool_round in range(self._config.max_tool_rounds + 1):
            start = time.monotonic()
            full_text = ""
            tool_calls: list[Any] = []

            try:
                stream = await self._client.chat(
                    model=self._config.model,
                    messages=session.get_ollama_messages(),
                    tools=tools,
                    options={
                        "temperature": self._config.temperature,
                        "num_ctx": self._config.num_ctx,
                    },
                    stream=True,
                )
            except Exception as e:
                raise AgentError(f"Ollama chat failed: {e}") from e

            async for chunk in stream:
                if chunk["message"]["content"]:
                    full_text += chunk["message"]["content"]
                    yield chunk["message"]["content"]
                if chunk["message"].get("tool_calls"):
                    tool_calls.extend(chunk["message"]["tool_calls"])

            logger.info(f"Round {tool_round + 1} streamed in {time.monotonic() - start:.2f}s")

            session.add_message(Message(
                role="assistant",
                content=full_text,
                tool_calls=tool_calls if tool_calls else None,
            ))

            if not tool_calls:
                logger.info("No tool calls, ending agent stream")
                break

            logger.info(f"Tool round {tool_round + 1}: {len(tool_calls)} call(s)")
            requests = [to_call_request(tc) for tc in tool_calls]
            results = await self._dispatcher.dispatch_all(requests)
            session.add_tool_results(results, [r.name for r in requests])
