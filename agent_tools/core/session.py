from dataclasses import dataclass
from typing import Any

from agent_tools.config.schema import SessionConfig
from agent_tools.tools.base import ToolCallResult


@dataclass
class Message:
    role: str
    content: str
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None
    tool_name: str | None = None


class Session:
    """Conversation history for one agent exchange."""

    def __init__(self, config: SessionConfig) -> None:
        self._config = config
        self._messages: list[Message] = []

    def start(self, system_prompt: str) -> None:
        """Begin a new session with system prompt. Clears old history."""
        self._messages = [Message(role="system", content=system_prompt)]

    def add_message(self, message: Message) -> None:
        self._messages.append(message)
        self._trim_history()

    def add_tool_results(self, results: list[ToolCallResult], names: list[str]) -> None:
        """Append one ``tool`` message per result, paired with the called tool's name."""
        for result, name in zip(results, names):
            self.add_message(Message(
                role="tool",
                content=result.content,
                tool_call_id=result.tool_call_id,
                tool_name=name,
            ))

    def get_ollama_messages(self) -> list[dict[str, Any]]:
        """Convert messages to Ollama SDK format."""
        result: list[dict[str, Any]] = []
        for msg in self._messages:
            entry: dict[str, Any] = {"role": msg.role, "content": msg.content}
            if msg.tool_calls:
                entry["tool_calls"] = msg.tool_calls
            if msg.tool_call_id:
                entry["tool_call_id"] = msg.tool_call_id
            if msg.tool_name:
                entry["tool_name"] = msg.tool_name
            result.append(entry)
        return result

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def _trim_history(self) -> None:
        """Keep system prompt + last N messages if over limit."""
        max_msgs = self._config.max_history_messages
        if len(self._messages) <= max_msgs:
            return
        system = self._messages[0] if self._messages and self._messages[0].role == "system" else None
        if system:
            self._messages = [system] + self._messages[-(max_msgs - 1):]
        else:
            self._messages = self._messages[-max_msgs:]
