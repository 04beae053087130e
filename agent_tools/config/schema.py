from dataclasses import dataclass, field


@dataclass(frozen=True)
class DispatchConfig:
    concurrent: bool = False  # Run a batch's handlers in parallel (results stay in request order)


@dataclass(frozen=True)
class AgentConfig:
    model: str = "qwen2.5:1.5b"
    host: str | None = None  # Ollama server, None uses the client default
    system_prompt: str = ""  # Overrides the rendered prompt template when set
    prompt_path: str = "prompts/system_prompt.txt"
    max_tool_rounds: int = 5
    temperature: float = 0.7
    num_ctx: int = 2048


@dataclass(frozen=True)
class SessionConfig:
    max_history_messages: int = 50


@dataclass(frozen=True)
class ToolsConfig:
    devices: tuple[str, ...] = ("living_room_light",)
    web_search: bool = True  # Only registered when BRAVE_SEARCH_API_KEY is set


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    file: str | None = None
    max_bytes: int = 5_242_880
    backup_count: int = 3


@dataclass(frozen=True)
class AppConfig:
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class Secrets:
    brave_search_api_key: str = ""

    def has_brave_search(self) -> bool:
        return bool(self.brave_search_api_key)
