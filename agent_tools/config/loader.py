import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from agent_tools.config.schema import (
    AgentConfig,
    AppConfig,
    DispatchConfig,
    LoggingConfig,
    Secrets,
    SessionConfig,
    ToolsConfig,
)

_SECTION_CLASSES = {
    "dispatch": DispatchConfig,
    "agent": AgentConfig,
    "session": SessionConfig,
    "tools": ToolsConfig,
    "logging": LoggingConfig,
}

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "AGENT_MODEL": ("agent", "model"),
    "AGENT_SYSTEM_PROMPT": ("agent", "system_prompt"),
    "OLLAMA_HOST": ("agent", "host"),
    "LOG_LEVEL": ("logging", "level"),
    "DISPATCH_CONCURRENT": ("dispatch", "concurrent"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _apply_env_overrides(data: dict[str, Any]) -> None:
    """Override YAML values with environment variables where mapped."""
    for env_var, (section, key) in _ENV_OVERRIDES.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        if key == "concurrent":
            value = value.strip().lower() in _TRUE_VALUES
        section_data = data.get(section) or {}
        section_data[key] = value
        data[section] = section_data


def _build_section(cls: type, section_data: dict[str, Any]) -> Any:
    if cls is ToolsConfig and "devices" in section_data:
        section_data = {**section_data, "devices": tuple(section_data["devices"])}
    return cls(**section_data)


def load_config(
    config_path: Path = Path("config.yaml"),
    env_path: Path = Path(".env"),
) -> AppConfig:
    """Load YAML config, merge .env overrides, return frozen AppConfig."""
    load_dotenv(env_path)

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

    _apply_env_overrides(data)

    sections: dict[str, Any] = {}
    for name, cls in _SECTION_CLASSES.items():
        section_data = data.get(name) or {}
        try:
            sections[name] = _build_section(cls, section_data)
        except TypeError as e:
            raise ValueError(f"Invalid '{name}' section in {config_path}: {e}") from e

    return AppConfig(**sections)


def load_secrets(env_path: Path = Path(".env")) -> Secrets:
    """Read API keys from the environment (and .env), never from config.yaml."""
    load_dotenv(env_path)
    return Secrets(brave_search_api_key=os.environ.get("BRAVE_SEARCH_API_KEY", ""))
