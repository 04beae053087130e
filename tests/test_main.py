import argparse
import json

import pytest

from agent_tools import main as main_module
from agent_tools.config.schema import AppConfig, Secrets, ToolsConfig
from agent_tools.main import build_registry


def test_build_registry_without_search_key():
    registry = build_registry(AppConfig(), Secrets())
    assert registry.names() == ["device_control"]


def test_build_registry_with_search_key():
    registry = build_registry(AppConfig(), Secrets(brave_search_api_key="key"))
    assert registry.names() == ["device_control", "web_search"]


def test_build_registry_search_disabled():
    config = AppConfig(tools=ToolsConfig(web_search=False))
    registry = build_registry(config, Secrets(brave_search_api_key="key"))
    assert "web_search" not in registry


@pytest.fixture
def no_files(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(main_module, "setup_logging", lambda config: None)
    monkeypatch.setattr(main_module, "load_secrets", lambda: Secrets())


def make_args(**kwargs) -> argparse.Namespace:
    defaults = {"schema": False, "call": None, "args": "{}", "print": None}
    return argparse.Namespace(**{**defaults, **kwargs})


@pytest.mark.asyncio
async def test_main_prints_schema(no_files, capsys):
    await main_module.main(make_args(schema=True))
    schemas = json.loads(capsys.readouterr().out)
    assert [s["function"]["name"] for s in schemas] == ["device_control"]


@pytest.mark.asyncio
async def test_main_dispatches_call(no_files, capsys):
    await main_module.main(make_args(
        call="device_control",
        args='{"device_name": "living_room_light", "action": "off"}',
    ))
    results = json.loads(capsys.readouterr().out)
    assert results == [{"tool_call_id": "cli", "content": "OK: Device 'living_room_light' turned off."}]
