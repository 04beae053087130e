import pytest

from agent_tools.config.schema import SessionConfig
from agent_tools.core.session import Message, Session
from agent_tools.tools.base import ToolCallResult


@pytest.fixture
def session():
    return Session(SessionConfig(max_history_messages=10))


def test_start_creates_system_message(session):
    session.start("You are helpful.")
    assert len(session.messages) == 1
    assert session.messages[0].role == "system"
    assert session.messages[0].content == "You are helpful."


def test_start_clears_previous_history(session):
    session.start("prompt 1")
    session.add_message(Message(role="user", content="hello"))
    session.start("prompt 2")
    assert len(session.messages) == 1
    assert session.messages[0].content == "prompt 2"


def test_add_tool_results(session):
    session.start("sys")
    session.add_tool_results(
        [ToolCallResult("call_1", "Echo: a"), ToolCallResult("call_2", "Tool not found")],
        ["echo", "missing"],
    )
    tool_messages = session.messages[1:]
    assert [m.role for m in tool_messages] == ["tool", "tool"]
    assert [m.tool_call_id for m in tool_messages] == ["call_1", "call_2"]
    assert [m.tool_name for m in tool_messages] == ["echo", "missing"]


def test_get_ollama_messages(session):
    session.start("sys")
    session.add_message(Message(role="user", content="hi"))
    msgs = session.get_ollama_messages()
    assert msgs == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hi"},
    ]


def test_get_ollama_messages_with_tool_calls(session):
    session.start("sys")
    session.add_message(Message(
        role="assistant",
        content="",
        tool_calls=[{"function": {"name": "test", "arguments": {}}}],
    ))
    session.add_tool_results([ToolCallResult("call_1", "done")], ["test"])
    msgs = session.get_ollama_messages()
    assert msgs[1]["tool_calls"] == [{"function": {"name": "test", "arguments": {}}}]
    assert msgs[2] == {
        "role": "tool",
        "content": "done",
        "tool_call_id": "call_1",
        "tool_name": "test",
    }


def test_history_trimming(session):
    session.start("sys")
    for i in range(15):
        session.add_message(Message(role="user", content=f"msg {i}"))
    # max is 10: system + 9 most recent
    assert len(session.messages) == 10
    assert session.messages[0].role == "system"
    assert session.messages[1].content == "msg 6"
