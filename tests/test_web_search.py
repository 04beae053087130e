import httpx
import pytest

from agent_tools.tools.base import ArgumentDecodeError
from agent_tools.tools.builtin.web_search import BRAVE_SEARCH_URL, WebSearchTool


def make_tool(handler) -> WebSearchTool:
    return WebSearchTool("test-key", transport=httpx.MockTransport(handler))


def test_definition():
    schema = WebSearchTool("key").definition.to_dict()
    params = schema["function"]["parameters"]
    assert schema["function"]["name"] == "web_search"
    assert params["properties"]["query"]["type"] == "string"
    assert params["properties"]["count"]["type"] == "number"
    assert params["required"] == ["query"]


@pytest.mark.asyncio
async def test_search_formats_results():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"web": {"results": [
            {"title": "Python", "url": "https://python.org", "description": "The language"},
            {"title": "PyPI", "url": "https://pypi.org", "description": "Packages"},
        ]}})

    result = await make_tool(handler).call("c1", {"query": " python ", "count": 2})

    assert result.tool_call_id == "c1"
    assert result.content == (
        "Web search results for 'python':\n\n"
        "[1] Python\nhttps://python.org\nThe language\n\n"
        "[2] PyPI\nhttps://pypi.org\nPackages"
    )
    request = seen[0]
    assert str(request.url).startswith(BRAVE_SEARCH_URL)
    assert request.url.params["q"] == "python"
    assert request.url.params["count"] == "2"
    assert request.headers["X-Subscription-Token"] == "test-key"


@pytest.mark.asyncio
async def test_search_clamps_count():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"web": {"results": []}})

    result = await make_tool(handler).call("c1", {"query": "x", "count": 50})
    assert seen[0].url.params["count"] == "5"
    assert result.content == "No search results found for query: 'x'."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, message",
    [
        (401, "Error: Invalid Brave Search API key."),
        (429, "Error: Brave Search rate limit exceeded."),
        (500, "Error: Search request failed with status 500."),
    ],
)
async def test_search_http_errors(status, message):
    result = await make_tool(lambda request: httpx.Response(status)).call("c1", {"query": "x"})
    assert result.content == message


@pytest.mark.asyncio
async def test_search_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    result = await make_tool(handler).call("c1", {"query": "x"})
    assert result.content == "Error: Search request timed out."


@pytest.mark.asyncio
async def test_blank_query():
    result = await make_tool(lambda request: httpx.Response(200)).call("c1", {"query": "  "})
    assert result.content == "Error: 'query' parameter is required."


@pytest.mark.asyncio
async def test_missing_query_is_a_decode_error():
    with pytest.raises(ArgumentDecodeError, match="query"):
        await make_tool(lambda request: httpx.Response(200)).call("c1", {})
