import logging
from typing import Any

import httpx

from agent_tools.schema.objects import described, load_object, schema_object
from agent_tools.tools.base import ToolCallResult, ToolDefinition
from agent_tools.tools.builder import ToolDefinitionBuilder

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
SEARCH_TIMEOUT_SECONDS = 10
MAX_RESULTS = 5


@schema_object
class WebSearchArguments:
    query: str = described("The search query to find information on the web.")
    count: int = described("How many results to return (1-5).", default=MAX_RESULTS)


class WebSearchTool:
    """
    Performs a web search using Brave Search API.
    """

    def __init__(self, api_key: str, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._transport = transport

    @property
    def definition(self) -> ToolDefinition:
        fields = WebSearchArguments.__describe__()
        return (
            ToolDefinitionBuilder()
            .name("web_search")
            .description(
                "Search the web for current information based on a query. "
                "Use this for recent events, news, or facts you're unsure about."
            )
            .add_required("query", fields["query"]["description"], str)
            .add_optional("count", fields["count"]["description"], int)
            .build()
        )

    async def call(self, call_id: str, arguments: dict[str, Any]) -> ToolCallResult:
        return ToolCallResult(call_id, await self._search(load_object(WebSearchArguments, arguments)))

    async def _search(self, args: WebSearchArguments) -> str:
        query = args.query.strip()
        if not query:
            return "Error: 'query' parameter is required."
        count = max(1, min(args.count, MAX_RESULTS))

        logger.info(f"Performing Brave web search for query: {query}")

        try:
            async with httpx.AsyncClient(
                timeout=SEARCH_TIMEOUT_SECONDS, transport=self._transport
            ) as client:
                response = await client.get(
                    BRAVE_SEARCH_URL,
                    params={"q": query, "count": count},
                    headers={
                        "X-Subscription-Token": self._api_key,
                        "Accept": "application/json",
                    },
                )
        except httpx.TimeoutException:
            logger.exception("Search request timed out")
            return "Error: Search request timed out."
        except httpx.RequestError as e:
            logger.exception("Search request failed")
            return f"Error: Failed to perform web search: {e}"

        if response.status_code == 401:
            return "Error: Invalid Brave Search API key."
        if response.status_code == 429:
            return "Error: Brave Search rate limit exceeded."
        if not response.is_success:
            return f"Error: Search request failed with status {response.status_code}."

        web_results = response.json().get("web", {}).get("results", [])
        if not web_results:
            return f"No search results found for query: '{query}'."

        formatted_results = []
        for idx, result in enumerate(web_results[:count], start=1):
            title = result.get("title", "")
            url = result.get("url", "")
            description = result.get("description", "")
            formatted_results.append(f"[{idx}] {title}\n{url}\n{description}")

        return f"Web search results for '{query}':\n\n" + "\n\n".join(formatted_results)
