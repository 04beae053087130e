import argparse
import asyncio
import json
import logging

from agent_tools.config.loader import load_config, load_secrets
from agent_tools.config.schema import AppConfig, Secrets
from agent_tools.core.session import Session
from agent_tools.services.agent import AgentService
from agent_tools.tools.base import ToolCallRequest
from agent_tools.tools.builtin.device_control import DeviceControlTool
from agent_tools.tools.builtin.web_search import WebSearchTool
from agent_tools.tools.dispatcher import CallDispatcher
from agent_tools.tools.registry import ToolRegistry
from agent_tools.util.logging import setup_logging

logger = logging.getLogger(__name__)


def build_registry(config: AppConfig, secrets: Secrets) -> ToolRegistry:
    """Register the built-in tools enabled by config."""
    registry = ToolRegistry().add_tool(DeviceControlTool(list(config.tools.devices)))
    if config.tools.web_search:
        if secrets.has_brave_search():
            registry.add_tool(WebSearchTool(secrets.brave_search_api_key))
        else:
            logger.warning("BRAVE_SEARCH_API_KEY not set, web_search disabled")
    return registry


async def main(args: argparse.Namespace) -> None:
    config = load_config()
    setup_logging(config.logging)

    registry = build_registry(config, load_secrets())
    dispatcher = CallDispatcher(registry, concurrent=config.dispatch.concurrent)

    if args.schema:
        print(registry.to_json(indent=2))
        return

    if args.call:
        request = ToolCallRequest(id="cli", name=args.call, arguments=args.args)
        results = await dispatcher.dispatch_all([request])
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return

    if args.print:
        logger.info(f"Starting agent in headless mode (--print) with prompt: {args.print}")
        agent = AgentService(config.agent, registry, dispatcher)
        await agent.start()
        session = Session(config.session)
        session.start(agent.system_prompt())
        try:
            async for chunk in agent.run(args.print, session):
                print(chunk, end="", flush=True)
            print()
        finally:
            await agent.stop()


def cli() -> None:
    parser = argparse.ArgumentParser(description="Expose tools to an agent and dispatch its calls")
    parser.add_argument("--schema", action="store_true", help="Print the registered tool schemas")
    parser.add_argument("--call", action="store", help="Dispatch a single call to the named tool")
    parser.add_argument("--args", action="store", default="{}", help="JSON arguments for --call")
    parser.add_argument("--print", action="store", help="Get a single headless response from the agent")
    args = parser.parse_args()
    if not (args.schema or args.call or args.print):
        parser.error("one of --schema, --call or --print is required")
    asyncio.run(main(args))


if __name__ == "__main__":
    cli()
