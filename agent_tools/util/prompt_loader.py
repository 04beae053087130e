import logging
from pathlib import Path

from jinja2 import Template

from agent_tools.config.schema import AgentConfig
from agent_tools.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = (
    "You are a helpful assistant."
    "{% if tools %} You can call these tools: {{ tools | join(', ') }}.{% endif %}"
)


class PromptLoader:
    @staticmethod
    def load_system_prompt(config: AgentConfig, tool_registry: ToolRegistry) -> str:
        """Configured prompt if set, otherwise the template rendered with the tool names."""
        if config.system_prompt:
            return config.system_prompt
        path = Path(config.prompt_path)
        if path.exists():
            source = path.read_text()
        else:
            logger.warning(f"Prompt template not found at {path}, using built-in default")
            source = DEFAULT_TEMPLATE
        prompt = Template(source).render(tools=tool_registry.names())
        logger.debug(f"System prompt: {prompt}")
        return prompt
