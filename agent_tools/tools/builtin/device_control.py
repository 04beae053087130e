import logging
from typing import Any

from agent_tools.schema.objects import described, load_object, schema_object
from agent_tools.tools.base import ToolCallResult, ToolDefinition
from agent_tools.tools.builder import ToolDefinitionBuilder

logger = logging.getLogger(__name__)

DEVICE_ACTIONS = ("on", "off")


@schema_object(frozen=True)
class DeviceControlArguments:
    device_name: str = described("Name of the device to control (e.g., 'living_room_light')")
    action: str = described("Action to perform on the device")


class DeviceControlTool:
    """Control smart home devices (mock implementation)."""

    def __init__(self, devices: list[str] | None = None) -> None:
        self._devices = list(devices or ["living_room_light"])

    @property
    def definition(self) -> ToolDefinition:
        return (
            ToolDefinitionBuilder()
            .name("device_control")
            .description("Control a smart home device. Can turn devices on or off.")
            .add_required_enum(
                "device_name",
                "Name of the device to control (e.g., 'living_room_light')",
                self._devices,
            )
            .add_required_enum("action", "Action to perform on the device", DEVICE_ACTIONS)
            .build()
        )

    async def call(self, call_id: str, arguments: dict[str, Any]) -> ToolCallResult:
        args = load_object(DeviceControlArguments, arguments)

        if args.device_name not in self._devices:
            return ToolCallResult(call_id, f"Error: Unknown device '{args.device_name}'.")
        if args.action not in DEVICE_ACTIONS:
            return ToolCallResult(
                call_id, f"Error: Invalid action '{args.action}'. Must be 'on' or 'off'."
            )

        # Mock: in production this would call python-kasa or similar
        logger.info(f"Mock device control: {args.device_name} -> {args.action}")
        return ToolCallResult(call_id, f"OK: Device '{args.device_name}' turned {args.action}.")
