from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from agent_tools.schema.descriptors import describe_tag
from agent_tools.tools.base import ToolDefinition, ToolParameter, ToolParameters

ENUM_ARGUMENT_TYPE = "string"


class ToolBuilderError(ValueError):
    pass


class NameNotSetError(ToolBuilderError):
    def __init__(self) -> None:
        super().__init__("Name not set")


class DescriptionNotSetError(ToolBuilderError):
    def __init__(self) -> None:
        super().__init__("Description not set")


@dataclass(frozen=True)
class ToolDefinitionBuilder:
    """
    Immutable fluent builder for ToolDefinition.

    Every method returns a new builder, so a partially built chain can be
    reused as a template without the branches seeing each other's parameters:

        definition = (
            ToolDefinitionBuilder()
            .name("get_weather")
            .description("Current weather for a city")
            .add_required("city", "City name", str)
            .add_optional_enum("unit", "Temperature unit", ["c", "f"])
            .build()
        )

    Re-declaring a parameter replaces it. A name is listed in ``required`` at
    most once and only if its latest declaration was a required one.
    """

    _name: str | None = None
    _description: str | None = None
    _properties: tuple[tuple[str, ToolParameter], ...] = ()
    _required: tuple[str, ...] = ()

    def name(self, name: str) -> "ToolDefinitionBuilder":
        return replace(self, _name=name)

    def description(self, description: str) -> "ToolDefinitionBuilder":
        return replace(self, _description=description)

    def add_required(self, name: str, description: str, tp: Any) -> "ToolDefinitionBuilder":
        return self._with(name, ToolParameter(describe_tag(tp), description), required=True)

    def add_optional(self, name: str, description: str, tp: Any) -> "ToolDefinitionBuilder":
        return self._with(name, ToolParameter(describe_tag(tp), description), required=False)

    def add_required_enum(
        self, name: str, description: str, values: Iterable[Any]
    ) -> "ToolDefinitionBuilder":
        return self._with(name, _enum_parameter(description, values), required=True)

    def add_optional_enum(
        self, name: str, description: str, values: Iterable[Any]
    ) -> "ToolDefinitionBuilder":
        return self._with(name, _enum_parameter(description, values), required=False)

    def build(self) -> ToolDefinition:
        """Finalize. Raises NameNotSetError or DescriptionNotSetError, in that order."""
        if self._name is None:
            raise NameNotSetError()
        if self._description is None:
            raise DescriptionNotSetError()
        return ToolDefinition(
            name=self._name,
            description=self._description,
            parameters=ToolParameters(
                properties=MappingProxyType(dict(self._properties)),
                required=self._required,
            ),
        )

    def _with(self, name: str, parameter: ToolParameter, required: bool) -> "ToolDefinitionBuilder":
        properties = dict(self._properties)
        properties[name] = parameter
        names = tuple(n for n in self._required if n != name)
        if required:
            if name in self._required:
                names = self._required
            else:
                names = names + (name,)
        return replace(self, _properties=tuple(properties.items()), _required=names)


def _enum_parameter(description: str, values: Iterable[Any]) -> ToolParameter:
    return ToolParameter(
        argument_type=ENUM_ARGUMENT_TYPE,
        description=description,
        enum=tuple(str(v.value if isinstance(v, Enum) else v) for v in values),
    )
