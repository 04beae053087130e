from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import IntEnum
from typing import Annotated, Optional
from uuid import UUID

import pytest

from agent_tools.schema import descriptors
from agent_tools.schema.descriptors import (
    MissingDescriptorError,
    SchemaError,
    describe,
    describe_tag,
    register_descriptor,
)
from agent_tools.schema.objects import schema_object


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


@schema_object
class Point:
    x: float
    y: float


@pytest.mark.parametrize("tp", [int, float, Decimal])
def test_numbers(tp):
    assert describe(tp) == "number"


def test_string():
    assert describe(str) == "string"


def test_boolean_is_not_a_number():
    assert describe(bool) == "boolean"


def test_int_subclass_uses_base_tag():
    assert describe(Priority) == "number"


@pytest.mark.parametrize("tp", [list[int], tuple[int, ...], set[int], frozenset[int], Sequence[int]])
def test_sequences(tp):
    assert describe(tp) == "number[]"


def test_nested_sequence():
    assert describe(list[list[str]]) == "string[][]"


@pytest.mark.parametrize("tp", [dict[str, str], Mapping[str, str]])
def test_maps(tp):
    assert describe(tp) == "Map<string, string>"


def test_map_of_arrays():
    assert describe(dict[str, list[bool]]) == "Map<string, boolean[]>"


def test_optional_unwraps():
    assert describe(Optional[int]) == "number"
    assert describe(str | None) == "string"


def test_annotated_unwraps():
    assert describe(Annotated[list[float], "coordinates"]) == "number[]"


def test_record_type_describes_to_object():
    assert describe(Point) == {"x": {"type": "number"}, "y": {"type": "number"}}


@pytest.mark.parametrize("tp", [bytes, list, dict, tuple[int, str], int | str, object])
def test_missing_descriptor(tp):
    with pytest.raises(MissingDescriptorError):
        describe(tp)


def test_missing_descriptor_names_type():
    with pytest.raises(MissingDescriptorError, match="bytes"):
        describe(bytes)


def test_composite_inner_type_rejected():
    with pytest.raises(SchemaError, match="object schema"):
        describe(list[Point])


def test_describe_tag_rejects_objects():
    assert describe_tag(list[int]) == "number[]"
    with pytest.raises(SchemaError):
        describe_tag(Point)


def test_register_descriptor(monkeypatch):
    monkeypatch.setattr(descriptors, "_PRIMITIVE_TAGS", dict(descriptors._PRIMITIVE_TAGS))
    register_descriptor(UUID, "string")
    assert describe(UUID) == "string"
    assert describe(list[UUID]) == "string[]"


def test_unregistered_host_type_has_no_descriptor():
    with pytest.raises(MissingDescriptorError):
        describe(UUID)
