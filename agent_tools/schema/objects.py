import dataclasses
import logging
import types
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin, get_type_hints

from agent_tools.schema.descriptors import MissingDescriptorError, describe
from agent_tools.tools.base import ArgumentDecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DESCRIPTION_KEY = "description"


@dataclass(frozen=True)
class SchemaField:
    name: str
    type: Any
    description: str | None = None


def described(description: str, **kwargs: Any) -> Any:
    """A dataclass field that carries a human-readable description into the schema."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[DESCRIPTION_KEY] = description
    return dataclasses.field(metadata=metadata, **kwargs)


def object_fields(cls: type) -> tuple[SchemaField, ...]:
    """Enumerate (name, type, description) for every field of a dataclass."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__qualname__} is not a dataclass")
    hints = get_type_hints(cls, include_extras=True)
    return tuple(
        SchemaField(
            name=f.name,
            type=hints.get(f.name, f.type),
            description=f.metadata.get(DESCRIPTION_KEY),
        )
        for f in dataclasses.fields(cls)
        if f.init
    )


def describe_object(cls: type) -> dict[str, Any]:
    """Derive the composite schema of a record type.

    Each field becomes ``{"type": <fragment>}`` plus ``"description"`` when the
    field was declared with ``described``. A field whose type has no descriptor
    raises ``MissingDescriptorError`` naming ``Class.field``.
    """
    schema: dict[str, Any] = {}
    for f in object_fields(cls):
        try:
            entry: dict[str, Any] = {"type": describe(f.type)}
        except MissingDescriptorError as e:
            raise MissingDescriptorError(e.type, where=f"{cls.__qualname__}.{f.name}") from e
        if f.description is not None:
            entry["description"] = f.description
        schema[f.name] = entry
    return schema


def schema_object(cls: type[T] | None = None, /, **dataclass_kwargs: Any) -> Any:
    """Class decorator turning a record into a described schema object.

    The class is made a dataclass if it is not one already, and its schema is
    derived immediately so unknown field types fail at class definition.

        @schema_object
        class Point:
            x: float = described("Horizontal position")
            y: float = described("Vertical position")
            tags: list[str] = dataclasses.field(default_factory=list)
    """

    def wrap(klass: type[T]) -> type[T]:
        if not dataclasses.is_dataclass(klass):
            klass = dataclass(**dataclass_kwargs)(klass)
        describe_object(klass)
        klass.__describe__ = classmethod(describe_object)
        logger.debug(f"Derived schema object: {klass.__qualname__}")
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def is_schema_object(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp) and hasattr(tp, "__describe__")


def load_object(cls: type[T], arguments: Any) -> T:
    """Build a ``cls`` instance from decoded call arguments.

    Raises ``ArgumentDecodeError`` when the payload is not a mapping, names
    unknown fields, omits required ones, or carries a value of the wrong kind.
    ``None`` is accepted for ``Optional`` fields.
    """
    if not isinstance(arguments, Mapping):
        raise ArgumentDecodeError(
            f"expected an object for {cls.__qualname__}, got {type(arguments).__name__}"
        )

    fields = {f.name: f for f in object_fields(cls)}
    unknown = sorted(set(arguments) - set(fields))
    if unknown:
        raise ArgumentDecodeError(f"unknown field(s): {', '.join(unknown)}")

    required = {f.name for f in dataclasses.fields(cls) if f.init and _is_required(f)}
    missing = sorted(required - set(arguments))
    if missing:
        raise ArgumentDecodeError(f"missing field(s): {', '.join(missing)}")

    values: dict[str, Any] = {}
    for name, value in arguments.items():
        field_type, optional = _unwrap(fields[name].type)
        if value is None and optional:
            values[name] = value
            continue
        if is_schema_object(field_type):
            if not isinstance(value, Mapping):
                raise ArgumentDecodeError(f"field '{name}' must be an object")
            value = load_object(field_type, value)
        else:
            _check_primitive(name, field_type, value)
            if field_type is int and isinstance(value, float):
                value = int(value)
        values[name] = value
    return cls(**values)


def _unwrap(field_type: Any) -> tuple[Any, bool]:
    """Strip Annotated and Optional, reporting whether None is allowed."""
    optional = False
    while True:
        origin = get_origin(field_type)
        if origin is Annotated:
            field_type = get_args(field_type)[0]
        elif origin in (Union, types.UnionType):
            members = [arg for arg in get_args(field_type) if arg is not type(None)]
            if len(members) != 1:
                return field_type, optional
            optional = True
            field_type = members[0]
        else:
            return field_type, optional


def _is_required(f: dataclasses.Field) -> bool:
    return f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING


def _check_primitive(name: str, field_type: Any, value: Any) -> None:
    if field_type is str and not isinstance(value, str):
        raise ArgumentDecodeError(f"field '{name}' must be a string")
    if field_type is bool and not isinstance(value, bool):
        raise ArgumentDecodeError(f"field '{name}' must be a boolean")
    if field_type in (int, float) and (isinstance(value, bool) or not isinstance(value, (int, float))):
        raise ArgumentDecodeError(f"field '{name}' must be a number")
    if field_type is int and isinstance(value, float) and not value.is_integer():
        raise ArgumentDecodeError(f"field '{name}' must be an integer")
