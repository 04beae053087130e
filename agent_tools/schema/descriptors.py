import collections.abc
import types
from decimal import Decimal
from typing import Annotated, Any, Union, get_args, get_origin

SchemaFragment = str | dict[str, Any]

_PRIMITIVE_TAGS: dict[type, str] = {
    bool: "boolean",
    str: "string",
    int: "number",
    float: "number",
    Decimal: "number",
}

_SEQUENCE_ORIGINS = {
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
}

_MAPPING_ORIGINS = {
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
}


class SchemaError(ValueError):
    """Raised when a type cannot be expressed as a schema fragment."""


class MissingDescriptorError(SchemaError):
    """Raised when a type used in a schema position has no descriptor."""

    def __init__(self, tp: Any, where: str | None = None) -> None:
        self.type = tp
        self.where = where
        location = f" (field '{where}')" if where else ""
        super().__init__(f"No schema descriptor for type {_type_name(tp)}{location}")


def register_descriptor(tp: type, tag: str) -> None:
    """Map a host type to a primitive schema tag, e.g. ``register_descriptor(UUID, "string")``."""
    _PRIMITIVE_TAGS[tp] = tag


def describe(tp: Any) -> SchemaFragment:
    """Return the schema fragment for a type.

    Primitives map to fixed tags regardless of width, sequences to ``"<tag>[]"``
    and mappings to ``"Map<<key>, <value>>"``. Classes that define a
    ``__describe__`` classmethod (see ``schema_object``) supply their own,
    usually composite, fragment.
    """
    origin = get_origin(tp)

    if origin is Annotated:
        return describe(get_args(tp)[0])

    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) != 1:
            raise MissingDescriptorError(tp)
        return describe(members[0])

    if origin in _SEQUENCE_ORIGINS:
        args = get_args(tp)
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            # Fixed-length tuples have no array equivalent
            raise MissingDescriptorError(tp)
        if not args:
            raise MissingDescriptorError(tp)
        return f"{describe_tag(args[0])}[]"

    if origin in _MAPPING_ORIGINS:
        args = get_args(tp)
        if len(args) != 2:
            raise MissingDescriptorError(tp)
        return f"Map<{describe_tag(args[0])}, {describe_tag(args[1])}>"

    if isinstance(tp, type):
        if tp in _PRIMITIVE_TAGS:
            return _PRIMITIVE_TAGS[tp]
        describer = getattr(tp, "__describe__", None)
        if describer is not None:
            return describer()
        # Subclasses of str/int/float (e.g. str enums) take the base tag
        for base in tp.__mro__[1:]:
            if base in _PRIMITIVE_TAGS:
                return _PRIMITIVE_TAGS[base]

    raise MissingDescriptorError(tp)


def describe_tag(tp: Any) -> str:
    """Like ``describe`` but only accepts types whose fragment is a plain tag."""
    fragment = describe(tp)
    if not isinstance(fragment, str):
        raise SchemaError(
            f"Type {_type_name(tp)} describes to an object schema; "
            "only primitive, array and map types are allowed here"
        )
    return fragment


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__qualname__
    return repr(tp)
