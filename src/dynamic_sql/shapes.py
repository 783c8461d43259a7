"""Runtime value shapes.

Parameter values are dynamically typed. Every predicate that depends on the
kind of value it sees dispatches on this closed set of shapes instead of
probing types ad hoc. Anything outside the set is UNSUPPORTED.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping, Sequence, Set
from decimal import Decimal
from enum import Enum
from typing import Any

# Sentinel for "name not bound", distinct from an explicit None
MISSING: Any = object()


class ValueShape(str, Enum):
    """Closed set of value shapes understood by predicates."""

    ABSENT = "absent"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    SET = "set"
    MAPPING = "mapping"
    UNSUPPORTED = "unsupported"

    @property
    def is_container(self) -> bool:
        return self in (ValueShape.SEQUENCE, ValueShape.SET, ValueShape.MAPPING)


def shape_of(value: Any) -> ValueShape:
    """Classify a runtime value."""
    if value is MISSING:
        return ValueShape.ABSENT

    match value:
        case None:
            return ValueShape.NULL
        case bool():
            return ValueShape.BOOLEAN
        case Decimal() | numbers.Real():
            return ValueShape.NUMBER
        case str():
            return ValueShape.STRING
        case bytes() | bytearray() | memoryview():
            return ValueShape.UNSUPPORTED
        case Mapping():
            return ValueShape.MAPPING
        case Set():
            return ValueShape.SET
        case Sequence():
            return ValueShape.SEQUENCE
        case _:
            return ValueShape.UNSUPPORTED


def lookup(binding: Mapping[str, Any], name: str) -> tuple[ValueShape, Any]:
    """Look up a parameter and classify it.

    Returns:
        (shape, value) where value is MISSING when the name is not bound.
    """
    value = binding.get(name, MISSING)
    return shape_of(value), value


def container_items(value: Any, shape: ValueShape) -> list[Any]:
    """Items a membership test runs against. Mappings contribute their values."""
    match shape:
        case ValueShape.MAPPING:
            return list(value.values())
        case ValueShape.SEQUENCE | ValueShape.SET:
            return list(value)
        case _:
            raise ValueError(f"Value of shape {shape.value} is not a container")
