"""Value comparator.

Typed comparison and containment operators used by value-compare predicates
and by the boolean expression evaluator.

Null handling for the ordering operators is asymmetric and must stay exactly
as follows:

    GT / LT: false whenever either side is null
    GE:      (null, null) -> true, (null, x) -> false, (x, null) -> true
    LE:      (null, null) -> true, (null, x) -> true,  (x, null) -> false
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .shapes import ValueShape, container_items, shape_of

_ORDERED_SHAPES = (ValueShape.NUMBER, ValueShape.STRING)


class CompareOp(str, Enum):
    """Comparison operators."""

    EQ = "=="
    NEQ = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    IN = "in"
    NIN = "not in"

    def apply(self, param_value: Any, given_value: Any) -> bool:
        """Apply the operator to a bound parameter value and a given value."""
        return compare(self, param_value, given_value)


def compare(op: CompareOp, param_value: Any, given_value: Any) -> bool:
    """Compare a parameter value against a given value.

    The parameter must already be known to be bound; absent parameters are
    the caller's responsibility.
    """
    match op:
        case CompareOp.EQ:
            return values_equal(param_value, given_value)

        case CompareOp.NEQ:
            return not values_equal(param_value, given_value)

        case CompareOp.GT | CompareOp.LT:
            if param_value is None or given_value is None:
                return False
            return _ordered(op, param_value, given_value)

        case CompareOp.GE:
            if param_value is None:
                return given_value is None
            if given_value is None:
                return True
            return _ordered(op, param_value, given_value)

        case CompareOp.LE:
            if given_value is None:
                return param_value is None
            if param_value is None:
                return True
            return _ordered(op, param_value, given_value)

        case CompareOp.IN:
            return membership(param_value, given_value) is True

        case CompareOp.NIN:
            return membership(param_value, given_value) is False

        case _:
            raise ValueError(f"Unknown compare operator: {op}")


def values_equal(left: Any, right: Any) -> bool:
    """Structural equality. Booleans never equal numbers."""
    left_is_bool = shape_of(left) is ValueShape.BOOLEAN
    right_is_bool = shape_of(right) is ValueShape.BOOLEAN
    if left_is_bool != right_is_bool:
        return False
    return bool(left == right)


def membership(param_value: Any, given_value: Any) -> bool | None:
    """Membership of param_value in given_value.

    Returns:
        True/False for a definite answer, None when either operand is null or
        given_value is not a supported container.
    """
    if param_value is None or given_value is None:
        return None
    shape = shape_of(given_value)
    if not shape.is_container:
        return None
    return any(values_equal(param_value, item) for item in container_items(given_value, shape))


def _ordered(op: CompareOp, left: Any, right: Any) -> bool:
    """Order two non-null values of the same shape."""
    left_shape = shape_of(left)
    right_shape = shape_of(right)
    if left_shape is not right_shape:
        return False
    if left_shape not in _ORDERED_SHAPES and (
        left_shape is not ValueShape.UNSUPPORTED or type(left) is not type(right)
    ):
        return False

    try:
        match op:
            case CompareOp.GT:
                return bool(left > right)
            case CompareOp.GE:
                return bool(left >= right)
            case CompareOp.LT:
                return bool(left < right)
            case CompareOp.LE:
                return bool(left <= right)
            case _:
                raise ValueError(f"Not an ordering operator: {op}")
    except TypeError:
        return False
