"""Condition factories for authoring templates.

    has("status")                         -> HasParamCondition
    is_true("@urgent == 1")               -> IsTrueCondition
    param("age").ge(18)                   -> CompareCondition
    param("dd").is_(NullOrEmpty.NULL)     -> NullOrEmptyCondition
"""

from __future__ import annotations

from typing import Any

from ..comparator import CompareOp
from ..ir import (
    CompareCondition,
    ContainsCondition,
    ContainsMode,
    HasNoParamCondition,
    HasParamCondition,
    IsFalseCondition,
    IsNotNullCondition,
    IsNullCondition,
    IsTrueCondition,
    LiteralCondition,
    NullOrEmpty,
    NullOrEmptyCondition,
)


def has(*names: str) -> HasParamCondition:
    """All of ``names`` are bound (null values count)."""
    return HasParamCondition(names=names)


def has_no(*names: str) -> HasNoParamCondition:
    """None of ``names`` is bound."""
    return HasNoParamCondition(names=names)


def is_null(*names: str) -> IsNullCondition:
    return IsNullCondition(names=names)


def is_not_null(*names: str) -> IsNotNullCondition:
    return IsNotNullCondition(names=names)


def is_true(expression: str) -> IsTrueCondition:
    """The expression evaluates to true. Reference parameters as ``@name``."""
    return IsTrueCondition(expression=expression)


def is_false(expression: str) -> IsFalseCondition:
    """The expression evaluates to false. Reference parameters as ``@name``."""
    return IsFalseCondition(expression=expression)


def contains(*names: str, mode: ContainsMode = ContainsMode.ONE) -> ContainsCondition:
    """At least one of ``names`` is bound (or all of them with ContainsMode.ALL)."""
    return ContainsCondition(names=names, mode=mode)


def contains_all(*names: str) -> ContainsCondition:
    return ContainsCondition(names=names, mode=ContainsMode.ALL)


def always(value: bool = True) -> LiteralCondition:
    return LiteralCondition(value=value)


def param(name: str) -> ParamRef:
    """Start a value check on a single parameter."""
    return ParamRef(name)


class ParamRef:
    """Builds value comparisons and null/empty checks on one parameter."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"ParamRef({self.name!r})"

    def compare(self, op: CompareOp, value: Any) -> CompareCondition:
        return CompareCondition(name=self.name, op=op, value=value)

    def eq(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.EQ, value)

    def ne(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.NEQ, value)

    def gt(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.GT, value)

    def ge(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.GE, value)

    def lt(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.LT, value)

    def le(self, value: Any) -> CompareCondition:
        return self.compare(CompareOp.LE, value)

    def in_(self, values: Any) -> CompareCondition:
        """Bound value is one of ``values`` (list, tuple, set, or a mapping's values)."""
        return self.compare(CompareOp.IN, values)

    def not_in(self, values: Any) -> CompareCondition:
        return self.compare(CompareOp.NIN, values)

    def is_(self, status: NullOrEmpty) -> NullOrEmptyCondition:
        return NullOrEmptyCondition(name=self.name, status=status)
