"""Typed model for dynamic SQL templates.

A statement is compiled once into a CompiledTemplate: an ordered sequence of
literal text runs and decision units. Decision units (Branch, BranchChain)
reference typed conditions; at call time each decision resolves to one of
its texts against a parameter binding.

The model is:
- Fully typed (discriminated unions on the ``type`` field)
- Immutable (every model is frozen)
- Serializable to/from JSON
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .comparator import CompareOp
from .expression import parse_expression


class FrozenModel(BaseModel):
    """Base for all template model types."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Enums
# =============================================================================


class ContainsMode(str, Enum):
    """How many of the named parameters must be bound."""

    ONE = "one"
    ALL = "all"


class NullOrEmpty(str, Enum):
    """Null/empty status checked by NullOrEmptyCondition."""

    NULL = "null"
    NOT_NULL = "not_null"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"


# =============================================================================
# Compare values (JSON encoding)
# =============================================================================

# Values JSON cannot represent natively are written as {"$kind": ..., "value": ...}
# so a restored template compares against the same types it was built with.
VALUE_KIND_KEY = "$kind"


def encode_value(value: Any) -> Any:
    """Encode a compare value for JSON, tagging non-native types.

    Raises:
        TypeError: If the value has no lossless JSON form.
    """
    match value:
        case None | bool() | int() | float() | str():
            return value
        case Decimal():
            return {VALUE_KIND_KEY: "decimal", "value": str(value)}
        case datetime():
            return {VALUE_KIND_KEY: "datetime", "value": value.isoformat()}
        case date():
            return {VALUE_KIND_KEY: "date", "value": value.isoformat()}
        case time():
            return {VALUE_KIND_KEY: "time", "value": value.isoformat()}
        case list():
            return [encode_value(v) for v in value]
        case tuple():
            return {VALUE_KIND_KEY: "tuple", "value": [encode_value(v) for v in value]}
        case set() | frozenset():
            items = sorted(value, key=repr)
            return {VALUE_KIND_KEY: "set", "value": [encode_value(v) for v in items]}
        case Mapping():
            if not all(isinstance(k, str) for k in value):
                raise TypeError("Mapping compare values must have string keys")
            return {k: encode_value(v) for k, v in value.items()}
        case _:
            raise TypeError(f"Compare value of type {type(value).__name__} cannot be serialized")


def decode_value(value: Any) -> Any:
    """Inverse of encode_value. Plain Python values pass through unchanged."""
    match value:
        case {"$kind": str(kind), "value": raw} if len(value) == 2:
            match kind:
                case "decimal":
                    return Decimal(raw)
                case "datetime":
                    return datetime.fromisoformat(raw)
                case "date":
                    return date.fromisoformat(raw)
                case "time":
                    return time.fromisoformat(raw)
                case "tuple":
                    return tuple(decode_value(v) for v in raw)
                case "set":
                    return frozenset(decode_value(v) for v in raw)
                case _:
                    raise ValueError(f"Unknown compare value kind: {kind}")
        case dict():
            return {k: decode_value(v) for k, v in value.items()}
        case list():
            return [decode_value(v) for v in value]
        case _:
            return value


# =============================================================================
# Conditions (things that evaluate to bool against a binding)
# =============================================================================


class HasParamCondition(FrozenModel):
    """Every named parameter is bound (a null value still counts)."""

    type: Literal["has_param"] = "has_param"
    names: tuple[str, ...] = Field(min_length=1)


class HasNoParamCondition(FrozenModel):
    """None of the named parameters is bound."""

    type: Literal["has_no_param"] = "has_no_param"
    names: tuple[str, ...] = Field(min_length=1)


class IsNullCondition(FrozenModel):
    """Every named parameter is absent or null."""

    type: Literal["is_null"] = "is_null"
    names: tuple[str, ...] = Field(min_length=1)


class IsNotNullCondition(FrozenModel):
    """Every named parameter is bound to a non-null value."""

    type: Literal["is_not_null"] = "is_not_null"
    names: tuple[str, ...] = Field(min_length=1)


class _ExpressionCondition(FrozenModel):
    expression: str

    @field_validator("expression")
    @classmethod
    def validate_expression(cls, v: str) -> str:
        """Parse eagerly so malformed expressions fail when the condition is built."""
        parse_expression(v)
        return v


class IsTrueCondition(_ExpressionCondition):
    """The expression evaluates to exactly true."""

    type: Literal["is_true"] = "is_true"


class IsFalseCondition(_ExpressionCondition):
    """The expression evaluates to exactly false."""

    type: Literal["is_false"] = "is_false"


class CompareCondition(FrozenModel):
    """Compare a bound parameter against a given value.

    The parameter must be bound; evaluating against a binding without it
    raises MissingParameterError.
    """

    type: Literal["compare"] = "compare"
    name: str
    op: CompareOp
    value: Any = None

    @field_validator("value", mode="before")
    @classmethod
    def restore_value(cls, v: Any) -> Any:
        return decode_value(v)

    @field_serializer("value", when_used="json")
    def serialize_value(self, v: Any) -> Any:
        return encode_value(v)


class ContainsCondition(FrozenModel):
    """One or all of the named parameters are bound."""

    type: Literal["contains"] = "contains"
    names: tuple[str, ...] = Field(min_length=1)
    mode: ContainsMode = ContainsMode.ONE


class NullOrEmptyCondition(FrozenModel):
    """Null/blank or empty-container check on a single parameter."""

    type: Literal["null_or_empty"] = "null_or_empty"
    name: str
    status: NullOrEmpty


class LiteralCondition(FrozenModel):
    """A constant truth value."""

    type: Literal["literal"] = "literal"
    value: bool


class NoneOfCondition(FrozenModel):
    """None of the inner conditions holds.

    This is the guard of a chain's else branch:
    NOT(p1) AND NOT(p2) AND ... AND NOT(pn).
    """

    type: Literal["none_of"] = "none_of"
    conditions: tuple[Condition, ...]


# Discriminated union of all condition types
Condition = Annotated[
    HasParamCondition
    | HasNoParamCondition
    | IsNullCondition
    | IsNotNullCondition
    | IsTrueCondition
    | IsFalseCondition
    | CompareCondition
    | ContainsCondition
    | NullOrEmptyCondition
    | LiteralCondition
    | NoneOfCondition,
    Field(discriminator="type"),
]

# Update forward refs for recursive types
NoneOfCondition.model_rebuild()


# =============================================================================
# Decisions
# =============================================================================


class Branch(FrozenModel):
    """Single if/else decision.

    Emits ``text`` when the condition holds, otherwise ``else_text`` (or
    nothing when there is no else).
    """

    type: Literal["branch"] = "branch"
    condition: Condition
    text: str
    else_text: str | None = None

    def otherwise(self, else_text: str) -> Branch:
        """Return a copy of this branch with an else text."""
        return self.model_copy(update={"else_text": else_text})


class WhenBranch(FrozenModel):
    """One guarded alternative of a chain."""

    condition: Condition
    text: str


class BranchChain(FrozenModel):
    """Multi-way decision, first match wins.

    ``dangling`` holds the condition of a trailing when() that never got its
    then(). Such a chain is incomplete and renders as empty text.
    """

    type: Literal["chain"] = "chain"
    branches: tuple[WhenBranch, ...] = ()
    else_text: str | None = None
    dangling: Condition | None = None

    @property
    def is_complete(self) -> bool:
        return self.dangling is None

    def else_condition(self) -> NoneOfCondition:
        """Guard under which the else text is selected."""
        return NoneOfCondition(conditions=tuple(b.condition for b in self.branches))


# Discriminated union of decision units
Decision = Annotated[Branch | BranchChain, Field(discriminator="type")]


# =============================================================================
# Compiled template
# =============================================================================


class LiteralSegment(FrozenModel):
    """Literal text, passed through verbatim."""

    type: Literal["literal"] = "literal"
    text: str


class DecisionSegment(FrozenModel):
    """Reference to a decision unit."""

    type: Literal["decision"] = "decision"
    decision: Decision


Segment = Annotated[LiteralSegment | DecisionSegment, Field(discriminator="type")]


class CompiledTemplate(FrozenModel):
    """Ordered literal/decision segments of one statement.

    Built once per statement and evaluated many times.
    """

    segments: tuple[Segment, ...] = ()

    @property
    def decisions(self) -> list[Branch | BranchChain]:
        return [s.decision for s in self.segments if isinstance(s, DecisionSegment)]

    def render(self) -> str:
        """Render as engine template text (``#{...}`` fragments)."""
        # Lazy import to avoid circular dependency
        from .compiler.renderer import render_template

        return render_template(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> CompiledTemplate:
        """Deserialize from JSON string."""
        return cls.model_validate_json(json_str)
