"""Render compiled templates as expression-engine template text.

The engine form is the raw statement text an expression-template engine
would execute: literal text with ``#{condition ? 'true text':'false text'}``
fragments, where ``#p`` is the parameter map. The evaluator never needs it;
it exists for inspection (registry ``raw()``, the HTTP/CLI ``show``) and
for handing statements to such an engine.

    #{#p.containsKey('status') ? 'AND o.status = :status':''}
    #{(#p['urgent'] == 1) == true ? 'AND o.urgent = :urgent':''}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..comparator import CompareOp
from ..expression import to_engine_syntax
from ..ir import (
    Branch,
    BranchChain,
    CompareCondition,
    CompiledTemplate,
    Condition,
    ContainsCondition,
    ContainsMode,
    DecisionSegment,
    HasNoParamCondition,
    HasParamCondition,
    IsFalseCondition,
    IsNotNullCondition,
    IsNullCondition,
    IsTrueCondition,
    LiteralCondition,
    LiteralSegment,
    NoneOfCondition,
    NullOrEmpty,
    NullOrEmptyCondition,
)
from ..shapes import ValueShape, shape_of


@dataclass(frozen=True)
class RenderedCondition:
    """Textual form of a condition.

    ``outer_edge`` says whether fragments built from it are wrapped in
    ``#{...}`` (top-level fragments) or left bare (nested in a composite).
    """

    text: str
    outer_edge: bool = True

    def fragment(self, true_text: str, false_text: str = "") -> str:
        body = f"{self.text} ? {quote(true_text)}:{quote(false_text)}"
        return f"#{{{body}}}" if self.outer_edge else body


class ConditionRenderer:
    """Renders Condition objects to engine predicate text."""

    def render(self, condition: Condition, outer_edge: bool = True) -> RenderedCondition:
        return RenderedCondition(text=self.text(condition), outer_edge=outer_edge)

    def text(self, condition: Condition) -> str:
        match condition:
            case HasParamCondition(names=names):
                return " and ".join(f"#p.containsKey('{n}')" for n in names)

            case HasNoParamCondition(names=names):
                return " and ".join(f"#p.containsKey('{n}') == false" for n in names)

            case IsNullCondition(names=names):
                return " and ".join(f"{_ref(n)} == null" for n in names)

            case IsNotNullCondition(names=names):
                return " and ".join(f"{_ref(n)} != null" for n in names)

            case IsTrueCondition(expression=expression):
                return f"({to_engine_syntax(expression.strip())}) == true"

            case IsFalseCondition(expression=expression):
                return f"({to_engine_syntax(expression.strip())}) == false"

            case CompareCondition(name=name, op=op, value=value):
                return self._compare_text(name, op, value)

            case ContainsCondition(names=names, mode=mode):
                joiner = " and " if mode == ContainsMode.ALL else " or "
                return "(" + joiner.join(f"#p.containsKey('{n}')" for n in names) + ")"

            case NullOrEmptyCondition(name=name, status=status):
                return self._null_or_empty_text(name, status)

            case LiteralCondition(value=value):
                return literal(value)

            case NoneOfCondition(conditions=conditions):
                if not conditions:
                    return "true"
                return " and ".join(f"!({self.text(c)})" for c in conditions)

            case _:
                raise ValueError(f"Unknown condition type: {type(condition)}")

    def _compare_text(self, name: str, op: CompareOp, value: Any) -> str:
        match op:
            case CompareOp.IN | CompareOp.NIN:
                method = "containsValue" if shape_of(value) is ValueShape.MAPPING else "contains"
                text = f"{literal(value)}.{method}({_ref(name)})"
                return text if op == CompareOp.IN else f"!{text}"
            case _:
                return f"{_ref(name)} {op.value} {literal(value)}"

    def _null_or_empty_text(self, name: str, status: NullOrEmpty) -> str:
        blank = f"({_ref(name)} == null or {_ref(name)}.toString().trim().isEmpty())"
        container = (
            f"({_ref(name)} instanceof T(java.util.Collection)"
            f" or {_ref(name)} instanceof T(java.util.Map))"
        )
        match status:
            case NullOrEmpty.NULL:
                return blank
            case NullOrEmpty.NOT_NULL:
                return f"!{blank}"
            case NullOrEmpty.EMPTY:
                return f"{container} and {_ref(name)}.isEmpty()"
            case NullOrEmpty.NOT_EMPTY:
                return f"{container} and !{_ref(name)}.isEmpty()"


def render_branch(branch: Branch, renderer: ConditionRenderer | None = None) -> str:
    renderer = renderer or ConditionRenderer()
    return renderer.render(branch.condition).fragment(branch.text, branch.else_text or "")


def render_chain(chain: BranchChain, renderer: ConditionRenderer | None = None) -> str:
    """Render a chain as one fragment per line.

    Each branch's guard also negates the branches before it, so an engine
    evaluating the fragments independently still selects at most one branch.
    The else fragment, when present, is guarded by the negation of every
    branch predicate.
    """
    if not chain.is_complete:
        return ""
    renderer = renderer or ConditionRenderer()

    lines: list[str] = []
    earlier: list[str] = []
    for branch in chain.branches:
        own = renderer.text(branch.condition)
        guard = " and ".join([*(f"!({t})" for t in earlier), f"({own})"]) if earlier else own
        lines.append(RenderedCondition(guard).fragment(branch.text))
        earlier.append(own)

    if chain.else_text is not None:
        guard = f"({renderer.text(chain.else_condition())}) == true"
        lines.append(RenderedCondition(guard).fragment(chain.else_text))

    return "\n".join(lines)


def render_template(template: CompiledTemplate) -> str:
    """Render a whole template as engine text."""
    renderer = ConditionRenderer()
    out: list[str] = []
    for segment in template.segments:
        match segment:
            case LiteralSegment(text=text):
                out.append(text)
            case DecisionSegment(decision=Branch() as branch):
                out.append(render_branch(branch, renderer))
            case DecisionSegment(decision=BranchChain() as chain):
                out.append(render_chain(chain, renderer))
    return "".join(out)


def quote(text: str) -> str:
    """Quote text as an engine string literal."""
    return "'" + text.replace("'", "''") + "'"


def literal(value: Any) -> str:
    """Render a Python value as an engine literal."""
    shape = shape_of(value)
    match shape:
        case ValueShape.NULL:
            return "null"
        case ValueShape.BOOLEAN:
            return "true" if value else "false"
        case ValueShape.NUMBER:
            return str(value)
        case ValueShape.STRING:
            return quote(value)
        case ValueShape.MAPPING:
            return "{" + ",".join(f"{literal(k)}:{literal(v)}" for k, v in value.items()) + "}"
        case ValueShape.SEQUENCE | ValueShape.SET:
            items = sorted(value, key=repr) if shape is ValueShape.SET else value
            return "{" + ",".join(literal(v) for v in items) + "}"
        case _:
            return quote(str(value))


def _ref(name: str) -> str:
    return f"#p['{name}']"
