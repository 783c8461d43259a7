"""Runtime evaluator for compiled templates.

ConditionEvaluator decides conditions against a parameter binding;
TemplateEvaluator resolves every decision of a compiled template, joins the
results with the literal text and normalizes whitespace.

Both are pure: the binding is never mutated, so evaluating the same
template with the same binding always produces the same text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from .binding import to_binding
from .comparator import compare
from .errors import IncompleteChainError, MissingParameterError
from .expression import evaluate_expression
from .ir import (
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
from .shapes import ValueShape, lookup

logger = logging.getLogger(__name__)

# A whitespace-only line together with its line terminator
EMPTY_LINE_PATTERN = re.compile(r"^\s*$(\n|\r\n)", re.MULTILINE)


# =============================================================================
# Condition Evaluator
# =============================================================================


class ConditionEvaluator:
    """Evaluates Condition objects to boolean results."""

    def evaluate(self, condition: Condition, binding: Mapping[str, Any]) -> bool:
        """Evaluate a condition against a binding.

        Raises:
            MissingParameterError: If a value comparison names an unbound parameter.
        """
        match condition:
            case HasParamCondition(names=names):
                return all(n in binding for n in names)

            case HasNoParamCondition(names=names):
                return not any(n in binding for n in names)

            case IsNullCondition(names=names):
                return all(binding.get(n) is None for n in names)

            case IsNotNullCondition(names=names):
                return all(binding.get(n) is not None for n in names)

            case IsTrueCondition(expression=expression):
                return evaluate_expression(expression, binding) is True

            case IsFalseCondition(expression=expression):
                return evaluate_expression(expression, binding) is False

            case CompareCondition(name=name, op=op, value=value):
                if name not in binding:
                    raise MissingParameterError(name)
                return compare(op, binding[name], value)

            case ContainsCondition(names=names, mode=ContainsMode.ALL):
                return all(n in binding for n in names)

            case ContainsCondition(names=names):
                return any(n in binding for n in names)

            case NullOrEmptyCondition(name=name, status=status):
                return self._evaluate_null_or_empty(name, status, binding)

            case LiteralCondition(value=value):
                return value

            case NoneOfCondition(conditions=conditions):
                return not any(self.evaluate(c, binding) for c in conditions)

            case _:
                raise ValueError(f"Unknown condition type: {type(condition)}")

    def _evaluate_null_or_empty(
        self, name: str, status: NullOrEmpty, binding: Mapping[str, Any]
    ) -> bool:
        """Null/blank and empty-container checks.

        NULL holds for absent, null and blank strings, so a blank string is
        neither "null" for NOT_NULL nor a value. EMPTY/NOT_EMPTY only apply to
        containers; every other shape is indeterminate and yields false.
        """
        shape, value = lookup(binding, name)
        match status:
            case NullOrEmpty.NULL:
                return _is_null_or_blank(shape, value)
            case NullOrEmpty.NOT_NULL:
                return not _is_null_or_blank(shape, value)
            case NullOrEmpty.EMPTY:
                return shape.is_container and len(value) == 0
            case NullOrEmpty.NOT_EMPTY:
                return shape.is_container and len(value) > 0
            case _:
                raise ValueError(f"Unknown null/empty status: {status}")


def _is_null_or_blank(shape: ValueShape, value: Any) -> bool:
    match shape:
        case ValueShape.ABSENT | ValueShape.NULL:
            return True
        case ValueShape.STRING:
            return not value.strip()
        case _:
            return False


# =============================================================================
# Template Evaluator
# =============================================================================


class TemplateEvaluator:
    """Evaluates compiled templates to final statement text."""

    def __init__(self, condition_evaluator: ConditionEvaluator | None = None):
        self.conditions = condition_evaluator or ConditionEvaluator()

    def evaluate(self, template: CompiledTemplate, params: Any = None) -> str:
        """Evaluate a template against a parameter binding.

        Args:
            template: The compiled template.
            params: Mapping, None (empty binding), or a parameter object
                (pydantic model, dataclass, plain object).

        Returns:
            The normalized statement text.

        Raises:
            EvaluationError: If a decision cannot be resolved, e.g. a value
                comparison on an unbound parameter (MissingParameterError).
        """
        binding = to_binding(params)
        parts: list[str] = []
        for segment in template.segments:
            match segment:
                case LiteralSegment(text=text):
                    parts.append(text)
                case DecisionSegment(decision=decision):
                    parts.append(self.resolve(decision, binding))
        return normalize_whitespace("".join(parts))

    def resolve(self, decision: Branch | BranchChain, binding: Mapping[str, Any]) -> str:
        """Select the text of one decision unit."""
        match decision:
            case Branch(condition=condition, text=text, else_text=else_text):
                if self.conditions.evaluate(condition, binding):
                    return text
                return else_text or ""

            case BranchChain() as chain:
                return self._resolve_chain(chain, binding)

            case _:
                raise ValueError(f"Unknown decision type: {type(decision)}")

    def _resolve_chain(self, chain: BranchChain, binding: Mapping[str, Any]) -> str:
        """First matching branch wins; the else text only when none matched."""
        if not chain.is_complete:
            error = IncompleteChainError(
                f"Chain has a when({chain.dangling!r}) without then(); rendering it as empty text"
            )
            logger.error(str(error))
            return ""

        for index, branch in enumerate(chain.branches):
            if self.conditions.evaluate(branch.condition, binding):
                logger.debug(f"Chain branch {index} selected")
                return branch.text

        if chain.else_text is not None:
            logger.debug("Chain else selected")
            return chain.else_text
        return ""


def normalize_whitespace(text: str) -> str:
    """Delete whitespace-only lines (with their terminators), then trim."""
    return EMPTY_LINE_PATTERN.sub("", text).strip()


def evaluate_template(template: CompiledTemplate, params: Any = None) -> str:
    """Convenience function to evaluate a template."""
    return TemplateEvaluator().evaluate(template, params)
