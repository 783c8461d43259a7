"""Template compiler.

Turns literal text interleaved with decision units into a CompiledTemplate.
Compilation is structural: decision units keep their conditions and texts,
nothing is evaluated, and literal text keeps its original order.

Two entry points:

    compile_template(
        "SELECT * FROM orders o WHERE 1=1\n",
        clause("AND o.status = :status", has("status")),
        "\n",
    )

    compile_format(
        '''
        SELECT * FROM orders o WHERE 1=1
        {status}
        ''',
        status=clause("AND o.status = :status", has("status")),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from string import Formatter
from typing import Union

from ..errors import TemplateCompileError
from ..ir import Branch, BranchChain, CompiledTemplate, DecisionSegment, LiteralSegment, Segment
from .chain_builder import ChainBuilder, IncludeBuilder

logger = logging.getLogger(__name__)

TemplatePart = Union[str, Branch, BranchChain, ChainBuilder]


def compile_template(*parts: TemplatePart) -> CompiledTemplate:
    """Compile literal strings and decision units, in order.

    ChainBuilders are closed with build(). Adjacent literal strings are merged
    and empty strings dropped.

    Raises:
        TemplateCompileError: If a part is not a string or decision unit.
    """
    return CompiledTemplate(segments=tuple(_merge(_to_segment(p) for p in parts)))


def compile_format(source: str, **units: TemplatePart) -> CompiledTemplate:
    """Compile a format string whose ``{name}`` fields are bound to ``units``.

    Use ``{{`` and ``}}`` for literal braces.

    Raises:
        TemplateCompileError: On malformed format syntax, positional or
            unknown fields, fields with a conversion or format spec, and
            units that no field references.
    """
    try:
        parsed = list(Formatter().parse(source))
    except ValueError as e:
        raise TemplateCompileError(f"Malformed template: {e}") from e

    parts: list[TemplatePart] = []
    used: set[str] = set()
    for literal_text, field_name, format_spec, conversion in parsed:
        if literal_text:
            parts.append(literal_text)
        if field_name is None:
            continue
        if not field_name:
            raise TemplateCompileError("Positional placeholder '{}' is not supported")
        if conversion or format_spec:
            raise TemplateCompileError(
                f"Placeholder '{field_name}' must not carry a conversion or format spec"
            )
        if field_name not in units:
            raise TemplateCompileError(
                f"Unknown placeholder '{field_name}'. Defined units: {sorted(units)}"
            )
        parts.append(units[field_name])
        used.add(field_name)

    unused = set(units) - used
    if unused:
        raise TemplateCompileError(f"Units not referenced by the template: {sorted(unused)}")

    return compile_template(*parts)


def _to_segment(part: TemplatePart) -> Segment:
    match part:
        case str():
            return LiteralSegment(text=part)
        case Branch() | BranchChain():
            return DecisionSegment(decision=part)
        case ChainBuilder():
            chain = part.build()
            if not chain.is_complete:
                logger.warning(
                    f"Compiling incomplete chain: when({chain.dangling!r}) has no then()"
                )
            return DecisionSegment(decision=chain)
        case IncludeBuilder():
            raise TemplateCompileError(
                f"include({part.text!r}) needs a condition: call .when(...) before compiling"
            )
        case _:
            raise TemplateCompileError(f"Unsupported template part: {type(part).__name__}")


def _merge(segments: Iterable[Segment]) -> list[Segment]:
    merged: list[Segment] = []
    for segment in segments:
        if isinstance(segment, LiteralSegment):
            if not segment.text:
                continue
            if merged and isinstance(merged[-1], LiteralSegment):
                merged[-1] = LiteralSegment(text=merged[-1].text + segment.text)
                continue
        merged.append(segment)
    return merged
