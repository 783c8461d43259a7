"""Compiler package for dynamic SQL templates.

Phases:
1. conditions        - Build typed conditions (has, is_true, param(...).ge, ...)
2. chain_builder     - Pair conditions with texts: clause/include and choose chains
3. template_compiler - Interleave literal text and decision units
4. renderer          - Render a compiled template as engine template text
"""

from .chain_builder import ChainBuilder, IncludeBuilder, choose, clause, include
from .conditions import (
    ParamRef,
    always,
    contains,
    contains_all,
    has,
    has_no,
    is_false,
    is_not_null,
    is_null,
    is_true,
    param,
)
from .renderer import ConditionRenderer, RenderedCondition, render_template
from .template_compiler import compile_format, compile_template

__all__ = [
    "ChainBuilder",
    "ConditionRenderer",
    "IncludeBuilder",
    "ParamRef",
    "RenderedCondition",
    "always",
    "choose",
    "clause",
    "compile_format",
    "compile_template",
    "contains",
    "contains_all",
    "has",
    "has_no",
    "include",
    "is_false",
    "is_not_null",
    "is_null",
    "is_true",
    "param",
    "render_template",
]
