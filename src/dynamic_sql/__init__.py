"""Dynamic SQL: conditional statement templates.

Statements are compiled once from literal text and decision units, then
evaluated against a parameter binding at call time:

    from dynamic_sql import choose, clause, compile_template, evaluate_template, has, is_false

    template = compile_template(
        "SELECT * FROM product p WHERE 1=1\\n",
        choose()
        .when(has("name")).then("AND p.name = :name")
        .when(is_false("@onSale")).then("AND p.on_sale = :onSale")
        .otherwise("AND p.status = 1"),
    )
    evaluate_template(template, {"onSale": False})
"""

from .binding import to_binding
from .compiler import (
    ChainBuilder,
    ParamRef,
    always,
    choose,
    clause,
    compile_format,
    compile_template,
    contains,
    contains_all,
    has,
    has_no,
    include,
    is_false,
    is_not_null,
    is_null,
    is_true,
    param,
)
from .comparator import CompareOp, compare
from .errors import (
    ChainConstructionError,
    DynamicSQLError,
    EvaluationError,
    ExpressionError,
    IncompleteChainError,
    MissingParameterError,
    StatementLoadError,
    TemplateCompileError,
)
from .evaluator import ConditionEvaluator, TemplateEvaluator, evaluate_template
from .ir import (
    Branch,
    BranchChain,
    CompiledTemplate,
    Condition,
    ContainsMode,
    NullOrEmpty,
)
from .loader import load_statements
from .registry import StatementRegistry, statements
from .shapes import ValueShape, shape_of

__all__ = [
    # Model
    "Branch",
    "BranchChain",
    "CompiledTemplate",
    "Condition",
    "ContainsMode",
    "NullOrEmpty",
    "CompareOp",
    "ValueShape",
    # Authoring
    "ChainBuilder",
    "ParamRef",
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
    # Evaluation
    "ConditionEvaluator",
    "TemplateEvaluator",
    "compare",
    "evaluate_template",
    "shape_of",
    "to_binding",
    # Registry
    "StatementRegistry",
    "load_statements",
    "statements",
    # Errors
    "ChainConstructionError",
    "DynamicSQLError",
    "EvaluationError",
    "ExpressionError",
    "IncompleteChainError",
    "MissingParameterError",
    "StatementLoadError",
    "TemplateCompileError",
]
