"""Boolean expressions over bound parameters.

IsTrue/IsFalse conditions carry a free-form expression in which ``@name``
denotes the value bound to ``name``. This module parses those expressions
and evaluates them directly, so no external scripting engine is needed.

Supported syntax:
    @status == 'PAYED'          equality (``=`` is accepted for ``==``)
    @age >= 18                  ordering: > >= < <=, inequality: != <>
    @kind in {'a', 'b'}         membership against a list literal, [..] or {..}
    @onSale                     bare parameter
    a and b, a && b             conjunction
    a or b, a || b              disjunction
    not a, !a                   negation
    true false null 'text' "text" 12 -3.5

Comparisons go through the value comparator, so null and type-mismatch
semantics match value-compare predicates.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from .comparator import CompareOp, compare
from .errors import ExpressionError

# In rendered engine text, @name becomes #p['name']
PARAM_PATTERN = re.compile(r"@(\w+)")

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<param>@\w+)
    |(?P<number>-?\d+(?:\.\d+)?)
    |(?P<string>'(?:[^']|'')*'|"(?:[^"\\]|\\.)*")
    |(?P<op>==|!=|<>|>=|<=|&&|\|\||[=<>!(),\[\]{}])
    |(?P<word>[A-Za-z_]\w*)
    """,
    re.VERBOSE,
)

_COMPARE_TOKENS = {
    "==": CompareOp.EQ,
    "=": CompareOp.EQ,
    "!=": CompareOp.NEQ,
    "<>": CompareOp.NEQ,
    ">": CompareOp.GT,
    ">=": CompareOp.GE,
    "<": CompareOp.LT,
    "<=": CompareOp.LE,
}

_KEYWORD_CONSTANTS = {"true": True, "false": False, "null": None}

_LIST_CLOSE = {"[": "]", "{": "}"}


# =============================================================================
# Expression nodes
# =============================================================================


@dataclass(frozen=True)
class Param:
    name: str


@dataclass(frozen=True)
class Const:
    value: Any


@dataclass(frozen=True)
class ListExpr:
    items: tuple[Node, ...]


@dataclass(frozen=True)
class Not:
    operand: Node


@dataclass(frozen=True)
class And:
    operands: tuple[Node, ...]


@dataclass(frozen=True)
class Or:
    operands: tuple[Node, ...]


@dataclass(frozen=True)
class Compare:
    op: CompareOp
    left: Node
    right: Node


Node = Param | Const | ListExpr | Not | And | Or | Compare


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


# =============================================================================
# Tokenizer
# =============================================================================


def tokenize(expression: str) -> list[Token]:
    """Split an expression into tokens."""
    tokens: list[Token] = []
    position = 0
    while position < len(expression):
        match = _TOKEN_PATTERN.match(expression, position)
        if match is None:
            raise ExpressionError(
                f"Unexpected character {expression[position]!r} at {position} in: {expression}"
            )
        kind = match.lastgroup
        if kind != "space":
            tokens.append(Token(kind=kind, text=match.group(), position=position))
        position = match.end()
    return tokens


# =============================================================================
# Parser
# =============================================================================


class _Parser:
    """Recursive-descent parser producing an expression tree."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise ExpressionError("Empty boolean expression")
        node = self._or()
        if self._peek() is not None:
            self._fail(f"Unexpected token {self._peek().text!r}")
        return node

    def _peek(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            self._fail("Unexpected end of expression")
        self.index += 1
        return token

    def _accept(self, *texts: str) -> Token | None:
        token = self._peek()
        if token is not None and token.text.lower() in texts and token.kind in ("op", "word"):
            self.index += 1
            return token
        return None

    def _expect(self, text: str) -> Token:
        token = self._accept(text)
        if token is None:
            found = self._peek().text if self._peek() else "end of expression"
            self._fail(f"Expected {text!r} but found {found!r}")
        return token

    def _fail(self, message: str) -> None:
        raise ExpressionError(f"{message} in: {self.expression}")

    def _or(self) -> Node:
        operands = [self._and()]
        while self._accept("or", "||"):
            operands.append(self._and())
        return operands[0] if len(operands) == 1 else Or(tuple(operands))

    def _and(self) -> Node:
        operands = [self._unary()]
        while self._accept("and", "&&"):
            operands.append(self._unary())
        return operands[0] if len(operands) == 1 else And(tuple(operands))

    def _unary(self) -> Node:
        if self._accept("not", "!"):
            return Not(self._unary())
        return self._comparison()

    def _comparison(self) -> Node:
        left = self._operand()
        token = self._peek()
        if token is None:
            return left

        if token.kind == "op" and token.text in _COMPARE_TOKENS:
            self.index += 1
            return Compare(_COMPARE_TOKENS[token.text], left, self._operand())

        if self._accept("in"):
            return Compare(CompareOp.IN, left, self._operand())

        if token.kind == "word" and token.text.lower() == "not":
            following = self.tokens[self.index + 1] if self.index + 1 < len(self.tokens) else None
            if following is not None and following.text.lower() == "in":
                self.index += 2
                return Compare(CompareOp.NIN, left, self._operand())

        return left

    def _operand(self) -> Node:
        token = self._advance()
        match token.kind:
            case "param":
                return Param(token.text[1:])
            case "number":
                text = token.text
                return Const(float(text) if "." in text else int(text))
            case "string":
                return Const(_unquote(token.text))
            case "word" if token.text.lower() in _KEYWORD_CONSTANTS:
                return Const(_KEYWORD_CONSTANTS[token.text.lower()])
            case "op" if token.text == "(":
                node = self._or()
                self._expect(")")
                return node
            case "op" if token.text in _LIST_CLOSE:
                return self._list(_LIST_CLOSE[token.text])
            case _:
                self._fail(f"Unexpected token {token.text!r} at {token.position}")

    def _list(self, closing: str) -> ListExpr:
        items: list[Node] = []
        if self._accept(closing):
            return ListExpr(())
        while True:
            items.append(self._operand())
            if self._accept(closing):
                return ListExpr(tuple(items))
            self._expect(",")


def _unquote(text: str) -> str:
    body = text[1:-1]
    if text[0] == "'":
        return body.replace("''", "'")
    return re.sub(r"\\(.)", r"\1", body)


@lru_cache(maxsize=1024)
def parse_expression(expression: str) -> Node:
    """Parse an expression, caching the tree by its source text.

    Raises:
        ExpressionError: If the expression is malformed.
    """
    return _Parser(expression).parse()


# =============================================================================
# Evaluation
# =============================================================================


def evaluate_expression(expression: str, binding: Mapping[str, Any]) -> Any:
    """Substitute every @name from the binding and evaluate.

    Unbound names evaluate to null.
    """
    return evaluate_node(parse_expression(expression), binding)


def evaluate_node(node: Node, binding: Mapping[str, Any]) -> Any:
    """Evaluate a parsed expression tree."""
    match node:
        case Param(name=name):
            return binding.get(name)

        case Const(value=value):
            return value

        case ListExpr(items=items):
            return [evaluate_node(item, binding) for item in items]

        case Not(operand=operand):
            return evaluate_node(operand, binding) is not True

        case And(operands=operands):
            return all(evaluate_node(o, binding) is True for o in operands)

        case Or(operands=operands):
            return any(evaluate_node(o, binding) is True for o in operands)

        case Compare(op=op, left=left, right=right):
            return compare(op, evaluate_node(left, binding), evaluate_node(right, binding))

        case _:
            raise ValueError(f"Unknown expression node: {type(node)}")


def referenced_params(expression: str) -> list[str]:
    """Names referenced with @name, in order of first appearance."""
    seen: dict[str, None] = {}
    for match in PARAM_PATTERN.finditer(expression):
        seen.setdefault(match.group(1), None)
    return list(seen)


def to_engine_syntax(expression: str) -> str:
    """Rewrite @name references into the engine's #p['name'] form."""
    return PARAM_PATTERN.sub(lambda m: f"#p['{m.group(1)}']", expression)
