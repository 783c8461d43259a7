"""Tests for boolean expressions over bound parameters."""

import pytest

from dynamic_sql.comparator import CompareOp
from dynamic_sql.errors import ExpressionError
from dynamic_sql.expression import (
    And,
    Compare,
    Const,
    Not,
    Or,
    Param,
    evaluate_expression,
    parse_expression,
    referenced_params,
    to_engine_syntax,
)


class TestParse:
    def test_bare_param(self):
        assert parse_expression("@onSale") == Param("onSale")

    def test_comparison(self):
        assert parse_expression("@urgent == 1") == Compare(CompareOp.EQ, Param("urgent"), Const(1))

    def test_single_equals_is_equality(self):
        node = parse_expression("@status='PAYED'")
        assert node == Compare(CompareOp.EQ, Param("status"), Const("PAYED"))

    def test_precedence(self):
        """not binds tighter than and, and tighter than or."""
        node = parse_expression("not @a and @b or @c")
        assert isinstance(node, Or)
        assert node.operands[0] == And((Not(Param("a")), Param("b")))

    def test_quoted_quote(self):
        assert parse_expression("@s == 'it''s'").right == Const("it's")

    def test_not_in(self):
        node = parse_expression("@kk not in [10, 20]")
        assert node.op == CompareOp.NIN

    @pytest.mark.parametrize(
        "expression",
        ["", "   ", "@a ==", "(@a", "@a @b", "@a == 'open", "foo", "@a in [1 2]", "#"],
    )
    def test_malformed(self, expression):
        with pytest.raises(ExpressionError):
            parse_expression(expression)


class TestEvaluate:
    def test_equality(self):
        assert evaluate_expression("@urgent == 1", {"urgent": 1}) is True
        assert evaluate_expression("@urgent == 1", {"urgent": 0}) is False

    def test_unbound_is_null(self):
        assert evaluate_expression("@onSale", {}) is None
        assert evaluate_expression("@onSale == null", {}) is True

    def test_bare_value_passes_through(self):
        assert evaluate_expression("@onSale", {"onSale": False}) is False
        assert evaluate_expression("@count", {"count": 3}) == 3

    def test_boolean_operators(self):
        binding = {"a": True, "b": False}
        assert evaluate_expression("@a and !@b", binding) is True
        assert evaluate_expression("@a && @b", binding) is False
        assert evaluate_expression("@b || @a", binding) is True

    def test_non_boolean_operands_are_not_true(self):
        assert evaluate_expression("@n and true", {"n": 1}) is False
        assert evaluate_expression("not @n", {"n": 1}) is True

    def test_membership(self):
        assert evaluate_expression("@kind in {'a', 'b'}", {"kind": "a"}) is True
        assert evaluate_expression("@kind not in ['a', 'b']", {"kind": "c"}) is True

    def test_ordering_uses_null_edges(self):
        assert evaluate_expression("@age >= null", {"age": 5}) is True
        assert evaluate_expression("@age > 18", {}) is False


class TestHelpers:
    def test_referenced_params(self):
        assert referenced_params("@a == 1 and @b or @a") == ["a", "b"]

    def test_engine_syntax(self):
        assert to_engine_syntax("@status == 'X'") == "#p['status'] == 'X'"
