"""Tests for condition and template evaluation."""

import logging

import pytest

from dynamic_sql import (
    ConditionEvaluator,
    MissingParameterError,
    NullOrEmpty,
    always,
    choose,
    clause,
    compile_template,
    contains,
    contains_all,
    evaluate_template,
    has,
    has_no,
    is_false,
    is_not_null,
    is_null,
    is_true,
    param,
)
from dynamic_sql.evaluator import normalize_whitespace
from dynamic_sql.ir import NoneOfCondition

# =============================================================================
# ConditionEvaluator Tests
# =============================================================================


@pytest.fixture
def conditions() -> ConditionEvaluator:
    return ConditionEvaluator()


class TestConditionEvaluator:
    """Tests for ConditionEvaluator."""

    def test_has_counts_null_values(self, conditions):
        assert conditions.evaluate(has("a"), {"a": None}) is True
        assert conditions.evaluate(has("a", "b"), {"a": 1}) is False

    def test_has_no(self, conditions):
        assert conditions.evaluate(has_no("a", "b"), {"c": 1}) is True
        assert conditions.evaluate(has_no("a", "b"), {"b": 1}) is False

    def test_is_null_and_not_null(self, conditions):
        assert conditions.evaluate(is_null("a"), {}) is True
        assert conditions.evaluate(is_null("a"), {"a": None}) is True
        assert conditions.evaluate(is_null("a"), {"a": 0}) is False
        assert conditions.evaluate(is_not_null("a"), {"a": ""}) is True
        assert conditions.evaluate(is_not_null("a"), {}) is False

    def test_is_true_requires_exact_boolean(self, conditions):
        assert conditions.evaluate(is_true("@urgent == 1"), {"urgent": 1}) is True
        assert conditions.evaluate(is_true("@flag"), {"flag": 1}) is False
        assert conditions.evaluate(is_true("@flag"), {}) is False

    def test_is_false_requires_exact_boolean(self, conditions):
        assert conditions.evaluate(is_false("@onSale"), {"onSale": False}) is True
        assert conditions.evaluate(is_false("@onSale"), {}) is False
        assert conditions.evaluate(is_false("@onSale"), {"onSale": 0}) is False

    def test_compare(self, conditions):
        assert conditions.evaluate(param("age").ge(18), {"age": 20}) is True
        assert conditions.evaluate(param("age").ge(18), {"age": None}) is False

    def test_compare_missing_parameter_raises(self, conditions):
        with pytest.raises(MissingParameterError) as exc_info:
            conditions.evaluate(param("age").ge(18), {})
        assert exc_info.value.name == "age"

    def test_contains(self, conditions):
        assert conditions.evaluate(contains("a", "b"), {"b": 1}) is True
        assert conditions.evaluate(contains("a", "b"), {}) is False
        assert conditions.evaluate(contains_all("a", "b"), {"b": 1}) is False
        assert conditions.evaluate(contains_all("a", "b"), {"a": 1, "b": 1}) is True

    def test_literal_and_none_of(self, conditions):
        assert conditions.evaluate(always(), {}) is True
        assert conditions.evaluate(NoneOfCondition(conditions=(has("a"), has("b"))), {}) is True
        assert conditions.evaluate(NoneOfCondition(conditions=(has("a"),)), {"a": 1}) is False


class TestNullOrEmpty:
    """Null/blank and empty checks, including scenario C."""

    @pytest.mark.parametrize(
        "binding,expected",
        [
            ({"dd": " "}, True),
            ({"dd": ""}, True),
            ({"dd": None}, True),
            ({}, True),
            ({"dd": "x"}, False),
        ],
    )
    def test_null(self, conditions, binding, expected):
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.NULL), binding) is expected

    def test_not_null(self, conditions):
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.NOT_NULL), {"dd": "x"}) is True
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.NOT_NULL), {"dd": "  "}) is False
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.NOT_NULL), {"dd": 0}) is True

    @pytest.mark.parametrize(
        "value,empty,not_empty",
        [
            ([], True, False),
            ([1], False, True),
            ({}, True, False),
            ({"k": 1}, False, True),
            (set(), True, False),
            ("", False, False),
            (5, False, False),
            (None, False, False),
        ],
    )
    def test_empty_only_applies_to_containers(self, conditions, value, empty, not_empty):
        binding = {"dd": value}
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.EMPTY), binding) is empty
        assert conditions.evaluate(param("dd").is_(NullOrEmpty.NOT_EMPTY), binding) is not_empty


# =============================================================================
# TemplateEvaluator Tests
# =============================================================================


class TestScenarios:
    def test_single_branch(self):
        """WHERE 1=1 plus an optional status clause."""
        template = compile_template("WHERE 1=1 ", clause("AND status=:status", has("status")))
        assert evaluate_template(template, {}) == "WHERE 1=1"
        assert evaluate_template(template, {"status": "x"}) == "WHERE 1=1 AND status=:status"

    def test_chain(self, product_template):
        on_sale = evaluate_template(product_template, {"onSale": False})
        assert "AND p.on_sale = :onSale" in on_sale
        assert "AND p.name" not in on_sale
        assert "AND p.status = 1" not in on_sale

        empty = evaluate_template(product_template, {})
        assert empty == "SELECT * FROM product p WHERE 1=1\nAND p.status = 1\nORDER BY p.id"

    def test_not_in_selects_else(self):
        template = compile_template(
            "WHERE 1=1\n",
            clause(
                "AND kk NOT IN (10, 20, 30)",
                param("kk").not_in([10, 20, 30]),
                otherwise="AND kk = :kk",
            ),
        )
        assert evaluate_template(template, {"kk": 20}) == "WHERE 1=1\nAND kk = :kk"
        assert evaluate_template(template, {"kk": 25}) == "WHERE 1=1\nAND kk NOT IN (10, 20, 30)"


class TestTemplateEvaluator:
    def test_idempotent(self, evaluator, order_template):
        params = {"status": "PAYED", "urgent": 1}
        assert evaluator.evaluate(order_template, params) == evaluator.evaluate(
            order_template, params
        )

    def test_first_match_wins(self, evaluator, product_template):
        result = evaluator.evaluate(product_template, {"name": "x", "onSale": False})
        assert "AND p.name = :name" in result
        assert "AND p.on_sale" not in result

    def test_else_is_exclusive(self, evaluator, product_template):
        for params in ({}, {"name": "x"}, {"onSale": False}, {"onSale": True}):
            result = evaluator.evaluate(product_template, params)
            selected = [
                text
                for text in ("AND p.name", "AND p.on_sale", "AND p.status = 1")
                if text in result
            ]
            assert len(selected) == 1

    def test_blank_lines_elided(self, evaluator, order_template):
        result = evaluator.evaluate(order_template, {"remark": "late"})
        assert result == "SELECT * FROM orders o\nWHERE 1=1\nORDER BY o.created_at DESC"

    def test_all_branches_selected(self, evaluator, order_template):
        result = evaluator.evaluate(order_template, {"status": "PAYED", "urgent": 1})
        assert result.splitlines() == [
            "SELECT * FROM orders o",
            "WHERE 1=1",
            "AND o.status = :status",
            "AND o.urgent = 1",
            "AND o.remark IS NULL",
            "ORDER BY o.created_at DESC",
        ]

    def test_binding_not_mutated(self, evaluator, order_template):
        params = {"status": "PAYED"}
        evaluator.evaluate(order_template, params)
        assert params == {"status": "PAYED"}

    def test_incomplete_chain_logs_and_renders_empty(self, evaluator, caplog):
        dangling = choose().when(has("a")).then("A").when(has("b"))
        template = compile_template("SELECT 1\n", dangling, "\nEND")
        with caplog.at_level(logging.ERROR, logger="dynamic_sql.evaluator"):
            result = evaluator.evaluate(template, {"a": 1})
        assert result == "SELECT 1\nEND"
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_chain_without_else_and_no_match(self, evaluator):
        template = compile_template("SELECT 1 ", choose().when(has("a")).then("A").build())
        assert evaluator.evaluate(template, {}) == "SELECT 1"

    def test_missing_parameter_propagates(self, evaluator):
        template = compile_template("SELECT 1 ", clause("AND age >= 18", param("age").ge(18)))
        with pytest.raises(MissingParameterError):
            evaluator.evaluate(template, {})

    def test_none_params(self, evaluator, order_template):
        assert evaluator.evaluate(order_template, None).startswith("SELECT * FROM orders o")


class TestNormalizeWhitespace:
    def test_removes_whitespace_only_lines(self):
        assert normalize_whitespace("a\n   \n\t\nb") == "a\nb"

    def test_crlf(self):
        assert normalize_whitespace("a\r\n  \r\nb") == "a\r\nb"

    def test_trims(self):
        assert normalize_whitespace("\n  SELECT 1  \n\n") == "SELECT 1"
