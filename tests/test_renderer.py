"""Tests for engine template rendering."""

import pytest

from dynamic_sql import (
    NullOrEmpty,
    always,
    choose,
    clause,
    compile_template,
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
from dynamic_sql.compiler.renderer import ConditionRenderer, literal, quote, render_chain


@pytest.fixture
def renderer() -> ConditionRenderer:
    return ConditionRenderer()


class TestConditionText:
    @pytest.mark.parametrize(
        "condition,expected",
        [
            (has("a"), "#p.containsKey('a')"),
            (has("a", "b"), "#p.containsKey('a') and #p.containsKey('b')"),
            (has_no("a"), "#p.containsKey('a') == false"),
            (is_null("a"), "#p['a'] == null"),
            (is_not_null("a"), "#p['a'] != null"),
            (is_true("@urgent == 1"), "(#p['urgent'] == 1) == true"),
            (is_false("@onSale"), "(#p['onSale']) == false"),
            (contains("a", "b"), "(#p.containsKey('a') or #p.containsKey('b'))"),
            (contains_all("a", "b"), "(#p.containsKey('a') and #p.containsKey('b'))"),
            (param("age").ge(18), "#p['age'] >= 18"),
            (param("s").eq("it's"), "#p['s'] == 'it''s'"),
            (param("kk").not_in([10, 20]), "!{10,20}.contains(#p['kk'])"),
            (param("kk").in_({"x": 1}), "{'x':1}.containsValue(#p['kk'])"),
            (
                param("dd").is_(NullOrEmpty.EMPTY),
                "(#p['dd'] instanceof T(java.util.Collection)"
                " or #p['dd'] instanceof T(java.util.Map)) and #p['dd'].isEmpty()",
            ),
            (
                param("dd").is_(NullOrEmpty.NOT_EMPTY),
                "(#p['dd'] instanceof T(java.util.Collection)"
                " or #p['dd'] instanceof T(java.util.Map)) and !#p['dd'].isEmpty()",
            ),
            (always(), "true"),
        ],
    )
    def test_text(self, renderer, condition, expected):
        assert renderer.text(condition) == expected

    def test_fragment_outer_edge(self, renderer):
        rendered = renderer.render(has("a"))
        assert rendered.fragment("AND a = :a") == "#{#p.containsKey('a') ? 'AND a = :a':''}"

    def test_fragment_inner(self, renderer):
        rendered = renderer.render(has("a"), outer_edge=False)
        assert rendered.fragment("X", "Y") == "#p.containsKey('a') ? 'X':'Y'"


class TestTemplateRendering:
    def test_branch_with_else(self):
        template = compile_template("WHERE 1=1 ", clause("AND a=:a", has("a"), otherwise="AND 1=0"))
        assert template.render() == "WHERE 1=1 #{#p.containsKey('a') ? 'AND a=:a':'AND 1=0'}"

    def test_chain_guards_earlier_branches(self):
        chain = choose().when(has("a")).then("A").when(has("b")).then("B").otherwise("C")
        lines = render_chain(chain).split("\n")
        assert lines == [
            "#{#p.containsKey('a') ? 'A':''}",
            "#{!(#p.containsKey('a')) and (#p.containsKey('b')) ? 'B':''}",
            "#{(!(#p.containsKey('a')) and !(#p.containsKey('b'))) == true ? 'C':''}",
        ]

    def test_incomplete_chain_renders_empty(self):
        chain = choose().when(has("a")).build()
        assert render_chain(chain) == ""


class TestLiterals:
    def test_quote(self):
        assert quote("a'b") == "'a''b'"

    @pytest.mark.parametrize(
        "value,expected",
        [(None, "null"), (True, "true"), (3, "3"), ("x", "'x'"), ([1, "a"], "{1,'a'}")],
    )
    def test_literal(self, value, expected):
        assert literal(value) == expected
