"""Shared test fixtures."""

import pytest

from dynamic_sql import (
    CompiledTemplate,
    NullOrEmpty,
    StatementRegistry,
    TemplateEvaluator,
    choose,
    clause,
    compile_template,
    has,
    include,
    is_false,
    is_true,
    param,
)


@pytest.fixture
def evaluator() -> TemplateEvaluator:
    return TemplateEvaluator()


@pytest.fixture
def product_template() -> CompiledTemplate:
    """Product search with a three-way chain."""
    return compile_template(
        "SELECT * FROM product p WHERE 1=1\n",
        choose()
        .when(has("name"))
        .then("AND p.name = :name")
        .when(is_false("@onSale"))
        .then("AND p.on_sale = :onSale")
        .otherwise("AND p.status = 1"),
        "\nORDER BY p.id",
    )


@pytest.fixture
def order_template() -> CompiledTemplate:
    """Order search with one clause per line, some lines empty at runtime."""
    return compile_template(
        "SELECT * FROM orders o\nWHERE 1=1\n",
        clause("AND o.status = :status", has("status")),
        "\n",
        clause("AND o.urgent = 1", is_true("@urgent == 1")),
        "\n",
        include("AND o.remark IS NULL").when(param("remark").is_(NullOrEmpty.NULL)),
        "\nORDER BY o.created_at DESC",
    )


@pytest.fixture
def registry(product_template, order_template) -> StatementRegistry:
    registry = StatementRegistry()
    registry.define("product.search", product_template)
    registry.define("orders.search", order_template)
    return registry
