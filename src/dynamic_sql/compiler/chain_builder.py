"""Builders for decision units.

Single branches:

    clause("AND status = :status", has("status"))
    include("AND bb = :bb").when(has("bb")).otherwise("AND bb != :bb")

Multi-way chains (first match wins):

    choose()
        .when(has("name")).then("AND p.name LIKE :name")
        .when(is_false("@onSale")).then("AND p.on_sale = :onSale")
        .otherwise("AND p.status = 1")

The chain builder keeps its state explicit: the branches accumulated so far
and the condition of a when() still waiting for its then(). Once otherwise()
closes the chain the builder rejects further calls.
"""

from __future__ import annotations

from ..errors import ChainConstructionError
from ..ir import Branch, BranchChain, Condition, WhenBranch


def clause(text: str, condition: Condition, otherwise: str | None = None) -> Branch:
    """Emit ``text`` when ``condition`` holds, else ``otherwise`` (or nothing)."""
    return Branch(condition=condition, text=text, else_text=otherwise)


def include(text: str) -> IncludeBuilder:
    """Start a single branch from its text."""
    return IncludeBuilder(text)


def choose() -> ChainBuilder:
    """Start a when/then/otherwise chain."""
    return ChainBuilder()


class IncludeBuilder:
    """Text waiting for the condition that guards it."""

    def __init__(self, text: str):
        self.text = text

    def when(self, condition: Condition) -> Branch:
        return Branch(condition=condition, text=self.text)


class ChainBuilder:
    """Accumulates when/then pairs into a BranchChain."""

    def __init__(self):
        self._branches: list[WhenBranch] = []
        self._pending: Condition | None = None
        self._closed = False

    @property
    def pending(self) -> Condition | None:
        """Condition of a when() that has not received its then() yet."""
        return self._pending

    def when(self, condition: Condition) -> ChainBuilder:
        self._check_open("when")
        if self._pending is not None:
            raise ChainConstructionError(
                "when() called twice in a row; each when() needs a then() first"
            )
        self._pending = condition
        return self

    def then(self, text: str) -> ChainBuilder:
        self._check_open("then")
        if self._pending is None:
            raise ChainConstructionError("then() called without a preceding when()")
        self._branches.append(WhenBranch(condition=self._pending, text=text))
        self._pending = None
        return self

    def otherwise(self, text: str) -> BranchChain:
        """Close the chain with an else text."""
        self._check_open("otherwise")
        if self._pending is not None:
            raise ChainConstructionError("otherwise() called while a when() still needs its then()")
        if not self._branches:
            raise ChainConstructionError("otherwise() called before any when()/then()")
        self._closed = True
        return BranchChain(branches=tuple(self._branches), else_text=text)

    def build(self) -> BranchChain:
        """Close the chain without an else text.

        A trailing when() without then() is kept as the chain's dangling
        condition; the chain is then incomplete and evaluates to empty text.
        """
        self._check_open("build")
        return BranchChain(branches=tuple(self._branches), dangling=self._pending)

    def _check_open(self, method: str) -> None:
        if self._closed:
            raise ChainConstructionError(f"{method}() called after otherwise() closed the chain")
