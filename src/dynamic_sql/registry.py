"""Named statement registry.

Statements are defined once (usually at import or startup) and looked up
by name at call time:

    statements.define("orders.search", compile_template(...))
    sql = statements.build("orders.search", {"status": "PAYED"})
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from .evaluator import TemplateEvaluator
from .ir import CompiledTemplate

logger = logging.getLogger(__name__)


class StatementRegistry:
    """Thread-safe name -> CompiledTemplate mapping.

    A lookup always sees either no template or a fully compiled one. Defining
    an existing name replaces it (last writer wins).
    """

    def __init__(self, evaluator: TemplateEvaluator | None = None):
        self._templates: dict[str, CompiledTemplate] = {}
        self._lock = threading.Lock()
        self.evaluator = evaluator or TemplateEvaluator()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._templates

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def define(self, name: str, template: CompiledTemplate) -> CompiledTemplate:
        """Register a template under ``name`` and return it."""
        if not isinstance(template, CompiledTemplate):
            raise TypeError(
                f"Statement '{name}' must be a CompiledTemplate, got {type(template).__name__}"
            )
        with self._lock:
            if name in self._templates:
                logger.warning(f"Redefining statement '{name}'")
            self._templates[name] = template
        logger.debug(f"Defined statement '{name}' ({len(template.decisions)} decisions)")
        return template

    def get(self, name: str) -> CompiledTemplate | None:
        with self._lock:
            return self._templates.get(name)

    def raw(self, name: str) -> str | None:
        """Engine template text of a statement, or None if unknown."""
        template = self.get(name)
        if template is None:
            return None
        return template.render()

    def build(self, name: str, params: Any = None) -> str | None:
        """Evaluate a statement against ``params``.

        Returns:
            The statement text, or None if no statement has that name.

        Raises:
            EvaluationError: If the template cannot be evaluated.
        """
        template = self.get(name)
        if template is None:
            return None
        return self.evaluator.evaluate(template, params)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._templates)

    def clear(self) -> None:
        with self._lock:
            self._templates.clear()


# Default registry
statements = StatementRegistry()
