"""Load statement definitions from Python files.

A definitions file is a plain Python module with a module-level
``STATEMENTS`` mapping of statement name -> CompiledTemplate:

    from dynamic_sql import clause, compile_template, has

    STATEMENTS = {
        "orders.search": compile_template(
            "SELECT * FROM orders o WHERE 1=1\\n",
            clause("AND o.status = :status", has("status")),
        ),
    }
"""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Mapping
from pathlib import Path

from .errors import StatementLoadError
from .ir import CompiledTemplate
from .registry import StatementRegistry, statements

logger = logging.getLogger(__name__)

STATEMENTS_ATTR = "STATEMENTS"


def load_statements(
    path: str | Path, registry: StatementRegistry = statements
) -> list[str]:
    """Register the statements defined in a file or a directory of files.

    Directories are scanned for ``*.py`` files in sorted order; files whose
    name starts with an underscore are skipped.

    Returns:
        Names of the registered statements, in registration order.

    Raises:
        StatementLoadError: If the path does not exist or a file fails to load.
    """
    path = Path(path)
    if path.is_dir():
        files = sorted(p for p in path.glob("*.py") if not p.name.startswith("_"))
    elif path.is_file():
        files = [path]
    else:
        raise StatementLoadError(f"Statements path not found: {path}")

    loaded: list[str] = []
    for file in files:
        definitions = _read_definitions(file)
        for name, template in definitions.items():
            registry.define(name, template)
            loaded.append(name)
        logger.info(f"Loaded {len(definitions)} statements from {file}")
    return loaded


def _read_definitions(file: Path) -> dict[str, CompiledTemplate]:
    module_name = f"dynamic_sql_statements_{file.stem}"
    try:
        spec = importlib.util.spec_from_file_location(module_name, file)
        if spec is None or spec.loader is None:
            raise StatementLoadError(f"Cannot import {file}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except StatementLoadError:
        raise
    except Exception as e:
        logger.error(f"Failed to load statements from {file}: {e}", exc_info=True)
        raise StatementLoadError(f"Failed to load statements from {file}: {e}") from e

    definitions = getattr(module, STATEMENTS_ATTR, None)
    if not isinstance(definitions, Mapping):
        logger.error(f"{file} does not define a {STATEMENTS_ATTR} mapping")
        raise StatementLoadError(f"{file} does not define a {STATEMENTS_ATTR} mapping")

    invalid = [
        name
        for name, template in definitions.items()
        if not isinstance(name, str) or not isinstance(template, CompiledTemplate)
    ]
    if invalid:
        logger.error(f"{file}: entries are not CompiledTemplates: {invalid}")
        raise StatementLoadError(f"{file}: entries are not CompiledTemplates: {invalid}")

    return dict(definitions)
