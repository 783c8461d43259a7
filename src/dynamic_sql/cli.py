"""
CLI for inspecting and building dynamic SQL statements.

    dynamic-sql list --path statements/
    dynamic-sql show orders.search --path statements/
    dynamic-sql build orders.search --params '{"status": "PAYED"}'
"""

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from .errors import DynamicSQLError
from .loader import load_statements
from .registry import StatementRegistry

logger = logging.getLogger(__name__)


def _load(args) -> StatementRegistry | None:
    path = args.path or os.getenv("STATEMENTS_PATH")
    if not path:
        logger.error("Statements path required (use --path or set STATEMENTS_PATH)")
        return None
    registry = StatementRegistry()
    try:
        load_statements(path, registry)
    except DynamicSQLError as e:
        logger.error(f"Failed to load statements: {e}")
        return None
    return registry


def cmd_list(args) -> int:
    """List all statement names."""
    registry = _load(args)
    if registry is None:
        return 1

    names = registry.names()
    if not names:
        print("No statements defined")
        return 0

    for name in names:
        print(name)
    return 0


def cmd_show(args) -> int:
    """Show a statement's engine template text."""
    registry = _load(args)
    if registry is None:
        return 1

    raw = registry.raw(args.name)
    if raw is None:
        logger.error(f"Statement not found: {args.name}")
        return 1
    print(raw)
    return 0


def cmd_build(args) -> int:
    """Evaluate a statement against JSON parameters."""
    try:
        params = json.loads(args.params)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid --params JSON: {e}")
        return 1
    if not isinstance(params, dict):
        logger.error("--params must be a JSON object")
        return 1

    registry = _load(args)
    if registry is None:
        return 1

    try:
        sql = registry.build(args.name, params)
    except DynamicSQLError as e:
        logger.error(f"Failed to build {args.name}: {e}")
        return 1
    if sql is None:
        logger.error(f"Statement not found: {args.name}")
        return 1
    print(sql)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper(), format="%(message)s")

    parser = argparse.ArgumentParser(description="Inspect and build dynamic SQL statements")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    path_help = "Definitions file or directory (default: $STATEMENTS_PATH)"

    # List command
    list_parser = subparsers.add_parser("list", help="List statement names")
    list_parser.add_argument("--path", help=path_help)

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a statement's template text")
    show_parser.add_argument("name", help="Statement name")
    show_parser.add_argument("--path", help=path_help)

    # Build command
    build_parser = subparsers.add_parser("build", help="Build a statement from parameters")
    build_parser.add_argument("name", help="Statement name")
    build_parser.add_argument("--params", default="{}", help="Parameters as a JSON object")
    build_parser.add_argument("--path", help=path_help)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "list": cmd_list,
        "show": cmd_show,
        "build": cmd_build,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
