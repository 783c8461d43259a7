"""Exception types for dynamic SQL compilation and evaluation."""


class DynamicSQLError(Exception):
    """Base class for all dynamic SQL errors."""

    pass


class ChainConstructionError(DynamicSQLError):
    """Raised when a when/then/otherwise chain is authored out of order."""

    pass


class IncompleteChainError(DynamicSQLError):
    """A chain whose last when() never received its then().

    Never raised by evaluation. The evaluator reports it through logging and
    renders the chain as empty text.
    """

    pass


class ExpressionError(DynamicSQLError, ValueError):
    """Raised when a boolean expression cannot be parsed."""

    pass


class TemplateCompileError(DynamicSQLError):
    """Raised when template parts cannot be compiled."""

    pass


class EvaluationError(DynamicSQLError):
    """Raised when a compiled template cannot be evaluated."""

    pass


class MissingParameterError(EvaluationError):
    """A value comparison referenced a parameter absent from the binding."""

    def __init__(self, name: str):
        super().__init__(f"Parameter '{name}' is required for value comparison but was not bound")
        self.name = name


class StatementLoadError(DynamicSQLError):
    """Raised when statement definitions cannot be loaded."""

    pass
