"""Exceptions raised while evaluating arithmetic."""


class CalculatorError(Exception):
    """Base class for every calculator failure."""


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    """Raised when the divisor of a division is zero."""


class ResultOverflowError(CalculatorError, OverflowError):
    """Raised when finite operands produce a result that is not finite."""


class InvalidExpressionError(CalculatorError, ValueError):
    """Raised when an arithmetic expression cannot be parsed."""


class InvalidArchiveError(CalculatorError, ValueError):
    """Raised when an operations archive cannot be read."""
