"""Pydantic models for arithmetic operation requests and results."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Operation(str, Enum):
    """Closed set of two-operand operations."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @property
    def symbol(self) -> str:
        """Infix symbol of the operation."""
        return _SYMBOLS[self]

    @property
    def precedence(self) -> int:
        """Binding strength used when parsing infix expressions."""
        return 2 if self in (Operation.MULTIPLY, Operation.DIVIDE) else 1

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operation":
        """
        Look up an operation by its infix symbol.

        :param str symbol: One of "+", "-", "*", "/"
        :return: Matching operation
        :rtype: Operation
        :raises ValueError: If the symbol is unknown
        """
        for operation, sym in _SYMBOLS.items():
            if sym == symbol:
                return operation
        raise ValueError(f"Unknown operator: {symbol!r}")


_SYMBOLS = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "-",
    Operation.MULTIPLY: "*",
    Operation.DIVIDE: "/",
}


class OperationRequest(BaseModel):
    """Represents a single operation applied to two operands."""

    model_config = ConfigDict(frozen=True)

    operation: Operation = Field(..., description="Operation to apply")
    left: float = Field(..., allow_inf_nan=False, description="Left operand")
    right: float = Field(..., allow_inf_nan=False, description="Right operand")

    @property
    def expression(self) -> str:
        """Infix rendering of the request, e.g. "2 + 3"."""
        return f"{format_number(self.left)} {self.operation.symbol} {format_number(self.right)}"


class OperationResult(BaseModel):
    """Represents the result of an evaluated arithmetic operation."""

    expression: str = Field(..., description="Original arithmetic expression")
    result: float = Field(..., description="Evaluated numeric result of the expression")

    def __str__(self) -> str:
        return f"{self.expression} = {format_number(self.result)}"


def format_number(value: float) -> str:
    """
    Render a number for display.

    Integral values that a float represents exactly are shown without a
    fractional part, everything else uses the shortest round-tripping repr.

    :param float value: Number to render
    :return: Display string
    :rtype: str
    """
    if value == 0:
        return "0"
    if float(value).is_integer() and abs(value) < 2**53:
        return str(int(value))
    return repr(float(value))
