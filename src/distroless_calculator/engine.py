"""Pure two-operand arithmetic."""
import math
from typing import Callable, Dict, Union

from distroless_calculator.common.errors import DivisionByZeroError, ResultOverflowError
from distroless_calculator.common.logger import logger
from distroless_calculator.common.operations import (
    Operation,
    OperationRequest,
    OperationResult,
)


# Type alias for operation functions (taking two floats, returning a float)
OperationFn = Callable[[float, float], float]


def _checked(result: float, a: float, b: float) -> float:
    """Fail when finite operands overflowed to a non-finite result."""
    operands_finite = all(not isinstance(x, float) or math.isfinite(x) for x in (a, b))
    if isinstance(result, float) and not math.isfinite(result) and operands_finite:
        raise ResultOverflowError(f"Result out of range: {a!r}, {b!r}")
    return result


def add(a: float, b: float) -> float:
    """Return a + b."""
    return _checked(a + b, a, b)


def subtract(a: float, b: float) -> float:
    """Return a - b."""
    return _checked(a - b, a, b)


def multiply(a: float, b: float) -> float:
    """Return a * b."""
    return _checked(a * b, a, b)


def divide(a: float, b: float) -> float:
    """
    Return a / b.

    :raises DivisionByZeroError: If b is zero
    :raises ResultOverflowError: If the quotient is out of the float range
    """
    if b == 0:
        raise DivisionByZeroError("Division by zero")
    try:
        return _checked(a / b, a, b)
    except OverflowError as exc:
        # int / int too large for a float
        raise ResultOverflowError(str(exc)) from exc


OPERATIONS: Dict[Operation, OperationFn] = {
    Operation.ADD: add,
    Operation.SUBTRACT: subtract,
    Operation.MULTIPLY: multiply,
    Operation.DIVIDE: divide,
}


def resolve(operation: Union[Operation, str]) -> Operation:
    """
    Normalize an operation given as an enum member, a name or a symbol.

    :param operation: Operation, "add" or "+"
    :return: Matching operation
    :rtype: Operation
    :raises ValueError: If the operation is unknown
    """
    if isinstance(operation, Operation):
        return operation
    try:
        return Operation(operation.lower())
    except ValueError:
        return Operation.from_symbol(operation)


def calculate(operation: Union[Operation, str], a: float, b: float) -> float:
    """Apply operation to a and b."""
    op = resolve(operation)
    result = OPERATIONS[op](a, b)
    logger.debug("%s(%r, %r) -> %r", op.value, a, b, result)
    return result


def evaluate_request(request: OperationRequest) -> OperationResult:
    """
    Evaluate a validated operation request.

    :param OperationRequest request: Operation and operands
    :return: Expression with its result
    :rtype: OperationResult
    """
    result = calculate(request.operation, request.left, request.right)
    return OperationResult(expression=request.expression, result=result)
