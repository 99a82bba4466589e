"""Test the calculator engine functions."""
import math

from hypothesis import assume, given, strategies as st
import pytest

from distroless_calculator.common.errors import DivisionByZeroError, ResultOverflowError
from distroless_calculator.common.operations import Operation, OperationRequest
from distroless_calculator.engine import (
    add,
    calculate,
    divide,
    evaluate_request,
    multiply,
    resolve,
    subtract,
)


finite_floats = st.floats(allow_nan=False, allow_infinity=False, min_value=-1e150, max_value=1e150)


def test_examples() -> None:
    """Reference results for the basic operations."""
    assert add(2, 3) == 5
    assert divide(10, 2) == 5
    with pytest.raises(DivisionByZeroError):
        divide(1, 0)


@pytest.mark.parametrize("a,b,expected", [
    (5, 3, 2),
    (0, 3, -3),
    (-1.5, -1.5, 0),
])
def test_subtract(a, b, expected) -> None:
    """subtract returns a - b."""
    assert subtract(a, b) == expected


@pytest.mark.parametrize("a,b,expected", [
    (2, 3, 6),
    (-1, 3, -3),
    (0.5, 4, 2.0),
])
def test_multiply(a, b, expected) -> None:
    """multiply returns a * b."""
    assert multiply(a, b) == expected


def test_divide_returns_float_quotient() -> None:
    """divide keeps the fractional part."""
    assert divide(5, 2) == 2.5


@given(finite_floats, finite_floats)
def test_add_is_commutative(a: float, b: float) -> None:
    """add(a, b) == add(b, a)."""
    assert add(a, b) == add(b, a)


@given(finite_floats)
def test_subtract_self_is_zero(a: float) -> None:
    """subtract(a, a) == 0."""
    assert subtract(a, a) == 0


@given(finite_floats)
def test_divide_by_zero_always_fails(a: float) -> None:
    """divide(a, 0) raises DivisionByZeroError for every a."""
    with pytest.raises(DivisionByZeroError):
        divide(a, 0)
    with pytest.raises(DivisionByZeroError):
        divide(a, -0.0)


@given(finite_floats, finite_floats)
def test_divide_then_multiply_round_trips(a: float, b: float) -> None:
    """multiply(divide(a, b), b) is a within floating-point tolerance."""
    assume(1e-100 < abs(b) < 1e100)
    assert math.isclose(multiply(divide(a, b), b), a, rel_tol=1e-9, abs_tol=1e-200)


def test_division_by_zero_is_a_zero_division_error() -> None:
    """Callers catching the builtin exception still see the failure."""
    with pytest.raises(ZeroDivisionError):
        divide(1, 0)


@pytest.mark.parametrize("fn,a,b", [
    (add, 1e308, 1e308),
    (subtract, -1e308, 1e308),
    (multiply, 1e200, 1e200),
    (divide, 1e308, 1e-10),
])
def test_overflow_fails(fn, a, b) -> None:
    """Finite operands producing a non-finite result raise ResultOverflowError."""
    with pytest.raises(ResultOverflowError):
        fn(a, b)


def test_integer_division_overflow_fails() -> None:
    """Integers too large for a float quotient raise ResultOverflowError."""
    with pytest.raises(ResultOverflowError):
        divide(10**400, 3)


@pytest.mark.parametrize("value,expected", [
    (Operation.ADD, Operation.ADD),
    ("add", Operation.ADD),
    ("DIVIDE", Operation.DIVIDE),
    ("*", Operation.MULTIPLY),
    ("-", Operation.SUBTRACT),
])
def test_resolve(value, expected) -> None:
    """resolve accepts enum members, names and symbols."""
    assert resolve(value) is expected


def test_resolve_unknown_operation() -> None:
    """Unknown operations raise ValueError."""
    with pytest.raises(ValueError):
        resolve("modulo")


@pytest.mark.parametrize("operation,expected", [
    ("add", 9.0),
    ("subtract", 3.0),
    ("multiply", 18.0),
    ("divide", 2.0),
])
def test_calculate(operation, expected) -> None:
    """calculate dispatches to the matching function."""
    assert calculate(operation, 6, 3) == expected


def test_evaluate_request() -> None:
    """evaluate_request wraps the result with the request expression."""
    result = evaluate_request(OperationRequest(operation="divide", left=10, right=4))
    assert result.expression == "10 / 4"
    assert result.result == 2.5
    assert str(result) == "10 / 4 = 2.5"
