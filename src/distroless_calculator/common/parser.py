"""Parse and evaluate arithmetic expressions safely."""
import math
import operator
import re
from typing import Callable, Dict, List, Optional

from distroless_calculator.common.errors import InvalidExpressionError, ResultOverflowError
from distroless_calculator.common.operations import Operation
from distroless_calculator.engine import OPERATIONS


# Binary operators keyed by symbol
OPERATORS: Dict[str, Operation] = {op.symbol: op for op in Operation}

# Sign operators, bound tighter than any binary operator
UNARY_PREFIX = "u"
UNARY_OPERATORS: Dict[str, Callable[[float], float]] = {
    "u-": operator.neg,
    "u+": operator.pos,
}
UNARY_PRECEDENCE = 3

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)|(?P<symbol>[-+*/()]))"
)


class ExpressionParser:
    """
    Parse and evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Every operation goes through the calculator engine

    Algorithm:
        1. Tokenize into numbers, operators and parentheses
        2. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        3. Evaluate RPN using a stack

    The Shunting-yard algorithm converts an infix expression into Reverse Polish Notation (RPN),
    which can be evaluated with a single stack and no parentheses.
    Operators wait on a stack until an operator of lower precedence, a closing
    parenthesis or the end of input releases them to the output.

    Examples:
        - Infix expression (standard notation): 3 + 4 * 2
        - Corresponding Reverse Polish Notation (RPN): 3 4 2 * +

    A "+" or "-" found where an operand is expected is a sign, written "u+" / "u-" in RPN:
        - Infix: -(2 + 3) * 4
        - RPN: 2 3 + u- 4 *
    """

    @staticmethod
    def tokenize(expr: str) -> List[str]:
        """
        Split an arithmetic expression into tokens.

        Whitespace between tokens is optional ("3+4*2" and "3 + 4 * 2" are equivalent).

        :param str expr: Arithmetic expression as a string

        :return: List of tokens
        :rtype: List[str]
        :raises InvalidExpressionError: If the expression contains an unknown character
        """
        tokens: List[str] = []
        position = 0
        end = len(expr.rstrip())
        while position < end:
            match = _TOKEN_RE.match(expr, position)
            if match is None:
                bad = expr[position:].lstrip()[:1]
                raise InvalidExpressionError(f"Unexpected character {bad!r} in expression: {expr}")
            tokens.append(match.group("number") or match.group("symbol"))
            position = match.end()
        return tokens

    @staticmethod
    def _is_number(token: str) -> bool:
        """
        Determine if a token represents a numeric value.

        Supports both integers and floating-point numbers.

        :param str token: Token string

        :return: True if token can be converted to float, else False
        :rtype: bool
        """
        try:
            float(token)
            return True
        except ValueError:
            return False

    @staticmethod
    def _precedence(token: str) -> int:
        if token in UNARY_OPERATORS:
            return UNARY_PRECEDENCE
        return OPERATORS[token].precedence

    @staticmethod
    def to_rpn(tokens: List[str]) -> List[str]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        :param List[str] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order
        :rtype: List[str]
        :raises InvalidExpressionError: If parentheses are unbalanced
        """
        output: List[str] = []
        stack: List[str] = []
        previous: Optional[str] = None

        for token in tokens:
            if ExpressionParser._is_number(token):
                output.append(token)
            elif token == "(":
                stack.append(token)
            elif token == ")":
                while stack and stack[-1] != "(":
                    output.append(stack.pop())
                if not stack:
                    raise InvalidExpressionError("Unbalanced parentheses: unexpected ')'")
                stack.pop()
            elif token in OPERATORS:
                expects_operand = previous is None or previous == "(" or previous in OPERATORS
                if expects_operand and token in "+-":
                    # Sign: right-associative, nothing on the stack binds tighter
                    stack.append(UNARY_PREFIX + token)
                else:
                    prec = OPERATORS[token].precedence
                    while stack and stack[-1] != "(" and ExpressionParser._precedence(stack[-1]) >= prec:
                        output.append(stack.pop())
                    stack.append(token)
            else:
                raise InvalidExpressionError(f"Unknown token: {token!r}")
            previous = token

        # Append remaining operators in reverse order (stack top first)
        for token in reversed(stack):
            if token == "(":
                raise InvalidExpressionError("Unbalanced parentheses: missing ')'")
            output.append(token)
        return output

    @staticmethod
    def evaluate(expr: str) -> float:
        """
        Evaluate an arithmetic expression safely.

        :param str expr: Arithmetic expression string

        :return: Computed result as float
        :rtype: float
        :raises InvalidExpressionError: If expression is invalid or malformed
        :raises DivisionByZeroError: If the expression divides by zero
        :raises ResultOverflowError: If an intermediate result is out of the float range
        """
        tokens: List[str] = ExpressionParser.tokenize(expr)

        if not tokens:
            raise InvalidExpressionError("Empty expression")

        # A binary operator cannot end an expression
        if tokens[-1] in OPERATORS:
            raise InvalidExpressionError(f"Expression cannot end with an operator: {expr}")

        rpn: List[str] = ExpressionParser.to_rpn(tokens)

        stack: List[float] = []
        for token in rpn:
            if ExpressionParser._is_number(token):
                value = float(token)
                if math.isinf(value):
                    raise ResultOverflowError(f"Number out of range: {token}")
                stack.append(value)
            elif token in UNARY_OPERATORS:
                if not stack:
                    raise InvalidExpressionError(f"Invalid expression (missing operand): {expr}")
                stack.append(UNARY_OPERATORS[token](stack.pop()))
            else:
                # Operator requires two operands
                if len(stack) < 2:
                    raise InvalidExpressionError(f"Invalid expression (not enough operands): {expr}")
                b: float = stack.pop()
                a: float = stack.pop()
                stack.append(OPERATIONS[OPERATORS[token]](a, b))

        if len(stack) != 1:
            raise InvalidExpressionError(f"Invalid expression (remaining operands): {expr}")

        return stack[0]
