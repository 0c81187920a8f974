"""Arithmetic Expression Evaluation

Evaluates dice-roll totals such as "3 + 5 - 1" by walking the parsed AST
and allowing only numeric constants and arithmetic operators, so payload
text is never executed as code.
"""

import ast
import math
import operator
from typing import Any, Callable, Dict, Union

Number = Union[int, float]

_BINARY_OPERATORS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: Dict[type, Callable[[Any], Any]] = {
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}

# Largest exponent accepted for `**`
MAX_EXPONENT = 100

# Longest expression text accepted
MAX_EXPRESSION_LENGTH = 200

# Largest integer result (in bits) of any intermediate operation
MAX_RESULT_BITS = 4096


class ExpressionError(ValueError):
    """Raised when an expression cannot be evaluated safely."""


def _check_power(base: Number, exponent: Number) -> None:
    if abs(exponent) > MAX_EXPONENT:
        raise ExpressionError(f"Exponent too large: {exponent}")
    if isinstance(base, int) and exponent > 0:
        if abs(base).bit_length() * exponent > MAX_RESULT_BITS:
            raise ExpressionError(f"Power result too large: {base} ** {exponent}")


def _check_size(value: Number) -> Number:
    if isinstance(value, int) and value.bit_length() > MAX_RESULT_BITS:
        raise ExpressionError("Result too large")
    return value


def _eval_node(node: ast.AST) -> Number:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
            return node.value
        raise ExpressionError(f"Unsupported constant: {node.value!r}")

    if isinstance(node, ast.BinOp):
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"Unsupported operator: {type(node.op).__name__}")
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _check_size(op(left, right))

    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"Unsupported operator: {type(node.op).__name__}")
        return _check_size(op(_eval_node(node.operand)))

    raise ExpressionError(f"Unsupported expression: {type(node).__name__}")


def evaluate(expression: str) -> Number:
    """
    Evaluate an arithmetic expression.

    Args:
        expression: Text such as "4 + 2 - 1"

    Returns:
        The numeric result

    Raises:
        ExpressionError: On syntax errors, non-arithmetic input, overlong
            or too deeply nested input, division by zero, or a result that
            is non-finite or too large
    """
    expression = expression.strip()
    if len(expression) > MAX_EXPRESSION_LENGTH:
        raise ExpressionError(
            f"Expression longer than {MAX_EXPRESSION_LENGTH} characters"
        )

    try:
        tree = ast.parse(expression, mode="eval")
    except (SyntaxError, ValueError, RecursionError, MemoryError) as e:
        raise ExpressionError(f"Invalid expression: {expression!r}") from e

    try:
        result = _eval_node(tree)
    except (ZeroDivisionError, OverflowError, RecursionError, MemoryError) as e:
        raise ExpressionError(f"Cannot evaluate {expression!r}: {e}") from e

    if isinstance(result, complex) or (
        isinstance(result, float) and not math.isfinite(result)
    ):
        raise ExpressionError(f"Non-finite result for {expression!r}")
    return result


def format_number(value: Number) -> str:
    """Render integral floats without a trailing ".0"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
