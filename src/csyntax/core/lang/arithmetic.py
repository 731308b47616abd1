"""
Pure arithmetic evaluator.

Folds an expression tree made of number literals and arithmetic operators
into a single number. There is no variable context: identifiers and any
program structure are rejected. Division here is real-valued; the program
interpreter truncates instead (see ``csyntax.core.lang.interpreter``).

Integers are exact but bounded: a result wider than ``MAX_INT_BITS`` bits
raises IntegerOverflowError instead of growing without limit.
"""

from __future__ import annotations

import math

from csyntax.core.errors import (
    DivisionByZeroError,
    EvaluationError,
    IntegerOverflowError,
    UnboundIdentifierError,
    UnknownOperatorError,
    UnsupportedNodeError,
)
from csyntax.core.ir.nodes import (
    BinaryExpr,
    BinaryOp,
    Identifier,
    Node,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
)

Number = int | float

MAX_INT_BITS = 4096


def evaluate_arithmetic(node: Node) -> Number:
    """Evaluate an arithmetic-only tree.

    Args:
        node: Tree produced by parsing a bare expression.

    Returns:
        The computed number (int when every step stays integral).

    Raises:
        DivisionByZeroError: ``/`` or ``%`` with a right operand equal to 0.
        UnboundIdentifierError: An identifier appears in the tree.
        UnsupportedNodeError: Program structure or a non-arithmetic expression.
        UnknownOperatorError: An operator outside ``+ - * / % ^`` and unary +/-.
        IntegerOverflowError: An integer result wider than ``MAX_INT_BITS``.
        EvaluationError: Float overflow, a non-real result or a tree nested
            too deeply to walk.
    """
    try:
        return _fold(node)
    except EvaluationError:
        raise
    except RecursionError as e:
        raise EvaluationError("Expression nested too deeply") from e
    except (OverflowError, ValueError, ZeroDivisionError) as e:
        raise EvaluationError(f"Arithmetic error: {e}") from e


def _fold(node: Node) -> Number:
    if isinstance(node, NumberLiteral):
        return node.value

    if isinstance(node, Identifier):
        raise UnboundIdentifierError(
            f"Cannot evaluate identifier '{node.name}' without variable context"
        )

    if isinstance(node, BinaryExpr):
        return _fold_binary(node.op, _fold(node.left), _fold(node.right))

    if isinstance(node, UnaryExpr):
        operand = _fold(node.operand)
        if node.op == UnaryOp.NEG:
            return -operand
        if node.op == UnaryOp.POS:
            return operand
        raise UnknownOperatorError(f"Unknown operator: {node.op.value}")

    raise UnsupportedNodeError(
        f"Cannot evaluate {type(node).__name__}: only arithmetic expressions are supported"
    )


def _fold_binary(op: BinaryOp, left: Number, right: Number) -> Number:
    if op == BinaryOp.ADD:
        return bounded_int(left + right)
    if op == BinaryOp.SUB:
        return bounded_int(left - right)
    if op == BinaryOp.MUL:
        return bounded_int(left * right)
    if op == BinaryOp.DIV:
        if right == 0:
            raise DivisionByZeroError("Division by zero")
        return left / right
    if op == BinaryOp.MOD:
        if right == 0:
            raise DivisionByZeroError("Modulo by zero")
        return c_remainder(left, right)
    if op == BinaryOp.POW:
        return real_power(left, right)
    raise UnknownOperatorError(f"Unknown operator: {op.value}")


def bounded_int(value: Number, max_bits: int = MAX_INT_BITS) -> Number:
    """Pass ``value`` through unless it is an int wider than ``max_bits``."""
    if isinstance(value, int) and value.bit_length() > max_bits:
        raise IntegerOverflowError(f"Integer result exceeds {max_bits} bits")
    return value


def real_power(left: Number, right: Number, max_bits: int = MAX_INT_BITS) -> Number:
    """left ^ right over the reals, with integer results held to ``max_bits``."""
    if isinstance(left, int) and isinstance(right, int) and right > 0:
        # |left| >= 2 means the result has more than (bit_length - 1) * right bits
        if (abs(left).bit_length() - 1) * right >= max_bits:
            raise IntegerOverflowError(f"Integer result exceeds {max_bits} bits")
    result = left**right
    if isinstance(result, complex):
        raise EvaluationError(f"{left} ^ {right} has no real value")
    return bounded_int(result, max_bits)


def c_remainder(left: Number, right: Number) -> Number:
    """Remainder with the sign of the dividend, as in C."""
    if isinstance(left, int) and isinstance(right, int):
        return left - right * c_trunc_div(left, right)
    return math.fmod(left, right)


def c_trunc_div(left: int, right: int) -> int:
    """Integer quotient truncated toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient
