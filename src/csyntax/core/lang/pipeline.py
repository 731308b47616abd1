"""
Text-in, result-out routing across the two evaluation modes.

Bare expressions go to the arithmetic evaluator; program-shaped input goes to
the interpreter. Both come back as an ExecutionResult.
"""

from __future__ import annotations

from csyntax.core.config import InterpreterSettings
from csyntax.core.errors import EvaluationError
from csyntax.core.ir.nodes import Program
from csyntax.core.lang.arithmetic import evaluate_arithmetic
from csyntax.core.lang.interpreter import ExecutionResult, execute_program
from csyntax.core.lang.parser import parse


def run(source: str, settings: InterpreterSettings | None = None) -> ExecutionResult:
    """Parse ``source`` and evaluate it in the mode its shape calls for.

    A parse failure is reported through ``error`` using the first diagnostic,
    formatted with line, column and hint.
    """
    result = parse(source)
    if not result.success:
        first = result.errors[0]
        return ExecutionResult(error=first.format(source))

    tree = result.tree
    if isinstance(tree, Program):
        return execute_program(tree, settings)

    try:
        return ExecutionResult(return_value=evaluate_arithmetic(tree))
    except EvaluationError as e:
        return ExecutionResult(error=e.message)
