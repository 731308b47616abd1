"""
Error types for csyntax evaluation and execution.

Parse failures are not exceptions: they are reported as ``ParseError`` values
inside a ``ParseResult`` (see ``csyntax.core.lang.parser``). The classes here
cover the two evaluation paths.
"""

from __future__ import annotations

from dataclasses import dataclass


class CSyntaxError(Exception):
    """Base exception for all csyntax errors."""

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Prefix the message with its location when one is attached."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class EvaluationError(CSyntaxError):
    """
    Raised when an expression tree cannot be reduced to a value.

    Examples:
    - Division or modulo by zero
    - Program structure handed to the arithmetic evaluator
    - Unknown operator
    - Identifier with no variable context
    - Integer result too large, or nesting too deep to walk
    """

    pass


class DivisionByZeroError(EvaluationError):
    """Raised when the right operand of ``/`` or ``%`` is exactly zero."""

    pass


class IntegerOverflowError(EvaluationError):
    """Raised when an integer result outgrows the configured bit width."""

    pass


class UnsupportedNodeError(EvaluationError):
    """Raised when the arithmetic evaluator meets a non-arithmetic node."""

    pass


class UnknownOperatorError(EvaluationError):
    """Raised for an operator the evaluator has no rule for."""

    pass


class UnboundIdentifierError(EvaluationError):
    """Raised when an identifier is evaluated without a variable context."""

    pass


class ExecutionError(CSyntaxError):
    """
    Raised when the program interpreter cannot continue.

    Examples:
    - Call to an undefined function
    - Interpreted-step ceiling exhausted
    - Call depth ceiling exhausted
    - Bad array index or dereference of a non-pointer
    """

    pass


class UndefinedFunctionError(ExecutionError):
    """Raised when a call names neither the output stub nor a defined function."""

    pass


class StepLimitExceededError(ExecutionError):
    """Raised when a program runs past the configured step ceiling."""

    pass


class CallDepthExceededError(ExecutionError):
    """Raised when nested calls run past the configured depth ceiling."""

    pass


@dataclass(frozen=True)
class ErrorContext:
    """
    Where a diagnostic points in the source text.

    Attributes:
        line: 1-based line of the offending character
        column: 1-based column of the offending character
        snippet: The offending line preceded by up to two lines of context
    """

    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """``line:column``, followed by the numbered snippet when one is known."""
        if not self.snippet:
            return f"{self.line}:{self.column}"
        return "\n".join([f"{self.line}:{self.column}", *self._numbered_lines()])

    def _numbered_lines(self) -> list[str]:
        assert self.snippet is not None
        source_lines = self.snippet.split("\n")
        # The last snippet line is always the offending one
        first = self.line - len(source_lines) + 1
        out: list[str] = []
        for number, text in enumerate(source_lines, start=first):
            gutter = f"{number:4d} | "
            out.append(gutter + text)
            if number == self.line:
                out.append(" " * (len(gutter) + self.column - 1) + "^^^")
        return out


def locate(source: str, pos: int) -> ErrorContext:
    """
    Map a character offset in ``source`` to an ErrorContext.

    Offsets past the end of the text point just after the last character.

    Args:
        source: The (trimmed) text the offset refers to
        pos: Zero-based character offset

    Returns:
        ErrorContext with line, column and a snippet of up to three lines
    """
    pos = max(0, min(pos, len(source)))
    line = source.count("\n", 0, pos) + 1
    column = pos - (source.rfind("\n", 0, pos) + 1) + 1

    lines = source.split("\n")
    snippet = "\n".join(lines[max(0, line - 3) : line])
    return ErrorContext(line=line, column=column, snippet=snippet)
