"""Tests for error types, source locations and the run() pipeline."""

from __future__ import annotations

import csyntax
from csyntax import run
from csyntax.core.errors import (
    CallDepthExceededError,
    CSyntaxError,
    ErrorContext,
    EvaluationError,
    ExecutionError,
    IntegerOverflowError,
    StepLimitExceededError,
    UndefinedFunctionError,
    locate,
)

# ============================================================================
# Errors
# ============================================================================


class TestErrors:
    """Error types carry a message and an optional location."""

    def test_message_without_context(self) -> None:
        error = EvaluationError("Division by zero")
        assert error.message == "Division by zero"
        assert str(error) == "Division by zero"

    def test_message_with_context(self) -> None:
        error = ExecutionError("boom", ErrorContext(line=2, column=3))
        assert str(error) == "2:3\nboom"

    def test_hierarchy(self) -> None:
        for cls in (UndefinedFunctionError, StepLimitExceededError, CallDepthExceededError):
            assert issubclass(cls, ExecutionError)
        assert issubclass(ExecutionError, CSyntaxError)
        assert issubclass(EvaluationError, CSyntaxError)
        assert issubclass(IntegerOverflowError, EvaluationError)


class TestLocate:
    """Offsets map to line, column and a source snippet."""

    def test_first_line(self) -> None:
        context = locate("1 + x", 4)
        assert (context.line, context.column) == (1, 5)
        assert context.snippet == "1 + x"

    def test_later_line(self) -> None:
        context = locate("a\nbb\nccc\ndddd", 10)
        assert (context.line, context.column) == (4, 2)
        assert context.snippet == "bb\nccc\ndddd"

    def test_offset_past_end_clamped(self) -> None:
        context = locate("abc", 99)
        assert (context.line, context.column) == (1, 4)

    def test_format_marks_column(self) -> None:
        text = ErrorContext(line=1, column=3, snippet="abcd").format()
        assert text == "1:3\n   1 | abcd\n" + " " * 9 + "^^^"


# ============================================================================
# run()
# ============================================================================


class TestRun:
    """run() routes by tree shape and never raises."""

    def test_expression(self) -> None:
        result = run("2 + 3 * 4")
        assert result.return_value == 14
        assert result.output == []

    def test_expression_division_is_real(self) -> None:
        assert run("7 / 2").return_value == 3.5

    def test_program(self) -> None:
        result = run("int main() { printf(\"%d\", 6 * 7); return 3; }")
        assert result.output == ["42"]
        assert result.return_value == 3

    def test_evaluation_error(self) -> None:
        result = run("5 / 0")
        assert result.error == "Division by zero"
        assert result.return_value is None

    def test_parse_error_formatted(self) -> None:
        result = run("(2 + 3")
        assert result.error is not None
        assert result.error.startswith("1:1\n")
        assert "Missing closing parenthesis" in result.error

    def test_empty_input(self) -> None:
        assert run("").error is not None

    def test_long_expression_chain(self) -> None:
        result = run("+".join(["1"] * 3000))
        assert result.error == "Expression nested too deeply"
        assert result.return_value is None

    def test_deep_nesting_is_parse_error(self) -> None:
        result = run("(" * 400 + "1" + ")" * 400)
        assert result.error is not None
        assert "Input nested too deeply" in result.error

    def test_integer_overflow(self) -> None:
        assert run("(2 ^ 1024) ^ 1024").error == "Integer result exceeds 4096 bits"


class TestPackage:
    """The package root re-exports the public API."""

    def test_version(self) -> None:
        assert csyntax.__version__

    def test_exports(self) -> None:
        for name in csyntax.__all__:
            assert hasattr(csyntax, name), name
