"""Shared pytest fixtures for csyntax tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from csyntax.core.config import InterpreterSettings
from csyntax.core.lang.interpreter import ExecutionResult, execute_program
from csyntax.core.lang.parser import parse


@pytest.fixture(autouse=True)
def _clear_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CSYNTAX_* variables from the outer shell out of every test."""
    for name in (
        "CSYNTAX_MAX_STEPS",
        "CSYNTAX_MAX_CALL_DEPTH",
        "CSYNTAX_MAX_INT_BITS",
        "CSYNTAX_MAX_ARRAY_LENGTH",
        "CSYNTAX_MAX_OUTPUT_CHARS",
        "CSYNTAX_OUTPUT_FUNCTION",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> InterpreterSettings:
    """Default interpreter settings."""
    return InterpreterSettings()


@pytest.fixture
def run_source(
    settings: InterpreterSettings,
) -> Callable[..., ExecutionResult]:
    """Parse source that must be valid and execute it with the interpreter."""

    def _run(source: str, config: InterpreterSettings | None = None) -> ExecutionResult:
        result = parse(source)
        assert result.success, result.errors
        assert result.tree is not None
        return execute_program(result.tree, config or settings)

    return _run
