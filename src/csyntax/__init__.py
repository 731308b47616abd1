"""
csyntax - syntax analysis and interpretation for arithmetic and a small C subset.

Turns text into a validated syntax tree with actionable diagnostics, then
evaluates bare expressions arithmetically or runs program-shaped input in a
bounded tree-walking interpreter.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.config import InterpreterSettings
from .core.errors import (
    CallDepthExceededError,
    CSyntaxError,
    DivisionByZeroError,
    EvaluationError,
    ExecutionError,
    IntegerOverflowError,
    StepLimitExceededError,
    UnboundIdentifierError,
    UndefinedFunctionError,
    UnknownOperatorError,
    UnsupportedNodeError,
)
from .core.lang import (
    ExecutionResult,
    ParseError,
    ParseResult,
    Token,
    TokenKind,
    evaluate_arithmetic,
    execute_program,
    parse,
    parse_tokens,
    render_tree,
    run,
    tokenize,
)


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("csyntax")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    # Pipeline
    "tokenize",
    "parse",
    "parse_tokens",
    "evaluate_arithmetic",
    "execute_program",
    "render_tree",
    "run",
    # Results
    "Token",
    "TokenKind",
    "ParseError",
    "ParseResult",
    "ExecutionResult",
    "InterpreterSettings",
    # Errors
    "CSyntaxError",
    "EvaluationError",
    "DivisionByZeroError",
    "IntegerOverflowError",
    "UnsupportedNodeError",
    "UnknownOperatorError",
    "UnboundIdentifierError",
    "ExecutionError",
    "UndefinedFunctionError",
    "StepLimitExceededError",
    "CallDepthExceededError",
]
