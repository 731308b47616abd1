"""
Interpreter configuration.

Bounds the resources a single ``execute_program`` call may consume. Program
text comes from end users, so an unbounded loop, runaway recursion or an
oversized value must end in a captured error rather than a hang.

Configuration via environment variables:

- ``CSYNTAX_MAX_STEPS``: interpreted-step ceiling per execution (default: 100000)
- ``CSYNTAX_MAX_CALL_DEPTH``: nested call ceiling (default: 64)
- ``CSYNTAX_MAX_INT_BITS``: widest integer a computation may produce (default: 4096)
- ``CSYNTAX_MAX_ARRAY_LENGTH``: largest declared array (default: 10000)
- ``CSYNTAX_MAX_OUTPUT_CHARS``: total printf output per execution (default: 1000000)
- ``CSYNTAX_OUTPUT_FUNCTION``: name of the output stub (default: ``printf``)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_STEPS = 100_000
DEFAULT_MAX_CALL_DEPTH = 64
DEFAULT_MAX_INT_BITS = 4096
DEFAULT_MAX_ARRAY_LENGTH = 10_000
DEFAULT_MAX_OUTPUT_CHARS = 1_000_000
DEFAULT_OUTPUT_FUNCTION = "printf"


class InterpreterSettings(BaseModel):
    """Resource limits and the reserved output call for the interpreter."""

    max_steps: int = Field(
        default=DEFAULT_MAX_STEPS, ge=1, description="Maximum interpreted steps per execution"
    )
    max_call_depth: int = Field(
        default=DEFAULT_MAX_CALL_DEPTH, ge=1, description="Maximum nested function calls"
    )
    max_int_bits: int = Field(
        default=DEFAULT_MAX_INT_BITS, ge=64, description="Widest integer result allowed"
    )
    max_array_length: int = Field(
        default=DEFAULT_MAX_ARRAY_LENGTH, ge=1, description="Largest array a declaration may create"
    )
    max_output_chars: int = Field(
        default=DEFAULT_MAX_OUTPUT_CHARS, ge=1, description="Total characters of printed output"
    )
    output_function: str = Field(
        default=DEFAULT_OUTPUT_FUNCTION,
        min_length=1,
        description="Call target intercepted as the output stub",
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls) -> InterpreterSettings:
        """Build settings from ``CSYNTAX_*`` environment variables."""

        def _int(name: str, default: int) -> int:
            return int(os.environ.get(name, str(default)))

        return cls(
            max_steps=_int("CSYNTAX_MAX_STEPS", DEFAULT_MAX_STEPS),
            max_call_depth=_int("CSYNTAX_MAX_CALL_DEPTH", DEFAULT_MAX_CALL_DEPTH),
            max_int_bits=_int("CSYNTAX_MAX_INT_BITS", DEFAULT_MAX_INT_BITS),
            max_array_length=_int("CSYNTAX_MAX_ARRAY_LENGTH", DEFAULT_MAX_ARRAY_LENGTH),
            max_output_chars=_int("CSYNTAX_MAX_OUTPUT_CHARS", DEFAULT_MAX_OUTPUT_CHARS),
            output_function=os.environ.get("CSYNTAX_OUTPUT_FUNCTION", DEFAULT_OUTPUT_FUNCTION),
        )
