"""
csyntax language pipeline.

Tokenizer, parser, arithmetic evaluator, program interpreter and tree
renderer for arithmetic expressions and a small C subset.

Usage:
    from csyntax.core.lang import evaluate_arithmetic, execute_program, parse

    result = parse("2 + 3 * 4")
    evaluate_arithmetic(result.tree)
    # 14

    result = parse("int main() { printf(1 + 2); return 0; }")
    execute_program(result.tree).output
    # ["3"]
"""

from csyntax.core.lang.arithmetic import evaluate_arithmetic
from csyntax.core.lang.interpreter import ExecutionResult, Interpreter, execute_program
from csyntax.core.lang.parser import ParseError, ParseResult, parse, parse_tokens
from csyntax.core.lang.pipeline import run
from csyntax.core.lang.render import render_tree
from csyntax.core.lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "ExecutionResult",
    "Interpreter",
    "ParseError",
    "ParseResult",
    "Token",
    "TokenKind",
    "evaluate_arithmetic",
    "execute_program",
    "parse",
    "parse_tokens",
    "render_tree",
    "run",
    "tokenize",
]
