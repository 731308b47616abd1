"""
Tokenizer for the csyntax C subset.

Converts source text into a sequence of typed tokens. Never fails: characters
outside the language become INVALID tokens and the parser reports them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum, auto


class TokenKind(StrEnum):
    """Token types for the C subset."""

    # Literals
    NUMBER = auto()
    STRING = auto()
    CHAR = auto()

    # Names
    IDENTIFIER = auto()
    KEYWORD = auto()

    # Preprocessor line, verbatim
    PREPROCESSOR = auto()

    # Operators
    OPERATOR = auto()  # + - * / % ^
    ASSIGN = auto()
    COMPOUND_ASSIGN = auto()  # += -= *= /= %=
    COMPARISON = auto()  # == != < > <= >=
    LOGICAL = auto()  # && || !
    INCREMENT = auto()
    DECREMENT = auto()
    AMPERSAND = auto()
    ARROW = auto()  # ->
    DOT = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    SEMICOLON = auto()
    COMMA = auto()
    COLON = auto()

    # Unrecognised character
    INVALID = auto()

    # End of input
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the tokenizer."""

    kind: TokenKind
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


KEYWORDS: frozenset[str] = frozenset(
    {
        "int",
        "float",
        "char",
        "void",
        "if",
        "else",
        "while",
        "for",
        "return",
        "break",
        "continue",
        "struct",
        "const",
        "do",
        "switch",
        "case",
        "default",
        "double",
        "long",
        "short",
        "unsigned",
        "signed",
        "sizeof",
        "static",
        "extern",
        "auto",
        "register",
        "enum",
        "union",
        "typedef",
        "volatile",
        "goto",
    }
)

# Longest match first: every two-character operator is tried before its
# one-character prefix.
_TWO_CHAR: dict[str, TokenKind] = {
    "++": TokenKind.INCREMENT,
    "--": TokenKind.DECREMENT,
    "+=": TokenKind.COMPOUND_ASSIGN,
    "-=": TokenKind.COMPOUND_ASSIGN,
    "*=": TokenKind.COMPOUND_ASSIGN,
    "/=": TokenKind.COMPOUND_ASSIGN,
    "%=": TokenKind.COMPOUND_ASSIGN,
    "->": TokenKind.ARROW,
    "==": TokenKind.COMPARISON,
    "!=": TokenKind.COMPARISON,
    "<=": TokenKind.COMPARISON,
    ">=": TokenKind.COMPARISON,
    "&&": TokenKind.LOGICAL,
    "||": TokenKind.LOGICAL,
}

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.OPERATOR,
    "-": TokenKind.OPERATOR,
    "*": TokenKind.OPERATOR,
    "/": TokenKind.OPERATOR,
    "%": TokenKind.OPERATOR,
    "^": TokenKind.OPERATOR,
    "<": TokenKind.COMPARISON,
    ">": TokenKind.COMPARISON,
    "!": TokenKind.LOGICAL,
    "=": TokenKind.ASSIGN,
    "&": TokenKind.AMPERSAND,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
}

# Digits with at most one decimal point
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]*)?")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def tokenize(source: str) -> list[Token]:
    """Tokenize source text into a list of tokens ending with EOF.

    The text is trimmed before offsets are computed, so every ``pos`` (and
    the EOF offset) is relative to ``source.strip()``.
    """
    text = source.strip()
    tokens: list[Token] = []
    i = 0
    n = len(text)

    while i < n:
        c = text[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        # Preprocessor directive up to end of line
        if c == "#":
            end = text.find("\n", i)
            if end == -1:
                end = n
            tokens.append(Token(TokenKind.PREPROCESSOR, text[i:end], i))
            i = end
            continue

        # String and character literals
        if c == '"':
            i, tok = _read_quoted(text, i, TokenKind.STRING)
            tokens.append(tok)
            continue
        if c == "'":
            i, tok = _read_quoted(text, i, TokenKind.CHAR)
            tokens.append(tok)
            continue

        # Comments
        if text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue

        # Numbers
        m = _NUMBER_RE.match(text, i)
        if m is not None:
            tokens.append(Token(TokenKind.NUMBER, m.group(0), i))
            i = m.end()
            continue

        # Identifiers and keywords
        m = _IDENT_RE.match(text, i)
        if m is not None:
            word = m.group(0)
            kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
            tokens.append(Token(kind, word, i))
            i = m.end()
            continue

        # Two-character operators
        two = text[i : i + 2]
        if two in _TWO_CHAR:
            tokens.append(Token(_TWO_CHAR[two], two, i))
            i += 2
            continue

        # Single-character operators and punctuation
        kind = _SINGLE_CHAR.get(c, TokenKind.INVALID)
        tokens.append(Token(kind, c, i))
        i += 1

    tokens.append(Token(TokenKind.EOF, "", n))
    return tokens


def _read_quoted(text: str, start: int, kind: TokenKind) -> tuple[int, Token]:
    """Read a quoted literal, keeping quotes and escape sequences as written.

    An unterminated literal runs to the end of input and the token carries no
    closing quote.
    """
    quote = text[start]
    i = start + 1
    n = len(text)

    while i < n and text[i] != quote:
        if text[i] == "\\" and i + 1 < n:
            i += 2
            continue
        i += 1

    if i < n:
        i += 1  # closing quote
    return i, Token(kind, text[start:i], start)
