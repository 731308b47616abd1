"""
Recursive descent parser for the csyntax C subset.

Input is parsed in one of two modes. Token streams containing a keyword,
semicolon, brace or preprocessor line are parsed as a program; anything else
is parsed as a single arithmetic expression.

Grammar (expressions, precedence low to high):
    expr        → or_expr
    or_expr     → and_expr ("||" and_expr)*
    and_expr    → equality ("&&" equality)*
    equality    → relational (("==" | "!=") relational)*
    relational  → additive (("<" | ">" | "<=" | ">=") additive)*
    additive    → multiply (("+" | "-") multiply)*
    multiply    → power (("*" | "/" | "%") power)*
    power       → primary ("^" power)?
    primary     → NUMBER | STRING | CHAR
                | IDENT ("[" expr "]" | "(" args ")" | "++" | "--")?
                | "(" expr ")" | ("++" | "--") IDENT
                | ("!" | "&" | "*" | "+" | "-") primary
                | "{" (expr ("," expr)*)? "}"

Grammar (statements):
    program     → (PREPROCESSOR | statement)*
    statement   → declaration | if | while | do_while | for | switch
                | "break" ";" | "continue" ";" | "return" expr? ";"
                | block | ";" | simple ";"
    declaration → type "*"* IDENT ("[" NUMBER? "]")? ("=" expr)? ";"
                | type "*"* IDENT "(" params ")" block
    simple      → IDENT ("[" expr "]")? assign_op expr | expr

Errors are collected as ParseError values. The first structural problem ends
the parse; parse() and parse_tokens() never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import NoReturn

from csyntax.core.errors import locate
from csyntax.core.ir.nodes import (
    AddressOf,
    ArrayAccess,
    Assignment,
    AssignOp,
    BinaryExpr,
    BinaryOp,
    Block,
    BreakStmt,
    CharLiteral,
    ContinueStmt,
    Declaration,
    Dereference,
    DoWhileStmt,
    Expr,
    ForStmt,
    FunctionCall,
    FunctionDef,
    Identifier,
    IfStmt,
    InitializerList,
    NumberLiteral,
    Parameter,
    Preprocessor,
    Program,
    ReturnStmt,
    Stmt,
    StringLiteral,
    SwitchCase,
    SwitchStmt,
    UnaryExpr,
    UnaryOp,
    UpdateExpr,
    UpdateOp,
    WhileStmt,
)
from csyntax.core.lang.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Keywords that can begin a declaration (no type checking: any combination is
# accepted and joined into the declared type name)
TYPE_KEYWORDS: frozenset[str] = frozenset(
    {"int", "float", "char", "void", "double", "long", "short", "unsigned", "signed"}
)
QUALIFIER_KEYWORDS: frozenset[str] = frozenset(
    {"const", "static", "extern", "register", "volatile", "auto"}
)
_DECL_KEYWORDS = TYPE_KEYWORDS | QUALIFIER_KEYWORDS

# Token kinds whose presence switches the parser into program mode
_PROGRAM_MARKERS = frozenset(
    {
        TokenKind.KEYWORD,
        TokenKind.SEMICOLON,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
        TokenKind.PREPROCESSOR,
    }
)

_EQUALITY_OPS = {"==": BinaryOp.EQ, "!=": BinaryOp.NE}
_RELATIONAL_OPS = {"<": BinaryOp.LT, ">": BinaryOp.GT, "<=": BinaryOp.LE, ">=": BinaryOp.GE}
_ADDITIVE_OPS = {"+": BinaryOp.ADD, "-": BinaryOp.SUB}
_MULTIPLICATIVE_OPS = {"*": BinaryOp.MUL, "/": BinaryOp.DIV, "%": BinaryOp.MOD}


@dataclass(frozen=True)
class ParseError:
    """A single parse diagnostic: what went wrong, where, and how to fix it."""

    message: str
    pos: int
    suggestion: str

    def format(self, source: str) -> str:
        """Render the error against the text it came from.

        Returns:
            ``line:column``, a marked snippet, the message and a hint line
        """
        context = locate(source.strip(), self.pos)
        return f"{context.format()}\n{self.message}\nhint: {self.suggestion}"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one parse call.

    ``tree`` is set iff ``success``; ``errors`` is non-empty iff not.
    """

    success: bool
    tree: Program | Expr | None = None
    errors: tuple[ParseError, ...] = field(default_factory=tuple)

    @classmethod
    def ok(cls, tree: Program | Expr) -> ParseResult:
        return cls(success=True, tree=tree)

    @classmethod
    def failed(cls, errors: Sequence[ParseError]) -> ParseResult:
        return cls(success=False, errors=tuple(errors))

    @property
    def first_error(self) -> ParseError | None:
        return self.errors[0] if self.errors else None


class _ParseAbort(Exception):
    """Unwinds the current production after an error has been recorded.

    Never escapes this module: parse_tokens() converts it into a failed
    ParseResult.
    """


class _Parser:
    """Recursive descent parser over an immutable token tuple."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        toks = tuple(tokens)
        if not toks or toks[-1].kind != TokenKind.EOF:
            end = toks[-1].pos + len(toks[-1].value) if toks else 0
            toks = toks + (Token(TokenKind.EOF, "", end),)
        self.tokens = toks
        self.pos = 0
        self.errors: list[ParseError] = []

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]  # EOF

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def check(self, kind: TokenKind, value: str | None = None) -> bool:
        tok = self.current
        return tok.kind == kind and (value is None or tok.value == value)

    def match(self, kind: TokenKind, value: str | None = None) -> Token | None:
        if self.check(kind, value):
            return self.advance()
        return None

    def expect(self, kind: TokenKind, message: str, suggestion: str) -> Token:
        if not self.check(kind):
            self.fail(message, self.current.pos, suggestion)
        return self.advance()

    def fail(self, message: str, pos: int, suggestion: str) -> NoReturn:
        self.errors.append(ParseError(message=message, pos=pos, suggestion=suggestion))
        raise _ParseAbort(message)

    # -- Entry --

    def parse(self) -> ParseResult:
        try:
            invalid = next((t for t in self.tokens if t.kind == TokenKind.INVALID), None)
            if invalid is not None:
                self.fail(
                    f"Invalid character '{invalid.value}'",
                    invalid.pos,
                    f"Remove '{invalid.value}' or use valid characters",
                )

            is_program = any(t.kind in _PROGRAM_MARKERS for t in self.tokens)
            logger.debug(
                "Parsing %d tokens as %s",
                len(self.tokens),
                "program" if is_program else "expression",
            )
            tree: Program | Expr = self.parse_program() if is_program else self.parse_expr()

            if not self.check(TokenKind.EOF):
                tok = self.current
                self.errors.append(
                    ParseError(
                        message=f"Unexpected token '{tok.value}'",
                        pos=tok.pos,
                        suggestion="Check for missing operators, semicolons, or braces",
                    )
                )
        except _ParseAbort:
            return ParseResult.failed(self.errors)
        except RecursionError:
            logger.debug("Nesting limit reached at offset %d", self.current.pos)
            self.errors.append(
                ParseError(
                    message="Input nested too deeply",
                    pos=self.current.pos,
                    suggestion="Split the nested expression or block into smaller parts",
                )
            )
            return ParseResult.failed(self.errors)

        if self.errors:
            return ParseResult.failed(self.errors)
        return ParseResult.ok(tree)

    # -- Statements --

    def parse_program(self) -> Program:
        """(PREPROCESSOR | statement)*"""
        statements: list[Stmt] = []
        while not self.check(TokenKind.EOF):
            directive = self.match(TokenKind.PREPROCESSOR)
            if directive is not None:
                statements.append(Preprocessor(directive=directive.value))
                continue
            statements.append(self.parse_statement())
        return Program(statements=tuple(statements))

    def parse_statement(self) -> Stmt:
        tok = self.current

        if tok.kind == TokenKind.KEYWORD:
            if tok.value in _DECL_KEYWORDS:
                return self.parse_declaration()
            if tok.value == "if":
                return self.parse_if()
            if tok.value == "while":
                return self.parse_while()
            if tok.value == "do":
                return self.parse_do_while()
            if tok.value == "for":
                return self.parse_for()
            if tok.value == "switch":
                return self.parse_switch()
            if tok.value == "return":
                return self.parse_return()
            if tok.value in ("break", "continue"):
                self.advance()
                self.expect(
                    TokenKind.SEMICOLON,
                    f"Missing semicolon after {tok.value}",
                    f"Add ; after {tok.value}",
                )
                return BreakStmt() if tok.value == "break" else ContinueStmt()

        if tok.kind == TokenKind.LBRACE:
            return self.parse_block()

        if tok.kind == TokenKind.SEMICOLON:
            self.advance()
            return Block()

        if self._starts_expression(tok):
            return self.parse_simple_statement(terminated=True)

        self.fail(
            f"Unexpected token '{tok.value}'" if tok.value else "Unexpected end of input",
            tok.pos,
            "Expected declaration, statement, or expression",
        )

    @staticmethod
    def _starts_expression(tok: Token) -> bool:
        if tok.kind in (
            TokenKind.IDENTIFIER,
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.CHAR,
            TokenKind.INCREMENT,
            TokenKind.DECREMENT,
            TokenKind.LPAREN,
            TokenKind.AMPERSAND,
        ):
            return True
        if tok.kind == TokenKind.OPERATOR and tok.value in ("+", "-", "*"):
            return True
        return tok.kind == TokenKind.LOGICAL and tok.value == "!"

    def _parse_type_name(self) -> str:
        words: list[str] = []
        while self.current.kind == TokenKind.KEYWORD and self.current.value in _DECL_KEYWORDS:
            words.append(self.advance().value)
        return " ".join(words)

    def _parse_pointer_depth(self) -> int:
        depth = 0
        while self.match(TokenKind.OPERATOR, "*"):
            depth += 1
        return depth

    def parse_declaration(self) -> Declaration | FunctionDef:
        """type "*"* IDENT (array | function | initializer) ";" """
        type_name = self._parse_type_name()
        pointer_depth = self._parse_pointer_depth()

        name_tok = self.expect(
            TokenKind.IDENTIFIER,
            "Expected identifier after type",
            f"Add variable name after '{type_name}'",
        )
        name = name_tok.value

        if self.check(TokenKind.LPAREN):
            return self.parse_function(type_name, name, pointer_depth)

        is_array = False
        size: NumberLiteral | None = None
        if self.match(TokenKind.LBRACKET):
            is_array = True
            size_tok = self.match(TokenKind.NUMBER)
            if size_tok is not None:
                size = self._number(size_tok)
            self.expect(
                TokenKind.RBRACKET,
                "Expected ] after array size",
                "Add ] to close array declaration",
            )

        init: Expr | None = None
        if self.match(TokenKind.ASSIGN):
            init = self.parse_expr()

        self.expect(
            TokenKind.SEMICOLON,
            "Missing semicolon",
            "Add ; after array declaration" if is_array else "Add ';' after declaration",
        )
        return Declaration(
            type_name=type_name,
            name=name,
            pointer_depth=pointer_depth,
            is_array=is_array,
            size=size,
            init=init,
        )

    def parse_function(self, return_type: str, name: str, pointer_depth: int) -> FunctionDef:
        """"(" params ")" block"""
        self.advance()  # (

        params: list[Parameter] = []
        # f(void) declares no parameters
        if self.check(TokenKind.KEYWORD, "void") and self.peek(1).kind == TokenKind.RPAREN:
            self.advance()
        elif not self.check(TokenKind.RPAREN):
            while True:
                if not (self.check(TokenKind.KEYWORD) and self.current.value in _DECL_KEYWORDS):
                    self.fail(
                        "Expected parameter type",
                        self.current.pos,
                        "Start each parameter with a type, e.g. 'int a'",
                    )
                param_type = self._parse_type_name()
                is_pointer = self._parse_pointer_depth() > 0
                param_name = self.expect(
                    TokenKind.IDENTIFIER,
                    "Expected parameter name",
                    f"Add a name after '{param_type}'",
                )
                params.append(
                    Parameter(type_name=param_type, name=param_name.value, is_pointer=is_pointer)
                )
                if not self.match(TokenKind.COMMA):
                    break

        self.expect(
            TokenKind.RPAREN,
            "Missing closing parenthesis in function declaration",
            "Add ) after parameters",
        )

        if not self.check(TokenKind.LBRACE):
            self.fail(
                "Missing function body",
                self.current.pos,
                f"Add {{ ... }} after {name}(...)",
            )
        body = self.parse_block()

        return FunctionDef(
            return_type=return_type + "*" * pointer_depth,
            name=name,
            params=tuple(params),
            body=body,
        )

    def parse_block(self) -> Block:
        """"{" statement* "}" """
        self.expect(TokenKind.LBRACE, "Expected {", "Add { to start block")

        statements: list[Stmt] = []
        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            statements.append(self.parse_statement())

        self.expect(TokenKind.RBRACE, "Missing closing brace", "Add } to close block")
        return Block(statements=tuple(statements))

    def _parse_condition(self, keyword: str) -> Expr:
        """"(" expr ")" after a control keyword"""
        self.expect(TokenKind.LPAREN, f"Expected ( after {keyword}", "Add ( before condition")
        condition = self.parse_expr()
        self.expect(
            TokenKind.RPAREN, "Expected ) after condition", f"Add ) after {keyword} condition"
        )
        return condition

    def parse_if(self) -> IfStmt:
        self.advance()  # if
        condition = self._parse_condition("if")
        then_branch = self.parse_statement()

        else_branch: Stmt | None = None
        if self.match(TokenKind.KEYWORD, "else"):
            else_branch = self.parse_statement()

        return IfStmt(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def parse_while(self) -> WhileStmt:
        self.advance()  # while
        condition = self._parse_condition("while")
        body = self.parse_statement()
        return WhileStmt(condition=condition, body=body)

    def parse_do_while(self) -> DoWhileStmt:
        self.advance()  # do
        body = self.parse_statement()

        if not self.match(TokenKind.KEYWORD, "while"):
            self.fail(
                "Expected 'while' after do body",
                self.current.pos,
                "Add 'while (condition);' after do block",
            )
        condition = self._parse_condition("while")
        self.expect(
            TokenKind.SEMICOLON, "Missing semicolon after do-while", "Add ; after while (...)"
        )
        return DoWhileStmt(body=body, condition=condition)

    def parse_for(self) -> ForStmt:
        """"for" "(" init? ";" condition? ";" increment? ")" statement"""
        self.advance()  # for
        self.expect(TokenKind.LPAREN, "Expected ( after for", "Add ( before for clauses")

        init: Stmt | None = None
        if not self.match(TokenKind.SEMICOLON):
            if self.check(TokenKind.KEYWORD) and self.current.value in _DECL_KEYWORDS:
                init = self.parse_declaration()
            else:
                init = self.parse_simple_statement(terminated=True)

        condition: Expr | None = None
        if not self.check(TokenKind.SEMICOLON):
            condition = self.parse_expr()
        self.expect(
            TokenKind.SEMICOLON, "Expected ; after for condition", "Add ; after the loop condition"
        )

        increment: Stmt | None = None
        if not self.check(TokenKind.RPAREN):
            increment = self.parse_simple_statement(terminated=False)

        self.expect(
            TokenKind.RPAREN, "Expected ) after for clauses", "Add ) after for loop header"
        )
        body = self.parse_statement()
        return ForStmt(init=init, condition=condition, increment=increment, body=body)

    def parse_switch(self) -> SwitchStmt:
        """"switch" "(" expr ")" "{" (case | default)* "}" """
        self.advance()  # switch
        self.expect(TokenKind.LPAREN, "Expected ( after switch", "Add ( before expression")
        if self.check(TokenKind.RPAREN):
            self.fail(
                "Empty switch expression",
                self.current.pos,
                "Add an expression inside switch ( )",
            )
        test = self.parse_expr()
        self.expect(
            TokenKind.RPAREN, "Expected ) after switch expression", "Add ) after expression"
        )
        self.expect(TokenKind.LBRACE, "Expected { after switch", "Add { to start switch body")

        cases: list[SwitchCase] = []
        default: tuple[Stmt, ...] | None = None

        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            label = self.current
            if label.kind == TokenKind.KEYWORD and label.value == "case":
                self.advance()
                value = self.parse_expr()
                self._expect_label_colon("Expected : after case value", "Add : after case value")
                cases.append(SwitchCase(value=value, body=self._parse_case_body()))
            elif label.kind == TokenKind.KEYWORD and label.value == "default":
                if default is not None:
                    self.fail(
                        "Duplicate default label",
                        label.pos,
                        "Keep a single default: in each switch",
                    )
                self.advance()
                self._expect_label_colon("Expected : after default", "Add : after default")
                default = self._parse_case_body()
            else:
                self.fail(
                    f"Expected case or default but got '{label.value}'",
                    label.pos,
                    "Start each switch section with 'case value:' or 'default:'",
                )

        self.expect(
            TokenKind.RBRACE, "Expected } to close switch", "Add } to close switch statement"
        )
        return SwitchStmt(test=test, cases=tuple(cases), default=default)

    def _expect_label_colon(self, message: str, suggestion: str) -> None:
        # ';' accepted for labels written as "case 1;"
        if not (self.match(TokenKind.COLON) or self.match(TokenKind.SEMICOLON)):
            self.fail(message, self.current.pos, suggestion)

    def _parse_case_body(self) -> tuple[Stmt, ...]:
        body: list[Stmt] = []
        while not (
            self.check(TokenKind.RBRACE)
            or self.check(TokenKind.EOF)
            or self.check(TokenKind.KEYWORD, "case")
            or self.check(TokenKind.KEYWORD, "default")
        ):
            body.append(self.parse_statement())
        return tuple(body)

    def parse_return(self) -> ReturnStmt:
        self.advance()  # return
        value: Expr | None = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.parse_expr()
        self.expect(
            TokenKind.SEMICOLON, "Missing semicolon after return", "Add ; after return statement"
        )
        return ReturnStmt(value=value)

    def parse_simple_statement(self, terminated: bool) -> Stmt:
        """Assignment to a variable or array element, or an expression statement."""
        stmt = self._parse_assignment_or_expr()
        if terminated:
            self.expect(TokenKind.SEMICOLON, "Missing semicolon", "Add ; after statement")
        return stmt

    def _parse_assignment_or_expr(self) -> Stmt:
        if self.check(TokenKind.IDENTIFIER):
            start = self.pos
            name = self.advance().value

            target: Identifier | ArrayAccess = Identifier(name=name)
            if self.match(TokenKind.LBRACKET):
                index = self.parse_expr()
                self.expect(
                    TokenKind.RBRACKET,
                    "Expected ] after array index",
                    "Add ] to close array subscript",
                )
                target = ArrayAccess(name=name, index=index)

            if self.check(TokenKind.ASSIGN) or self.check(TokenKind.COMPOUND_ASSIGN):
                op = AssignOp(self.advance().value)
                value = self.parse_expr()
                return Assignment(target=target, op=op, value=value)

            # Not an assignment: rewind and read the whole thing as an expression
            self.pos = start

        return self.parse_expr()

    # -- Expressions --

    def parse_expr(self) -> Expr:
        return self.parse_or()

    def parse_or(self) -> Expr:
        """and_expr ("||" and_expr)*"""
        left = self.parse_and()
        while self.match(TokenKind.LOGICAL, "||"):
            right = self.parse_and()
            left = BinaryExpr(op=BinaryOp.OR, left=left, right=right)
        return left

    def parse_and(self) -> Expr:
        """equality ("&&" equality)*"""
        left = self.parse_equality()
        while self.match(TokenKind.LOGICAL, "&&"):
            right = self.parse_equality()
            left = BinaryExpr(op=BinaryOp.AND, left=left, right=right)
        return left

    def parse_equality(self) -> Expr:
        """relational (("==" | "!=") relational)*"""
        left = self.parse_relational()
        while self.check(TokenKind.COMPARISON) and self.current.value in _EQUALITY_OPS:
            op = _EQUALITY_OPS[self.advance().value]
            right = self.parse_relational()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_relational(self) -> Expr:
        """additive (("<" | ">" | "<=" | ">=") additive)*"""
        left = self.parse_additive()
        while self.check(TokenKind.COMPARISON) and self.current.value in _RELATIONAL_OPS:
            op = _RELATIONAL_OPS[self.advance().value]
            right = self.parse_additive()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_additive(self) -> Expr:
        """multiply (("+" | "-") multiply)*"""
        left = self.parse_multiply()
        while self.check(TokenKind.OPERATOR) and self.current.value in _ADDITIVE_OPS:
            op = _ADDITIVE_OPS[self.advance().value]
            right = self.parse_multiply()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_multiply(self) -> Expr:
        """power (("*" | "/" | "%") power)*"""
        left = self.parse_power()
        while self.check(TokenKind.OPERATOR) and self.current.value in _MULTIPLICATIVE_OPS:
            op = _MULTIPLICATIVE_OPS[self.advance().value]
            right = self.parse_power()
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def parse_power(self) -> Expr:
        """primary ("^" power)?  (right associative)"""
        left = self.parse_primary()
        if self.match(TokenKind.OPERATOR, "^"):
            right = self.parse_power()
            return BinaryExpr(op=BinaryOp.POW, left=left, right=right)
        return left

    def parse_primary(self) -> Expr:
        tok = self.current

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return self._number(tok)
        if tok.kind == TokenKind.STRING:
            self.advance()
            return StringLiteral(value=tok.value)
        if tok.kind == TokenKind.CHAR:
            self.advance()
            return CharLiteral(value=tok.value)

        # Prefix increment/decrement
        if tok.kind in (TokenKind.INCREMENT, TokenKind.DECREMENT):
            self.advance()
            name_tok = self.expect(
                TokenKind.IDENTIFIER,
                f"Expected identifier after '{tok.value}'",
                f"Apply {tok.value} to a variable name",
            )
            return UpdateExpr(op=UpdateOp(tok.value), name=name_tok.value, prefix=True)

        if tok.kind == TokenKind.LOGICAL and tok.value == "!":
            self.advance()
            return UnaryExpr(op=UnaryOp.NOT, operand=self.parse_primary())

        if tok.kind == TokenKind.AMPERSAND:
            self.advance()
            return AddressOf(operand=self.parse_primary())

        if tok.kind == TokenKind.IDENTIFIER:
            return self._parse_identifier_expr()

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            if not self.check(TokenKind.RPAREN):
                self.fail(
                    "Missing closing parenthesis",
                    tok.pos,
                    f"Add ')' after position {self.current.pos}",
                )
            self.advance()
            return expr

        if tok.kind == TokenKind.RPAREN:
            self.fail(
                "Unexpected closing parenthesis",
                tok.pos,
                "Remove extra ) or add matching ( before it",
            )

        if tok.kind == TokenKind.LBRACE:
            return self._parse_initializer_list()

        if tok.kind == TokenKind.OPERATOR:
            if tok.value == "*":
                self.advance()
                return Dereference(operand=self.parse_primary())
            if tok.value in ("+", "-"):
                self.advance()
                op = UnaryOp.NEG if tok.value == "-" else UnaryOp.POS
                return UnaryExpr(op=op, operand=self.parse_primary())
            self.fail(
                f"Expected number or '(' but got operator '{tok.value}'",
                tok.pos,
                "Add a number or expression before the operator",
            )

        if tok.kind == TokenKind.EOF:
            self.fail(
                "Unexpected end of input",
                tok.pos,
                "Complete the expression with a number, variable or (",
            )

        self.fail(
            f"Expected number or '(' but got '{tok.value}'",
            tok.pos,
            "Expression must start with a number or (",
        )

    def _parse_identifier_expr(self) -> Expr:
        """IDENT ("[" expr "]" | "(" args ")" | "++" | "--")?"""
        name = self.advance().value

        if self.match(TokenKind.LBRACKET):
            index = self.parse_expr()
            self.expect(
                TokenKind.RBRACKET, "Expected ] after array index", "Add ] to close array subscript"
            )
            return ArrayAccess(name=name, index=index)

        if self.match(TokenKind.LPAREN):
            args: list[Expr] = []
            while not self.check(TokenKind.RPAREN) and not self.check(TokenKind.EOF):
                args.append(self.parse_expr())
                if not self.match(TokenKind.COMMA):
                    break
            self.expect(
                TokenKind.RPAREN,
                "Expected ) after function arguments",
                "Add ) to close function call",
            )
            return FunctionCall(name=name, args=tuple(args))

        if self.check(TokenKind.INCREMENT) or self.check(TokenKind.DECREMENT):
            op = UpdateOp(self.advance().value)
            return UpdateExpr(op=op, name=name, prefix=False)

        return Identifier(name=name)

    def _parse_initializer_list(self) -> InitializerList:
        """"{" (expr ("," expr)*)? "}" """
        self.advance()  # {
        items: list[Expr] = []
        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            items.append(self.parse_expr())
            if not self.match(TokenKind.COMMA):
                break
        self.expect(
            TokenKind.RBRACE, "Missing closing brace", "Add } to close the initializer list"
        )
        return InitializerList(items=tuple(items))

    def _number(self, tok: Token) -> NumberLiteral:
        try:
            if "." in tok.value:
                return NumberLiteral(value=float(tok.value))
            return NumberLiteral(value=int(tok.value))
        except ValueError:
            # int() refuses literals past Python's digit limit
            self.fail("Number literal too long", tok.pos, "Use a shorter number")


def parse_tokens(tokens: Sequence[Token]) -> ParseResult:
    """Parse a token sequence produced by tokenize().

    Args:
        tokens: Tokens ending with EOF (one is appended if missing)

    Returns:
        ParseResult carrying either the tree or the recorded errors.
    """
    return _Parser(tokens).parse()


def parse(source: str) -> ParseResult:
    """Parse an arithmetic expression or C-subset program.

    Args:
        source: Text such as ``"2 + 3 * 4"`` or ``"int x = 5;"``

    Returns:
        ParseResult. Empty input fails with "Empty expression" at offset 0.
    """
    if not source.strip():
        return ParseResult.failed(
            [
                ParseError(
                    message="Empty expression",
                    pos=0,
                    suggestion="Enter an arithmetic expression or C program",
                )
            ]
        )
    return parse_tokens(tokenize(source))
