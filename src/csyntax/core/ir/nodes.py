"""
Syntax tree types for csyntax.

One frozen model per node kind, each carrying only the fields meaningful to
that kind. Child sequences are tuples so a tree cannot change once built.

Covers:
- Literals: numbers, string and char literals (kept verbatim, quotes included)
- Expressions: binary/unary operators, ++/--, address-of, dereference,
  array access, calls, brace initialiser lists
- Statements: declarations, assignments, function definitions, blocks,
  if/while/do-while/for/switch, return/break/continue
- Preprocessor lines (verbatim directive text)
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators, in source spelling."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"
    # Relational
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    # Equality
    EQ = "=="
    NE = "!="
    # Logical
    AND = "&&"
    OR = "||"


class UnaryOp(StrEnum):
    """Unary operators."""

    NEG = "unary_neg"
    POS = "unary_pos"
    NOT = "!"


class UpdateOp(StrEnum):
    """Increment and decrement."""

    INC = "++"
    DEC = "--"


class AssignOp(StrEnum):
    """Plain and compound assignment."""

    ASSIGN = "="
    ADD = "+="
    SUB = "-="
    MUL = "*="
    DIV = "/="
    MOD = "%="

    @property
    def binary(self) -> BinaryOp | None:
        """The arithmetic operator a compound assignment applies."""
        if self is AssignOp.ASSIGN:
            return None
        return BinaryOp(self.value[0])


# ---------------------------------------------------------------------------
# Expression nodes
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """An integer or floating point literal."""

    value: int | float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class StringLiteral(BaseModel):
    """A string literal, quotes and escapes kept as written."""

    value: str = Field(description='Source text including quotes, e.g. "hi\\n"')

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.value


class CharLiteral(BaseModel):
    """A character literal, quotes kept as written."""

    value: str = Field(description="Source text including quotes, e.g. 'a'")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.value


class Identifier(BaseModel):
    """Reference to a variable by name."""

    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        symbol = {UnaryOp.NEG: "-", UnaryOp.POS: "+", UnaryOp.NOT: "!"}[self.op]
        return f"{symbol}{self.operand}"


class UpdateExpr(BaseModel):
    """
    Increment or decrement of a named variable.

    Examples:
        - UpdateExpr(op=INC, name="i", prefix=True) → ++i
        - UpdateExpr(op=DEC, name="i", prefix=False) → i--
    """

    op: UpdateOp
    name: str
    prefix: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.op.value}{self.name}"
        return f"{self.name}{self.op.value}"


class AddressOf(BaseModel):
    """Address-of: &operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"&{self.operand}"


class Dereference(BaseModel):
    """Dereference: *operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"*{self.operand}"


class ArrayAccess(BaseModel):
    """Array subscript: name[index]."""

    name: str
    index: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}[{self.index}]"


class FunctionCall(BaseModel):
    """Function call: name(arg1, arg2, ...)."""

    name: str
    args: tuple[Expr, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


class InitializerList(BaseModel):
    """Brace initialiser: {a, b, c}."""

    items: tuple[Expr, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "{" + ", ".join(str(i) for i in self.items) + "}"


# ---------------------------------------------------------------------------
# Statement nodes
# ---------------------------------------------------------------------------


class Declaration(BaseModel):
    """
    Variable declaration.

    Examples:
        - int x;            → Declaration(type_name="int", name="x")
        - char *p = &c;     → pointer_depth=1, init=AddressOf(...)
        - int a[3] = {1};   → is_array=True, size=NumberLiteral(3)
    """

    type_name: str
    name: str
    pointer_depth: int = 0
    is_array: bool = False
    size: NumberLiteral | None = None
    init: Expr | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_pointer(self) -> bool:
        return self.pointer_depth > 0


class Assignment(BaseModel):
    """Assignment to a variable or array element, plain or compound."""

    target: Identifier | ArrayAccess
    op: AssignOp = AssignOp.ASSIGN
    value: Expr

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return self.target.name

    def __str__(self) -> str:
        return f"{self.target} {self.op.value} {self.value}"


class Parameter(BaseModel):
    """A function parameter: type [*] name."""

    type_name: str
    name: str
    is_pointer: bool = False

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.type_name}{'*' if self.is_pointer else ''} {self.name}"


class Block(BaseModel):
    """Brace-delimited statement list."""

    statements: tuple[Stmt, ...] = ()

    model_config = ConfigDict(frozen=True)


class FunctionDef(BaseModel):
    """Function definition: return_type name(params) { body }."""

    return_type: str
    name: str
    params: tuple[Parameter, ...] = ()
    body: Block

    model_config = ConfigDict(frozen=True)


class IfStmt(BaseModel):
    """if (condition) then_branch [else else_branch]."""

    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None

    model_config = ConfigDict(frozen=True)


class WhileStmt(BaseModel):
    """while (condition) body."""

    condition: Expr
    body: Stmt

    model_config = ConfigDict(frozen=True)


class DoWhileStmt(BaseModel):
    """do body while (condition);"""

    body: Stmt
    condition: Expr

    model_config = ConfigDict(frozen=True)


class ForStmt(BaseModel):
    """for (init; condition; increment) body, every clause optional."""

    init: Stmt | None = None
    condition: Expr | None = None
    increment: Stmt | None = None
    body: Stmt

    model_config = ConfigDict(frozen=True)


class SwitchCase(BaseModel):
    """case value: body..."""

    value: Expr
    body: tuple[Stmt, ...] = ()

    model_config = ConfigDict(frozen=True)


class SwitchStmt(BaseModel):
    """switch (test) { case ...: ... default: ... }"""

    test: Expr
    cases: tuple[SwitchCase, ...] = ()
    default: tuple[Stmt, ...] | None = None

    model_config = ConfigDict(frozen=True)


class ReturnStmt(BaseModel):
    """return [value];"""

    value: Expr | None = None

    model_config = ConfigDict(frozen=True)


class BreakStmt(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContinueStmt(BaseModel):
    model_config = ConfigDict(frozen=True)


class Preprocessor(BaseModel):
    """A preprocessor line, kept verbatim (e.g. ``#include <stdio.h>``)."""

    directive: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.directive


class Program(BaseModel):
    """Top-level ordered sequence of statements and preprocessor lines."""

    statements: tuple[Stmt, ...] = ()

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Union types
# ---------------------------------------------------------------------------

Expr = (
    NumberLiteral
    | StringLiteral
    | CharLiteral
    | Identifier
    | BinaryExpr
    | UnaryExpr
    | UpdateExpr
    | AddressOf
    | Dereference
    | ArrayAccess
    | FunctionCall
    | InitializerList
)

Stmt = (
    Expr
    | Declaration
    | Assignment
    | FunctionDef
    | Block
    | IfStmt
    | WhileStmt
    | DoWhileStmt
    | ForStmt
    | SwitchStmt
    | ReturnStmt
    | BreakStmt
    | ContinueStmt
    | Preprocessor
)

Node = Stmt | Program | SwitchCase | Parameter

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
AddressOf.model_rebuild()
Dereference.model_rebuild()
ArrayAccess.model_rebuild()
FunctionCall.model_rebuild()
InitializerList.model_rebuild()
Declaration.model_rebuild()
Assignment.model_rebuild()
Block.model_rebuild()
FunctionDef.model_rebuild()
IfStmt.model_rebuild()
WhileStmt.model_rebuild()
DoWhileStmt.model_rebuild()
ForStmt.model_rebuild()
SwitchCase.model_rebuild()
SwitchStmt.model_rebuild()
ReturnStmt.model_rebuild()
Program.model_rebuild()
