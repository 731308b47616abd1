"""
Tree-walking interpreter for csyntax programs.

Executes a parsed Program against fresh per-call state: a stack of variable
frames, a function table, an output buffer, one return-value slot and the
break/continue flags. Faults never escape execute(); they are reported in
ExecutionResult.error next to whatever output and variables were produced.

Numeric semantics differ from the arithmetic evaluator on purpose: ``/``
truncates toward zero here, as integer division does in C.

Every resource a program can grow (steps, call depth, integer width, array
length and printed output) is capped by InterpreterSettings.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from csyntax.core.config import InterpreterSettings
from csyntax.core.errors import (
    CallDepthExceededError,
    CSyntaxError,
    DivisionByZeroError,
    ExecutionError,
    StepLimitExceededError,
    UndefinedFunctionError,
)
from csyntax.core.ir.nodes import (
    AddressOf,
    ArrayAccess,
    Assignment,
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
    Node,
    NumberLiteral,
    Preprocessor,
    Program,
    ReturnStmt,
    Stmt,
    StringLiteral,
    SwitchStmt,
    UnaryExpr,
    UnaryOp,
    UpdateExpr,
    UpdateOp,
    WhileStmt,
)
from csyntax.core.lang.arithmetic import bounded_int, c_remainder, c_trunc_div, real_power

logger = logging.getLogger(__name__)

ENTRY_POINT = "main"

# Widest field a printf width or precision may ask for
MAX_FORMAT_WIDTH = 1024

_ARITHMETIC = frozenset(
    {BinaryOp.ADD, BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.MOD, BinaryOp.POW}
)


@dataclass
class ExecutionResult:
    """Outcome of one program execution."""

    output: list[str] = field(default_factory=list)
    return_value: int | float | None = None
    variables: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class Frame:
    """Variables of one activation: the global scope or a function call."""

    function: str
    variables: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class Pointer:
    """Result of ``&name`` or ``&name[i]``: a reference to a frame slot."""

    frame: Frame
    name: str
    index: int | None = None

    def read(self) -> Any:
        value = self.frame.variables.get(self.name, 0)
        if self.index is None:
            return value
        if not isinstance(value, list) or not 0 <= self.index < len(value):
            raise ExecutionError(f"Dangling pointer {self}")
        return value[self.index]

    def __str__(self) -> str:
        if self.index is None:
            return f"&{self.name}"
        return f"&{self.name}[{self.index}]"


class Interpreter:
    """Executes program trees. State is rebuilt on every execute() call."""

    def __init__(self, settings: InterpreterSettings | None = None) -> None:
        self.settings = settings or InterpreterSettings()
        self._reset()

    def _reset(self) -> None:
        self._frames: list[Frame] = [Frame(function="<global>")]
        self._functions: dict[str, FunctionDef] = {}
        self._output: list[str] = []
        self._output_chars = 0
        self._return_value: Any = None
        self._break = False
        self._continue = False
        self._steps = 0

    @property
    def _frame(self) -> Frame:
        return self._frames[-1]

    @property
    def _interrupted(self) -> bool:
        return self._return_value is not None or self._break or self._continue

    # -- Entry --

    def execute(self, tree: Node) -> ExecutionResult:
        """Run a tree and capture output, return value and final globals."""
        self._reset()
        error: str | None = None
        try:
            self._run(tree)
        except CSyntaxError as e:
            error = e.message
        except RecursionError:
            error = "Maximum recursion depth exceeded"
        except Exception as e:
            logger.debug("Unexpected execution fault", exc_info=True)
            error = f"Execution error: {e}"

        return ExecutionResult(
            output=list(self._output),
            return_value=None if error else self._return_value,
            variables=self._snapshot(),
            error=error,
        )

    def _run(self, tree: Node) -> None:
        if isinstance(tree, Program):
            self._exec_sequence(tree.statements)
            if ENTRY_POINT in self._functions and self._return_value is None:
                self._break = self._continue = False
                self._return_value = self._call(ENTRY_POINT, ())
        elif isinstance(tree, Expr):
            self._return_value = self._eval(tree)
        else:
            self._exec(tree)

    def _snapshot(self) -> dict[str, Any]:
        snapshot: dict[str, Any] = {}
        for name, value in self._frames[0].variables.items():
            if isinstance(value, list):
                snapshot[name] = list(value)
            elif isinstance(value, Pointer):
                snapshot[name] = str(value)
            else:
                snapshot[name] = value
        return snapshot

    def _tick(self) -> None:
        self._steps += 1
        if self._steps > self.settings.max_steps:
            logger.warning("Step ceiling of %d reached", self.settings.max_steps)
            raise StepLimitExceededError(
                f"Execution exceeded {self.settings.max_steps} steps (possible infinite loop)"
            )

    # -- Statements --

    def _exec_sequence(self, statements: Sequence[Stmt]) -> None:
        for stmt in statements:
            if self._interrupted:
                break
            self._exec(stmt)

    def _exec(self, stmt: Stmt) -> None:
        self._tick()

        if isinstance(stmt, Block):
            self._exec_sequence(stmt.statements)
        elif isinstance(stmt, Declaration):
            self._frame.variables[stmt.name] = self._initial_value(stmt)
        elif isinstance(stmt, Assignment):
            self._assign(stmt)
        elif isinstance(stmt, FunctionDef):
            logger.debug("Registering function %s/%d", stmt.name, len(stmt.params))
            self._functions[stmt.name] = stmt
        elif isinstance(stmt, IfStmt):
            if self._truthy(self._eval(stmt.condition)):
                self._exec(stmt.then_branch)
            elif stmt.else_branch is not None:
                self._exec(stmt.else_branch)
        elif isinstance(stmt, WhileStmt):
            while self._truthy(self._eval(stmt.condition)):
                self._exec(stmt.body)
                if self._end_iteration():
                    break
        elif isinstance(stmt, DoWhileStmt):
            while True:
                self._exec(stmt.body)
                if self._end_iteration() or not self._truthy(self._eval(stmt.condition)):
                    break
        elif isinstance(stmt, ForStmt):
            self._exec_for(stmt)
        elif isinstance(stmt, SwitchStmt):
            self._exec_switch(stmt)
        elif isinstance(stmt, ReturnStmt):
            self._return_value = 0 if stmt.value is None else self._eval(stmt.value)
        elif isinstance(stmt, BreakStmt):
            self._break = True
        elif isinstance(stmt, ContinueStmt):
            self._continue = True
        elif isinstance(stmt, Preprocessor):
            pass
        else:
            self._eval(stmt)

    def _end_iteration(self) -> bool:
        """Consume loop control flags after a body run; True ends the loop."""
        self._continue = False
        if self._break:
            self._break = False
            return True
        return self._return_value is not None

    def _exec_for(self, stmt: ForStmt) -> None:
        if stmt.init is not None:
            self._exec(stmt.init)
        while stmt.condition is None or self._truthy(self._eval(stmt.condition)):
            self._exec(stmt.body)
            if self._end_iteration():
                break
            if stmt.increment is not None:
                self._exec(stmt.increment)

    def _exec_switch(self, stmt: SwitchStmt) -> None:
        test = self._eval(stmt.test)
        matched = False
        for case in stmt.cases:
            if not matched and self._eval(case.value) == test:
                matched = True
            if matched:
                # Falls through into later cases until break
                self._exec_sequence(case.body)
                if self._interrupted:
                    break

        if not matched and stmt.default is not None:
            self._exec_sequence(stmt.default)

        # break ends the switch; continue belongs to an enclosing loop
        self._break = False

    def _initial_value(self, decl: Declaration) -> Any:
        if not decl.is_array:
            if isinstance(decl.init, InitializerList):
                raise ExecutionError(f"Cannot initialise scalar '{decl.name}' with a brace list")
            return 0 if decl.init is None else self._eval(decl.init)

        if decl.init is None:
            items: list[Any] = []
        elif isinstance(decl.init, InitializerList):
            items = [self._eval(item) for item in decl.init.items]
        elif isinstance(decl.init, StringLiteral):
            items = [ord(c) for c in self._eval(decl.init)] + [0]
        else:
            raise ExecutionError(f"Array '{decl.name}' must be initialised with a brace list")

        length = len(items) if decl.size is None else int(decl.size.value)
        if length > self.settings.max_array_length:
            raise ExecutionError(
                f"Array '{decl.name}' of size {length} exceeds the limit of "
                f"{self.settings.max_array_length}"
            )
        if len(items) > length:
            raise ExecutionError(f"Too many initializers for '{decl.name}[{length}]'")
        return items + [0] * (length - len(items))

    def _assign(self, stmt: Assignment) -> None:
        value = self._eval(stmt.value)
        binary = stmt.op.binary
        target = stmt.target

        if isinstance(target, Identifier):
            if binary is not None:
                value = self._binary(binary, self._lookup(target.name), value)
            self._frame.variables[target.name] = value
            return

        array = self._array(target.name)
        index = self._index(target, array)
        if binary is not None:
            value = self._binary(binary, array[index], value)
        array[index] = value

    # -- Expressions --

    def _eval(self, expr: Expr) -> Any:
        self._tick()

        if isinstance(expr, NumberLiteral):
            return expr.value
        if isinstance(expr, StringLiteral):
            return decode_literal(expr.value)
        if isinstance(expr, CharLiteral):
            text = decode_literal(expr.value)
            return ord(text[0]) if text else 0
        if isinstance(expr, Identifier):
            return self._lookup(expr.name)
        if isinstance(expr, BinaryExpr):
            return self._eval_binary(expr)
        if isinstance(expr, UnaryExpr):
            operand = self._eval(expr.operand)
            if expr.op == UnaryOp.NEG:
                return -operand
            if expr.op == UnaryOp.NOT:
                return 0 if self._truthy(operand) else 1
            return operand
        if isinstance(expr, UpdateExpr):
            old = self._lookup(expr.name)
            new = old + 1 if expr.op == UpdateOp.INC else old - 1
            self._frame.variables[expr.name] = new
            return new if expr.prefix else old
        if isinstance(expr, ArrayAccess):
            array = self._array(expr.name)
            return array[self._index(expr, array)]
        if isinstance(expr, FunctionCall):
            return self._call(expr.name, expr.args)
        if isinstance(expr, AddressOf):
            return self._address_of(expr.operand)
        if isinstance(expr, Dereference):
            target = self._eval(expr.operand)
            if isinstance(target, Pointer):
                return target.read()
            if isinstance(target, list) and target:
                return target[0]
            raise ExecutionError(f"Cannot dereference non-pointer value {target!r}")
        if isinstance(expr, InitializerList):
            raise ExecutionError("Brace lists are only valid in array declarations")

        raise ExecutionError(f"Cannot evaluate {type(expr).__name__}")

    def _eval_binary(self, expr: BinaryExpr) -> Any:
        if expr.op == BinaryOp.AND:
            return int(self._truthy(self._eval(expr.left)) and self._truthy(self._eval(expr.right)))
        if expr.op == BinaryOp.OR:
            return int(self._truthy(self._eval(expr.left)) or self._truthy(self._eval(expr.right)))
        return self._binary(expr.op, self._eval(expr.left), self._eval(expr.right))

    def _binary(self, op: BinaryOp, left: Any, right: Any) -> Any:
        if op in _ARITHMETIC and not (_is_number(left) and _is_number(right)):
            raise ExecutionError(
                f"Unsupported operands for {op.value}: {_describe(left)} and {_describe(right)}"
            )
        max_bits = self.settings.max_int_bits
        try:
            if op == BinaryOp.ADD:
                return bounded_int(left + right, max_bits)
            if op == BinaryOp.SUB:
                return bounded_int(left - right, max_bits)
            if op == BinaryOp.MUL:
                return bounded_int(left * right, max_bits)
            if op == BinaryOp.DIV:
                if right == 0:
                    raise DivisionByZeroError("Division by zero")
                if isinstance(left, int) and isinstance(right, int):
                    return c_trunc_div(left, right)
                return math.trunc(left / right)
            if op == BinaryOp.MOD:
                if right == 0:
                    raise DivisionByZeroError("Modulo by zero")
                return c_remainder(left, right)
            if op == BinaryOp.POW:
                return real_power(left, right, max_bits)
            if op == BinaryOp.EQ:
                return int(left == right)
            if op == BinaryOp.NE:
                return int(left != right)
            if op == BinaryOp.LT:
                return int(left < right)
            if op == BinaryOp.GT:
                return int(left > right)
            if op == BinaryOp.LE:
                return int(left <= right)
            if op == BinaryOp.GE:
                return int(left >= right)
        except TypeError as e:
            raise ExecutionError(
                f"Unsupported operands for {op.value}: {_describe(left)} and {_describe(right)}"
            ) from e
        raise ExecutionError(f"Unknown operator: {op.value}")

    def _lookup(self, name: str) -> Any:
        # Unseen names read as 0
        return self._frame.variables.get(name, 0)

    def _array(self, name: str) -> list[Any]:
        value = self._lookup(name)
        if not isinstance(value, list):
            raise ExecutionError(f"'{name}' is not an array")
        return value

    def _index(self, access: ArrayAccess, array: list[Any]) -> int:
        raw = self._eval(access.index)
        if isinstance(raw, float) and raw.is_integer():
            raw = int(raw)
        if not isinstance(raw, int):
            raise ExecutionError(f"Array index for '{access.name}' must be an integer")
        if not 0 <= raw < len(array):
            raise ExecutionError(
                f"Index {raw} out of bounds for '{access.name}' of size {len(array)}"
            )
        return raw

    def _address_of(self, operand: Expr) -> Pointer:
        if isinstance(operand, Identifier):
            return Pointer(frame=self._frame, name=operand.name)
        if isinstance(operand, ArrayAccess):
            array = self._array(operand.name)
            return Pointer(frame=self._frame, name=operand.name, index=self._index(operand, array))
        raise ExecutionError(f"Cannot take the address of {operand}")

    @staticmethod
    def _truthy(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, (int, float)):
            return value != 0
        return True

    # -- Calls --

    def _call(self, name: str, args: Sequence[Expr]) -> Any:
        if name == self.settings.output_function:
            values = [self._eval(arg) for arg in args]
            line = format_output(args, values)
            self._output_chars += len(line)
            if self._output_chars > self.settings.max_output_chars:
                raise ExecutionError(
                    f"Output exceeded {self.settings.max_output_chars} characters"
                )
            self._output.append(line)
            return 0

        func = self._functions.get(name)
        if func is None:
            raise UndefinedFunctionError(f"Function {name} not defined")

        values = [self._eval(arg) for arg in args]

        if len(self._frames) > self.settings.max_call_depth:
            logger.warning("Call depth ceiling of %d reached", self.settings.max_call_depth)
            raise CallDepthExceededError(
                f"Maximum call depth of {self.settings.max_call_depth} exceeded calling {name}()"
            )

        frame = Frame(function=name)
        for i, param in enumerate(func.params):
            frame.variables[param.name] = values[i] if i < len(values) else 0

        saved_return = self._return_value
        self._return_value = None
        self._frames.append(frame)
        logger.debug("Calling %s at depth %d", name, len(self._frames) - 1)
        try:
            self._exec(func.body)
            result = 0 if self._return_value is None else self._return_value
        finally:
            self._frames.pop()
            logger.debug("Leaving %s", name)
            self._return_value = saved_return
            self._break = False
            self._continue = False
        return result


# ---------------------------------------------------------------------------
# Literal decoding and the printf stub
# ---------------------------------------------------------------------------

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

_FORMAT_RE = re.compile(
    r"%(?P<flags>[-+ 0#]*)(?P<width>\d*)(?:\.(?P<precision>\d+))?"
    r"(?:hh|h|ll|l|L|z|j|t)?(?P<conv>[diuoxXeEfFgGcsp%])"
)


def decode_literal(text: str) -> str:
    """Strip the quotes of a string/char literal and decode escapes.

    Unterminated literals (no closing quote) decode to the end of the text.
    """
    quote = text[:1]
    i = 1
    while i < len(text) and text[i] != quote:
        i += 2 if text[i] == "\\" else 1
    body = text[1:i]
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def format_output(args: Sequence[Expr], values: Sequence[Any]) -> str:
    """Render one output line for the printf stub.

    A leading string literal is a format string; otherwise the arguments are
    joined with spaces. One trailing newline is dropped.
    """
    if args and isinstance(args[0], StringLiteral):
        line = c_format(values[0], values[1:])
    else:
        line = " ".join(display(v) for v in values)
    return line[:-1] if line.endswith("\n") else line


def c_format(fmt: str, values: Sequence[Any]) -> str:
    """Apply printf-style directives to ``values``; missing values print 0."""
    remaining = iter(values)

    def substitute(m: re.Match[str]) -> str:
        conv = m.group("conv")
        if conv == "%":
            return "%"
        value = next(remaining, 0)
        for part in ("width", "precision"):
            digits = (m.group(part) or "").lstrip("0") or "0"
            if len(digits) > len(str(MAX_FORMAT_WIDTH)) or int(digits) > MAX_FORMAT_WIDTH:
                raise ExecutionError(
                    f"printf: {part} in '{m.group(0)}' exceeds {MAX_FORMAT_WIDTH}"
                )
        directive = "%" + m.group("flags") + m.group("width")
        if m.group("precision") is not None:
            directive += "." + m.group("precision")

        if conv == "s":
            return (directive + "s") % (value if isinstance(value, str) else display(value))
        if conv == "p":
            return (directive + "s") % str(value)
        if not isinstance(value, (int, float)):
            raise ExecutionError(f"printf: %{conv} expects a number, got {_describe(value)}")
        if conv in "diuoxXc":
            value = math.trunc(value)
            if conv == "u":
                conv = "d"
        return (directive + conv) % value

    return _FORMAT_RE.sub(substitute, fmt)


def display(value: Any) -> str:
    """Stringify a runtime value for output."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return "{" + ", ".join(display(v) for v in value) + "}"
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float))


def _describe(value: Any) -> str:
    if isinstance(value, Pointer):
        return "pointer"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def execute_program(
    tree: Node, settings: InterpreterSettings | None = None
) -> ExecutionResult:
    """Execute a parsed program.

    Args:
        tree: Program (or any statement/expression) tree from the parser
        settings: Resource limits; read from ``CSYNTAX_*`` env vars when omitted

    Returns:
        ExecutionResult. Never raises: faults land in ``error``.
    """
    if settings is None:
        try:
            settings = InterpreterSettings.from_env()
        except ValueError as e:
            return ExecutionResult(error=f"Invalid interpreter settings: {e}")
    return Interpreter(settings).execute(tree)
