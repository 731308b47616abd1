"""
Indented text dump of a syntax tree, two spaces per level.

For display only; nothing parses this output back.
"""

from __future__ import annotations

from csyntax.core.ir.nodes import (
    AddressOf,
    ArrayAccess,
    Assignment,
    AssignOp,
    BinaryExpr,
    Block,
    BreakStmt,
    CharLiteral,
    ContinueStmt,
    Declaration,
    Dereference,
    DoWhileStmt,
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
    StringLiteral,
    SwitchStmt,
    UnaryExpr,
    UpdateExpr,
    WhileStmt,
)


# Subtrees below this depth are elided so rendering stays clear of
# Python's recursion limit.
MAX_RENDER_DEPTH = 200


def render_tree(node: Node) -> str:
    """Render ``node`` and its children as an indented outline.

    Levels deeper than ``MAX_RENDER_DEPTH`` are shown as a single ``...`` line.
    """
    return "\n".join(_render(node, 0))


def _render(node: Node, depth: int) -> list[str]:
    pad = "  " * depth

    if depth > MAX_RENDER_DEPTH:
        return [f"{pad}..."]

    if isinstance(node, NumberLiteral):
        return [f"{pad}Number: {node.value}"]
    if isinstance(node, StringLiteral):
        return [f"{pad}String: {node.value}"]
    if isinstance(node, CharLiteral):
        return [f"{pad}Char: {node.value}"]
    if isinstance(node, Identifier):
        return [f"{pad}Identifier: {node.name}"]

    if isinstance(node, BinaryExpr):
        return [
            f"{pad}Operation: {node.op.value}",
            *_render(node.left, depth + 1),
            *_render(node.right, depth + 1),
        ]
    if isinstance(node, UnaryExpr):
        return [f"{pad}Operation: {node.op.value}", *_render(node.operand, depth + 1)]
    if isinstance(node, UpdateExpr):
        label = "Prefix" if node.prefix else "Postfix"
        return [f"{pad}{label}: {node}"]
    if isinstance(node, AddressOf):
        return [f"{pad}Address Of (&)", *_render(node.operand, depth + 1)]
    if isinstance(node, Dereference):
        return [f"{pad}Dereference (*)", *_render(node.operand, depth + 1)]
    if isinstance(node, ArrayAccess):
        return [f"{pad}Array Access: {node.name}[", *_render(node.index, depth + 1), f"{pad}]"]
    if isinstance(node, FunctionCall):
        if not node.args:
            return [f"{pad}Function Call: {node.name}()"]
        lines = [f"{pad}Function Call: {node.name}("]
        for arg in node.args:
            lines.extend(_render(arg, depth + 1))
        lines.append(f"{pad})")
        return lines
    if isinstance(node, InitializerList):
        lines = [f"{pad}Initializer List"]
        for item in node.items:
            lines.extend(_render(item, depth + 1))
        return lines

    if isinstance(node, Program):
        return [f"{pad}Program", *_render_all(node.statements, depth + 1)]
    if isinstance(node, Block):
        return [f"{pad}Block", *_render_all(node.statements, depth + 1)]
    if isinstance(node, Preprocessor):
        return [f"{pad}Preprocessor: {node.directive}"]

    if isinstance(node, Declaration):
        head = f"{pad}Declaration: {node.type_name}{'*' * node.pointer_depth} {node.name}"
        if node.is_array:
            head += f"[{node.size.value if node.size is not None else ''}]"
        lines = [head]
        if node.init is not None:
            lines.append(f"{pad}  =")
            lines.extend(_render(node.init, depth + 2))
        return lines
    if isinstance(node, Assignment):
        head = f"{pad}Assignment"
        if node.op != AssignOp.ASSIGN:
            head += f" ({node.op.value})"
        lines = [f"{head}: {node.name}"]
        if isinstance(node.target, ArrayAccess):
            lines.append(f"{pad}  Target:")
            lines.extend(_render(node.target, depth + 2))
        lines.append(f"{pad}  Value:")
        lines.extend(_render(node.value, depth + 2))
        return lines
    if isinstance(node, FunctionDef):
        params = ", ".join(str(p) for p in node.params)
        return [
            f"{pad}Function: {node.return_type} {node.name}({params})",
            *_render(node.body, depth + 1),
        ]

    if isinstance(node, IfStmt):
        lines = [
            f"{pad}If Statement",
            f"{pad}  Condition:",
            *_render(node.condition, depth + 2),
            f"{pad}  Then:",
            *_render(node.then_branch, depth + 2),
        ]
        if node.else_branch is not None:
            lines.append(f"{pad}  Else:")
            lines.extend(_render(node.else_branch, depth + 2))
        return lines
    if isinstance(node, WhileStmt):
        return [
            f"{pad}While Loop",
            f"{pad}  Condition:",
            *_render(node.condition, depth + 2),
            f"{pad}  Body:",
            *_render(node.body, depth + 2),
        ]
    if isinstance(node, DoWhileStmt):
        return [
            f"{pad}Do-While Loop",
            f"{pad}  Body:",
            *_render(node.body, depth + 2),
            f"{pad}  Condition:",
            *_render(node.condition, depth + 2),
        ]
    if isinstance(node, ForStmt):
        lines = [f"{pad}For Loop"]
        for label, part in (
            ("Init", node.init),
            ("Condition", node.condition),
            ("Increment", node.increment),
        ):
            if part is not None:
                lines.append(f"{pad}  {label}:")
                lines.extend(_render(part, depth + 2))
        lines.append(f"{pad}  Body:")
        lines.extend(_render(node.body, depth + 2))
        return lines
    if isinstance(node, SwitchStmt):
        lines = [f"{pad}Switch Statement", f"{pad}  Expression:", *_render(node.test, depth + 2)]
        for i, case in enumerate(node.cases, start=1):
            lines.append(f"{pad}  Case {i}:")
            lines.extend(_render(case.value, depth + 2))
            lines.extend(_render_all(case.body, depth + 3))
        if node.default is not None:
            lines.append(f"{pad}  Default:")
            lines.extend(_render_all(node.default, depth + 3))
        return lines

    if isinstance(node, ReturnStmt):
        if node.value is None:
            return [f"{pad}Return"]
        return [f"{pad}Return", *_render(node.value, depth + 1)]
    if isinstance(node, BreakStmt):
        return [f"{pad}Break"]
    if isinstance(node, ContinueStmt):
        return [f"{pad}Continue"]

    return [f"{pad}Unknown: {type(node).__name__}"]


def _render_all(nodes: tuple[Node, ...], depth: int) -> list[str]:
    lines: list[str] = []
    for node in nodes:
        lines.extend(_render(node, depth))
    return lines
