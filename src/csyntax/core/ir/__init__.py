"""
csyntax syntax tree types.

All node types are re-exported from this package.
"""

from .nodes import (
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
    Node,
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

__all__ = [
    # Operators
    "AssignOp",
    "BinaryOp",
    "UnaryOp",
    "UpdateOp",
    # Expressions
    "AddressOf",
    "ArrayAccess",
    "BinaryExpr",
    "CharLiteral",
    "Dereference",
    "FunctionCall",
    "Identifier",
    "InitializerList",
    "NumberLiteral",
    "StringLiteral",
    "UnaryExpr",
    "UpdateExpr",
    # Statements
    "Assignment",
    "Block",
    "BreakStmt",
    "ContinueStmt",
    "Declaration",
    "DoWhileStmt",
    "ForStmt",
    "FunctionDef",
    "IfStmt",
    "Parameter",
    "Preprocessor",
    "Program",
    "ReturnStmt",
    "SwitchCase",
    "SwitchStmt",
    "WhileStmt",
    # Unions
    "Expr",
    "Node",
    "Stmt",
]
