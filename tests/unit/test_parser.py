"""Tests for the csyntax parser.

Covers:
- Mode selection between bare expressions and programs
- Expression precedence and associativity
- Declarations, functions and every statement form
- Diagnostics: message, offset, suggestion and first-error abort
"""

from __future__ import annotations

import pytest

from csyntax.core.ir import (
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
    ForStmt,
    FunctionCall,
    FunctionDef,
    Identifier,
    IfStmt,
    InitializerList,
    NumberLiteral,
    Preprocessor,
    Program,
    ReturnStmt,
    StringLiteral,
    SwitchStmt,
    UnaryExpr,
    UnaryOp,
    UpdateExpr,
    UpdateOp,
    WhileStmt,
)
from csyntax.core.lang.parser import ParseError, ParseResult, parse, parse_tokens
from csyntax.core.lang.tokenizer import Token, TokenKind, tokenize


def parse_ok(source: str):
    result = parse(source)
    assert result.success, result.errors
    assert result.errors == ()
    return result.tree


def parse_fail(source: str) -> ParseError:
    result = parse(source)
    assert not result.success
    assert result.tree is None
    assert result.errors
    return result.errors[0]


def only_statement(source: str):
    tree = parse_ok(source)
    assert isinstance(tree, Program)
    assert len(tree.statements) == 1
    return tree.statements[0]


# ============================================================================
# Expressions
# ============================================================================


class TestExpressionMode:
    """Inputs without program markers parse as one expression."""

    def test_number(self) -> None:
        assert parse_ok("42") == NumberLiteral(value=42)

    def test_decimal_number_is_float(self) -> None:
        tree = parse_ok("2.5")
        assert isinstance(tree, NumberLiteral)
        assert tree.value == 2.5
        assert isinstance(tree.value, float)

    def test_precedence(self) -> None:
        assert parse_ok("2 + 3 * 4") == BinaryExpr(
            op=BinaryOp.ADD,
            left=NumberLiteral(value=2),
            right=BinaryExpr(
                op=BinaryOp.MUL, left=NumberLiteral(value=3), right=NumberLiteral(value=4)
            ),
        )

    def test_left_associative_subtraction(self) -> None:
        tree = parse_ok("10 - 4 - 3")
        assert isinstance(tree, BinaryExpr)
        assert isinstance(tree.left, BinaryExpr)
        assert tree.right == NumberLiteral(value=3)

    def test_power_right_associative(self) -> None:
        tree = parse_ok("2 ^ 3 ^ 2")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.POW
        assert tree.left == NumberLiteral(value=2)
        assert isinstance(tree.right, BinaryExpr)
        assert tree.right.op == BinaryOp.POW

    def test_power_binds_tighter_than_multiply(self) -> None:
        tree = parse_ok("2 * 3 ^ 2")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.MUL
        assert isinstance(tree.right, BinaryExpr)
        assert tree.right.op == BinaryOp.POW

    def test_unary_minus_binds_tighter_than_power(self) -> None:
        tree = parse_ok("-2 ^ 2")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.POW
        assert tree.left == UnaryExpr(op=UnaryOp.NEG, operand=NumberLiteral(value=2))

    def test_unary_plus(self) -> None:
        assert parse_ok("+4") == UnaryExpr(op=UnaryOp.POS, operand=NumberLiteral(value=4))

    def test_parentheses_group(self) -> None:
        tree = parse_ok("(2 + 3) * 4")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.MUL
        assert isinstance(tree.left, BinaryExpr)

    def test_logical_precedence(self) -> None:
        tree = parse_ok("a || b && c")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.OR
        assert isinstance(tree.right, BinaryExpr)
        assert tree.right.op == BinaryOp.AND

    def test_relational_below_equality(self) -> None:
        tree = parse_ok("1 < 2 == 1")
        assert isinstance(tree, BinaryExpr)
        assert tree.op == BinaryOp.EQ
        assert isinstance(tree.left, BinaryExpr)
        assert tree.left.op == BinaryOp.LT

    def test_not(self) -> None:
        assert parse_ok("!x") == UnaryExpr(op=UnaryOp.NOT, operand=Identifier(name="x"))

    def test_dereference_and_address(self) -> None:
        assert parse_ok("*p") == Dereference(operand=Identifier(name="p"))
        assert parse_ok("&x") == AddressOf(operand=Identifier(name="x"))

    def test_call_with_arguments(self) -> None:
        tree = parse_ok("max(1, 2 + 3)")
        assert isinstance(tree, FunctionCall)
        assert tree.name == "max"
        assert len(tree.args) == 2

    def test_call_without_arguments(self) -> None:
        assert parse_ok("tick()") == FunctionCall(name="tick", args=())

    def test_array_access(self) -> None:
        assert parse_ok("a[i + 1]") == ArrayAccess(
            name="a",
            index=BinaryExpr(
                op=BinaryOp.ADD, left=Identifier(name="i"), right=NumberLiteral(value=1)
            ),
        )

    def test_literals_keep_quotes(self) -> None:
        assert parse_ok('"hi"') == StringLiteral(value='"hi"')
        assert parse_ok("'c'") == CharLiteral(value="'c'")

    def test_parse_is_deterministic(self) -> None:
        source = "int main() { int x = 1; while (x < 10) x *= 2; return x; }"
        assert parse(source) == parse(source)


# ============================================================================
# Declarations and functions
# ============================================================================


class TestDeclarations:
    """Declarations and function definitions build the right nodes."""

    def test_simple_declaration(self) -> None:
        assert only_statement("int x = 5;") == Declaration(
            type_name="int", name="x", init=NumberLiteral(value=5)
        )

    def test_declaration_without_initializer(self) -> None:
        decl = only_statement("float ratio;")
        assert isinstance(decl, Declaration)
        assert decl.type_name == "float"
        assert decl.init is None

    def test_multi_word_type(self) -> None:
        decl = only_statement("unsigned long total = 0;")
        assert isinstance(decl, Declaration)
        assert decl.type_name == "unsigned long"

    def test_pointer_declaration(self) -> None:
        decl = only_statement("int *p = &x;")
        assert isinstance(decl, Declaration)
        assert decl.pointer_depth == 1
        assert decl.is_pointer
        assert decl.init == AddressOf(operand=Identifier(name="x"))

    def test_pointer_to_pointer(self) -> None:
        decl = only_statement("char **argv;")
        assert isinstance(decl, Declaration)
        assert decl.pointer_depth == 2

    def test_array_with_initializer_list(self) -> None:
        decl = only_statement("int a[3] = {1, 2, 3};")
        assert isinstance(decl, Declaration)
        assert decl.is_array
        assert decl.size == NumberLiteral(value=3)
        assert isinstance(decl.init, InitializerList)
        assert len(decl.init.items) == 3

    def test_unsized_array(self) -> None:
        decl = only_statement("char name[] = \"bob\";")
        assert isinstance(decl, Declaration)
        assert decl.is_array
        assert decl.size is None
        assert decl.init == StringLiteral(value='"bob"')

    def test_function_definition(self) -> None:
        func = only_statement("int add(int a, int b) { return a + b; }")
        assert isinstance(func, FunctionDef)
        assert func.return_type == "int"
        assert [p.name for p in func.params] == ["a", "b"]
        assert func.body.statements == (
            ReturnStmt(
                value=BinaryExpr(
                    op=BinaryOp.ADD, left=Identifier(name="a"), right=Identifier(name="b")
                )
            ),
        )

    def test_void_parameter_list(self) -> None:
        func = only_statement("int main(void) { return 0; }")
        assert isinstance(func, FunctionDef)
        assert func.params == ()

    def test_pointer_parameter(self) -> None:
        func = only_statement("void swap(int *a, int *b) { }")
        assert isinstance(func, FunctionDef)
        assert all(p.is_pointer for p in func.params)

    def test_preprocessor_kept(self) -> None:
        tree = parse_ok("#include <stdio.h>\nint main() { return 0; }")
        assert isinstance(tree, Program)
        assert tree.statements[0] == Preprocessor(directive="#include <stdio.h>")
        assert isinstance(tree.statements[1], FunctionDef)


# ============================================================================
# Statements
# ============================================================================


class TestStatements:
    """Every statement form parses into its node type."""

    def test_assignment(self) -> None:
        assert only_statement("x = 3;") == Assignment(
            target=Identifier(name="x"), op=AssignOp.ASSIGN, value=NumberLiteral(value=3)
        )

    def test_compound_assignment(self) -> None:
        stmt = only_statement("x += 2;")
        assert isinstance(stmt, Assignment)
        assert stmt.op == AssignOp.ADD
        assert stmt.op.binary == BinaryOp.ADD
        assert stmt.name == "x"

    def test_array_element_assignment(self) -> None:
        stmt = only_statement("a[0] = 5;")
        assert isinstance(stmt, Assignment)
        assert stmt.target == ArrayAccess(name="a", index=NumberLiteral(value=0))

    def test_expression_statements(self) -> None:
        assert only_statement("f(1, 2);") == FunctionCall(
            name="f", args=(NumberLiteral(value=1), NumberLiteral(value=2))
        )
        assert only_statement("i++;") == UpdateExpr(op=UpdateOp.INC, name="i", prefix=False)
        assert only_statement("--i;") == UpdateExpr(op=UpdateOp.DEC, name="i", prefix=True)
        assert only_statement("x;") == Identifier(name="x")

    def test_subscript_without_assignment_is_expression(self) -> None:
        assert only_statement("a[1];") == ArrayAccess(name="a", index=NumberLiteral(value=1))

    def test_empty_statement(self) -> None:
        assert only_statement(";") == Block()

    def test_if_else(self) -> None:
        stmt = only_statement("if (x > 1) y = 1; else y = 2;")
        assert isinstance(stmt, IfStmt)
        assert isinstance(stmt.condition, BinaryExpr)
        assert isinstance(stmt.then_branch, Assignment)
        assert isinstance(stmt.else_branch, Assignment)

    def test_if_without_else(self) -> None:
        stmt = only_statement("if (x) { y = 1; }")
        assert isinstance(stmt, IfStmt)
        assert isinstance(stmt.then_branch, Block)
        assert stmt.else_branch is None

    def test_while(self) -> None:
        stmt = only_statement("while (i < 3) i++;")
        assert isinstance(stmt, WhileStmt)
        assert stmt.body == UpdateExpr(op=UpdateOp.INC, name="i", prefix=False)

    def test_do_while(self) -> None:
        stmt = only_statement("do { x++; } while (x < 3);")
        assert isinstance(stmt, DoWhileStmt)
        assert isinstance(stmt.body, Block)

    def test_for_with_all_clauses(self) -> None:
        stmt = only_statement("for (int i = 0; i < 10; i++) { }")
        assert isinstance(stmt, ForStmt)
        assert isinstance(stmt.init, Declaration)
        assert isinstance(stmt.condition, BinaryExpr)
        assert stmt.condition.op == BinaryOp.LT
        assert stmt.increment == UpdateExpr(op=UpdateOp.INC, name="i", prefix=False)

    def test_for_with_assignment_clauses(self) -> None:
        stmt = only_statement("for (i = 0; i < 10; i += 2) x++;")
        assert isinstance(stmt, ForStmt)
        assert isinstance(stmt.init, Assignment)
        assert isinstance(stmt.increment, Assignment)

    def test_for_with_omitted_clauses(self) -> None:
        stmt = only_statement("for (;;) { break; }")
        assert isinstance(stmt, ForStmt)
        assert stmt.init is None
        assert stmt.condition is None
        assert stmt.increment is None
        assert stmt.body == Block(statements=(BreakStmt(),))

    def test_switch(self) -> None:
        stmt = only_statement(
            "switch (x) { case 1: y = 1; break; case 2: y = 2; default: y = 3; }"
        )
        assert isinstance(stmt, SwitchStmt)
        assert stmt.test == Identifier(name="x")
        assert len(stmt.cases) == 2
        assert stmt.cases[0].value == NumberLiteral(value=1)
        assert isinstance(stmt.cases[0].body[0], Assignment)
        assert stmt.cases[0].body[1] == BreakStmt()
        assert stmt.default is not None
        assert len(stmt.default) == 1

    def test_switch_accepts_semicolon_labels(self) -> None:
        stmt = only_statement("switch (x) { case 1; y = 1; default; y = 2; }")
        assert isinstance(stmt, SwitchStmt)
        assert len(stmt.cases) == 1

    def test_return_and_loop_control(self) -> None:
        func = only_statement("void f() { continue; break; return; }")
        assert isinstance(func, FunctionDef)
        assert func.body.statements == (ContinueStmt(), BreakStmt(), ReturnStmt())


# ============================================================================
# Diagnostics
# ============================================================================


class TestParseErrors:
    """Invalid input yields errors, never exceptions."""

    @pytest.mark.parametrize("source", ["", "   ", "\n\t"])
    def test_empty_input(self, source: str) -> None:
        error = parse_fail(source)
        assert error.message.lower() == "empty expression"
        assert error.pos == 0
        assert error.suggestion

    def test_missing_closing_paren_points_at_open(self) -> None:
        error = parse_fail("(2 + 3")
        assert error.message == "Missing closing parenthesis"
        assert error.pos == 0

    def test_nested_missing_paren(self) -> None:
        assert parse_fail("1 + (2 + 3").pos == 4

    def test_unexpected_closing_paren(self) -> None:
        error = parse_fail("2 + )")
        assert error.message == "Unexpected closing parenthesis"
        assert error.pos == 4

    def test_invalid_character(self) -> None:
        error = parse_fail("2 @ 3")
        assert error.message == "Invalid character '@'"
        assert error.pos == 2

    def test_trailing_token(self) -> None:
        error = parse_fail("2 3")
        assert error.message == "Unexpected token '3'"
        assert error.pos == 2

    def test_dangling_operator(self) -> None:
        assert parse_fail("2 +").message == "Unexpected end of input"

    def test_missing_semicolon(self) -> None:
        error = parse_fail("int x = 5")
        assert error.message == "Missing semicolon"
        assert error.pos == 9
        assert ";" in error.suggestion

    def test_missing_identifier(self) -> None:
        assert parse_fail("int = 5;").message == "Expected identifier after type"

    def test_missing_function_body(self) -> None:
        assert parse_fail("int f(int a);").message == "Missing function body"

    def test_missing_closing_brace(self) -> None:
        assert parse_fail("int main() { return 0;").message == "Missing closing brace"

    def test_empty_switch_expression(self) -> None:
        assert parse_fail("switch () { }").message == "Empty switch expression"

    def test_duplicate_default(self) -> None:
        error = parse_fail("switch (x) { default: break; default: break; }")
        assert error.message == "Duplicate default label"

    def test_do_without_while(self) -> None:
        assert parse_fail("do { x++; } x = 1;").message == "Expected 'while' after do body"

    def test_first_error_aborts(self) -> None:
        result = parse("int x = ; int y = ;")
        assert not result.success
        assert len(result.errors) == 1

    def test_deeply_nested_parens(self) -> None:
        error = parse_fail("(" * 400 + "1" + ")" * 400)
        assert error.message == "Input nested too deeply"
        assert error.suggestion

    def test_deeply_nested_blocks(self) -> None:
        error = parse_fail("{" * 2000 + "}" * 2000)
        assert error.message == "Input nested too deeply"

    def test_moderate_nesting_still_parses(self) -> None:
        result = parse("(" * 20 + "1" + ")" * 20)
        assert result.success
        assert result.tree == NumberLiteral(value=1)

    def test_number_literal_too_long(self) -> None:
        error = parse_fail("9" * 5000)
        assert error.message == "Number literal too long"
        assert error.pos == 0

    def test_errors_never_raise(self) -> None:
        for source in ["((", "}", "int", "for (", "switch (x) { case", "a[", "f(1,"]:
            result = parse(source)
            assert isinstance(result, ParseResult)
            assert not result.success

    def test_format_against_source(self) -> None:
        source = "int x = 5\nint y;"
        error = parse_fail(source)
        text = error.format(source)
        assert text.startswith("2:1")
        assert "Missing semicolon" in text
        assert "hint: " in text
        assert "^^^" in text


class TestParseTokens:
    """Parsing a token sequence directly, with or without a trailing EOF."""

    def test_appends_missing_eof(self) -> None:
        result = parse_tokens([Token(TokenKind.NUMBER, "7", 0)])
        assert result.success
        assert result.tree == NumberLiteral(value=7)

    def test_matches_parse(self) -> None:
        source = "int main() { return 1; }"
        assert parse_tokens(tokenize(source)) == parse(source)

    def test_result_helpers(self) -> None:
        failed = parse("(")
        assert failed.first_error is failed.errors[0]
        assert parse("1").first_error is None
