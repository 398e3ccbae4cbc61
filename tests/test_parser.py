"""
Tests for the gojo parser
"""

import pytest

from gojo.ast_nodes import (
    ArrayLiteral, Assignment, BinaryExpr, BlockStmt, BreakStmt, CallExpr, ContinueStmt,
    ExprStmt, Identifier, IfStmt, Literal, LogicalExpr, MemberExpr, SwitchStmt,
    UnaryExpr, VarDecl, WhileStmt, ast_to_dict,
)
from gojo.errors import ParseError
from gojo.lexer import tokenize
from gojo.parser import Parser, parse
from gojo.values import NULL, UNDEFINED


def parse_source(source):
    return parse(tokenize(source))


def parse_expr(source):
    stmt = parse_source(source + ";").statements[0]
    assert isinstance(stmt, ExprStmt)
    return stmt.expression


class TestExpressions:
    def test_multiplication_binds_tighter_than_addition(self):
        expr = parse_expr("1 + 2 * 3")
        assert expr == BinaryExpr(Literal(1.0), '+', BinaryExpr(Literal(2.0), '*', Literal(3.0)))

    def test_left_associative(self):
        expr = parse_expr("8 - 4 - 2")
        assert expr == BinaryExpr(BinaryExpr(Literal(8.0), '-', Literal(4.0)), '-', Literal(2.0))

    def test_parentheses_group(self):
        expr = parse_expr("(1 + 2) * 3")
        assert expr == BinaryExpr(BinaryExpr(Literal(1.0), '+', Literal(2.0)), '*', Literal(3.0))

    def test_precedence_chain(self):
        # || < && < equality < relational < additive
        expr = parse_expr("a || b && c == d < e + f")
        assert isinstance(expr, LogicalExpr) and expr.operator == '||'
        and_expr = expr.right
        assert isinstance(and_expr, LogicalExpr) and and_expr.operator == '&&'
        eq_expr = and_expr.right
        assert isinstance(eq_expr, BinaryExpr) and eq_expr.operator == '=='
        rel_expr = eq_expr.right
        assert isinstance(rel_expr, BinaryExpr) and rel_expr.operator == '<'
        assert rel_expr.right == BinaryExpr(Identifier('e'), '+', Identifier('f'))

    def test_unary(self):
        assert parse_expr("-x") == UnaryExpr('-', Identifier('x'))
        assert parse_expr("!!ok") == UnaryExpr('!', UnaryExpr('!', Identifier('ok')))
        assert parse_expr("typeof x") == UnaryExpr('typeof', Identifier('x'))
        assert parse_expr("-2 * 3") == BinaryExpr(UnaryExpr('-', Literal(2.0)), '*', Literal(3.0))

    def test_literals(self):
        assert parse_expr("true") == Literal(True)
        assert parse_expr("'s'") == Literal('s')
        assert parse_expr("null").value is NULL
        assert parse_expr("undefined").value is UNDEFINED

    def test_array_literal_and_index(self):
        expr = parse_expr("[1, 2, 3,][2]")
        assert expr == MemberExpr(ArrayLiteral([Literal(1.0), Literal(2.0), Literal(3.0)]), Literal(2.0), True)

    def test_dotted_call(self):
        expr = parse_expr("Math.pow(3, 2)")
        assert expr == CallExpr(MemberExpr(Identifier('Math'), Identifier('pow'), False),
                                [Literal(3.0), Literal(2.0)])

    def test_call_without_arguments(self):
        assert parse_expr("f()") == CallExpr(Identifier('f'), [])

    def test_positions_are_attached(self):
        expr = parse_expr("1 +\n  x")
        assert (expr.line, expr.column) == (1, 3)
        assert (expr.right.line, expr.right.column) == (2, 3)


class TestStatements:
    def test_var_let_const(self):
        program = parse_source("var a = 1; let b; const c = 'z';")
        assert program.statements == [
            VarDecl('var', 'a', Literal(1.0)),
            VarDecl('let', 'b', None),
            VarDecl('const', 'c', Literal('z')),
        ]

    def test_const_needs_initializer(self):
        with pytest.raises(ParseError):
            parse_source("const c;")

    def test_assignment(self):
        program = parse_source("x = x + 1; a[0] = 2;")
        assert program.statements[0] == Assignment(Identifier('x'), BinaryExpr(Identifier('x'), '+', Literal(1.0)))
        assert program.statements[1] == Assignment(MemberExpr(Identifier('a'), Literal(0.0), True), Literal(2.0))

    def test_invalid_assignment_target(self):
        with pytest.raises(ParseError) as exc:
            parse_source("1 + 2 = 3;")
        assert exc.value.found == "'='"
        with pytest.raises(ParseError):
            parse_source("Math.PI = 3;")

    def test_else_if_is_nested(self):
        program = parse_source("""
            if (x > y) { a; } else if (x < y) { b; } else { c; }
        """)
        stmt = program.statements[0]
        assert isinstance(stmt, IfStmt)
        assert isinstance(stmt.then_branch, BlockStmt)
        nested = stmt.else_branch
        assert isinstance(nested, IfStmt)
        assert nested.condition == BinaryExpr(Identifier('x'), '<', Identifier('y'))
        assert nested.else_branch == BlockStmt([ExprStmt(Identifier('c'))])

    def test_while(self):
        stmt = parse_source("while (i < 5) { i = i + 1; }").statements[0]
        assert isinstance(stmt, WhileStmt)
        assert stmt.body == BlockStmt([Assignment(Identifier('i'), BinaryExpr(Identifier('i'), '+', Literal(1.0)))])

    def test_switch_clauses_in_order(self):
        stmt = parse_source("""
            switch (x) {
                case 1: a; break;
                case 2:
                default: c;
            }
        """).statements[0]
        assert isinstance(stmt, SwitchStmt)
        assert [case.test for case in stmt.cases] == [Literal(1.0), Literal(2.0), None]
        assert stmt.cases[0].body == [ExprStmt(Identifier('a')), BreakStmt()]
        assert stmt.cases[1].body == []

    def test_duplicate_default(self):
        with pytest.raises(ParseError):
            parse_source("switch (x) { default: a; default: b; }")

    def test_break_and_continue_placement(self):
        parse_source("while (true) { if (x) { continue; } break; }")
        parse_source("switch (x) { case 1: break; }")
        with pytest.raises(ParseError):
            parse_source("break;")
        with pytest.raises(ParseError):
            parse_source("switch (x) { case 1: continue; }")

    def test_continue_inside_switch_inside_loop(self):
        stmt = parse_source("while (x) { switch (y) { case 1: continue; } }").statements[0]
        assert stmt.body.statements[0].cases[0].body == [ContinueStmt()]


class TestStatementTerminators:
    def test_newline_ends_statement(self):
        program = parse_source("var x = 1\nvar y = 2\n")
        assert len(program.statements) == 2

    def test_closing_brace_ends_statement(self):
        program = parse_source('if (x) { console.log("hi") }')
        assert isinstance(program.statements[0].then_branch.statements[0], ExprStmt)

    def test_two_statements_on_one_line_need_a_semicolon(self):
        with pytest.raises(ParseError) as exc:
            parse_source("var a = 1 var b = 2")
        assert exc.value.expected == "';'"
        assert exc.value.found == "'var'"
        assert (exc.value.line, exc.value.column) == (1, 11)


class TestErrors:
    def test_missing_paren(self):
        with pytest.raises(ParseError) as exc:
            parse_source("if (1 < 2 {\n}")
        assert exc.value.expected == "')'"
        assert exc.value.found == "'{'"

    def test_unexpected_end_of_input(self):
        with pytest.raises(ParseError) as exc:
            parse_source("while (true) {")
        assert exc.value.found == "end of input"

    def test_error_message(self):
        with pytest.raises(ParseError) as exc:
            parse_source("var = 3;")
        assert str(exc.value) == "ParseError at line 1, column 5: expected identifier, found '='"

    def test_no_partial_parse(self):
        with pytest.raises(ParseError):
            parse_source("var ok = 1;\nvar bad = (2;")

    def test_token_stream_must_end_with_eof(self):
        with pytest.raises(ValueError):
            Parser(tokenize("1;")[:-1])


def test_ast_to_dict():
    tree = ast_to_dict(parse_source("var x = [1];"))
    assert tree["type"] == "Program"
    decl = tree["statements"][0]
    assert decl["type"] == "VarDecl"
    assert decl["name"] == "x"
    assert decl["value"] == {"type": "ArrayLiteral", "elements": [{"type": "Literal", "value": 1.0, "line": 1, "column": 10}],
                             "line": 1, "column": 9}
    assert (decl["line"], decl["column"]) == (1, 1)
