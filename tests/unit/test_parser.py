"""Tests for the lark-based fun parser."""

import pytest

from funcc.ast_nodes import (
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    Call,
    If,
    IntLiteral,
    Print,
    Program,
    Return,
    Variable,
    While,
)
from funcc.parser import ParseError, parse


def _main_body(source: str):
    program = parse(f"fun main() {source}")
    return program.functions[0].body


def _expr(text: str):
    return _main_body(f"return {text}").value


class TestFunctions:
    def test_empty_source(self):
        assert parse("") == Program(functions=[])

    def test_function_without_formals(self):
        fn = parse("fun main() {}").functions[0]
        assert fn.name == "main"
        assert fn.formals == []
        assert fn.body == Block(statements=[])

    def test_formals_in_order(self):
        fn = parse("fun f(a, b, c) return a").functions[0]
        assert fn.formals == ["a", "b", "c"]
        assert fn.body == Return(value=Variable(name="a"))

    def test_multiple_functions_keep_order(self):
        program = parse("fun b() {} fun a() {} fun main() {}")
        assert [f.name for f in program.functions] == ["b", "a", "main"]

    def test_comments_ignored(self):
        program = parse("# leading\nfun main() { # trailing\n x = 1 }\n")
        assert program.functions[0].body == Block(
            statements=[Assignment(name="x", value=IntLiteral(value=1))]
        )


class TestStatements:
    def test_assignment(self):
        assert _main_body("x = 3") == Assignment(name="x", value=IntLiteral(value=3))

    def test_print(self):
        assert _main_body("print x") == Print(value=Variable(name="x"))

    def test_if_without_else(self):
        stmt = _main_body("if x print 1")
        assert isinstance(stmt, If)
        assert stmt.else_branch is None

    def test_if_with_else(self):
        stmt = _main_body("if x print 1 else print 2")
        assert stmt.else_branch == Print(value=IntLiteral(value=2))

    def test_dangling_else_binds_to_nearest_if(self):
        stmt = _main_body("if a if b print 1 else print 2")
        assert stmt.else_branch is None
        assert stmt.then_branch.else_branch == Print(value=IntLiteral(value=2))

    def test_while(self):
        assert _main_body("while x < 3 x = x + 1") == While(
            condition=BinaryOp(op=BinaryOperator.LT, left=Variable(name="x"), right=IntLiteral(value=3)),
            body=Assignment(
                name="x",
                value=BinaryOp(op=BinaryOperator.PLUS, left=Variable(name="x"), right=IntLiteral(value=1)),
            ),
        )

    def test_nested_blocks(self):
        body = _main_body("{ { } x = 1 }")
        assert body == Block(statements=[Block(statements=[]), Assignment(name="x", value=IntLiteral(value=1))])

    def test_return(self):
        assert _main_body("return 0") == Return(value=IntLiteral(value=0))

    def test_keyword_prefix_is_a_name(self):
        assert _main_body("printer = 1") == Assignment(name="printer", value=IntLiteral(value=1))


class TestExpressions:
    def test_literal(self):
        assert _expr("42") == IntLiteral(value=42)

    def test_max_literal(self):
        assert _expr("18446744073709551615") == IntLiteral(value=2**64 - 1)

    def test_call_without_actuals(self):
        assert _expr("f()") == Call(name="f", actuals=[])

    def test_call_with_actuals(self):
        assert _expr("f(1, x)") == Call(name="f", actuals=[IntLiteral(value=1), Variable(name="x")])

    def test_multiply_binds_tighter_than_plus(self):
        expr = _expr("1 + 2 * 3")
        assert expr.op == BinaryOperator.PLUS
        assert expr.right.op == BinaryOperator.MUL

    def test_plus_binds_tighter_than_comparison(self):
        expr = _expr("a < b + 1")
        assert expr.op == BinaryOperator.LT
        assert expr.right.op == BinaryOperator.PLUS

    def test_comparison_binds_tighter_than_equality(self):
        expr = _expr("a < b == c > d")
        assert expr.op == BinaryOperator.EQ
        assert expr.left.op == BinaryOperator.LT
        assert expr.right.op == BinaryOperator.GT

    def test_left_associative(self):
        expr = _expr("1 + 2 + 3")
        assert expr.left == BinaryOp(op=BinaryOperator.PLUS, left=IntLiteral(value=1), right=IntLiteral(value=2))

    def test_parentheses_group(self):
        expr = _expr("(1 + 2) * 3")
        assert expr.op == BinaryOperator.MUL
        assert expr.left.op == BinaryOperator.PLUS

    def test_not_equal(self):
        assert _expr("a <> b").op == BinaryOperator.NE


class TestParseErrors:
    def test_missing_body(self):
        with pytest.raises(ParseError):
            parse("fun main()")

    def test_unexpected_token_position(self):
        with pytest.raises(ParseError) as excinfo:
            parse("fun main() {\n  x = = 1\n}")
        assert excinfo.value.line == 2

    def test_unexpected_character(self):
        with pytest.raises(ParseError, match="unexpected character"):
            parse("fun main() { x = 1 $ }")

    def test_literal_too_large(self):
        with pytest.raises(ParseError, match="64 bits"):
            parse("fun main() { return 18446744073709551616 }")

    def test_statement_outside_function(self):
        with pytest.raises(ParseError):
            parse("x = 1")
