"""Lark Parsing Layer — fun source text → AST."""

from __future__ import annotations

import logging
from functools import lru_cache

from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedInput, VisitError

from .ast_nodes import (
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    Call,
    Function,
    If,
    IntLiteral,
    Print,
    Program,
    Return,
    Variable,
    While,
)
from .constants import MAX_LITERAL

logger = logging.getLogger(__name__)

GRAMMAR = r"""
    start: function*

    function: "fun" NAME "(" [formals] ")" statement
    formals: NAME ("," NAME)*

    ?statement: NAME "=" expr                           -> assignment
              | "print" expr                            -> print_stmt
              | "if" expr statement ["else" statement]  -> if_stmt
              | "while" expr statement                  -> while_stmt
              | "{" statement* "}"                      -> block
              | "return" expr                           -> return_stmt

    ?expr: equality

    ?equality: comparison
             | equality "==" comparison   -> eq
             | equality "<>" comparison   -> ne

    ?comparison: sum
               | comparison "<" sum       -> lt
               | comparison ">" sum       -> gt

    ?sum: product
        | sum "+" product                 -> plus

    ?product: atom
            | product "*" atom            -> mul

    ?atom: INT                            -> literal
         | NAME "(" [actuals] ")"         -> call
         | NAME                           -> variable
         | "(" expr ")"

    actuals: expr ("," expr)*

    COMMENT: /#[^\n]*/

    %import common.CNAME -> NAME
    %import common.INT
    %import common.WS
    %ignore WS
    %ignore COMMENT
"""


class ParseError(Exception):
    """Syntax error in fun source, with a 1-based position."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column


class AstBuilder(Transformer):
    """Turns the lark parse tree into pydantic AST nodes."""

    def start(self, items):
        return Program(functions=list(items))

    def function(self, items):
        name, formals, body = items
        return Function(name=str(name), formals=formals or [], body=body)

    def formals(self, items):
        return [str(tok) for tok in items]

    def actuals(self, items):
        return list(items)

    # ── statements ───────────────────────────────────────────────

    def assignment(self, items):
        name, value = items
        return Assignment(name=str(name), value=value)

    def print_stmt(self, items):
        (value,) = items
        return Print(value=value)

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def while_stmt(self, items):
        condition, body = items
        return While(condition=condition, body=body)

    def block(self, items):
        return Block(statements=list(items))

    def return_stmt(self, items):
        (value,) = items
        return Return(value=value)

    # ── expressions ──────────────────────────────────────────────

    def literal(self, items):
        (tok,) = items
        value = int(tok)
        if value > MAX_LITERAL:
            raise ParseError(
                f"Integer literal {tok} does not fit in 64 bits", tok.line, tok.column
            )
        return IntLiteral(value=value)

    def variable(self, items):
        (tok,) = items
        return Variable(name=str(tok))

    def call(self, items):
        name, actuals = items
        return Call(name=str(name), actuals=actuals or [])

    def _binary(op: BinaryOperator):
        def build(self, items):
            left, right = items
            return BinaryOp(op=op, left=left, right=right)

        return build

    eq = _binary(BinaryOperator.EQ)
    ne = _binary(BinaryOperator.NE)
    lt = _binary(BinaryOperator.LT)
    gt = _binary(BinaryOperator.GT)
    plus = _binary(BinaryOperator.PLUS)
    mul = _binary(BinaryOperator.MUL)

    del _binary


@lru_cache(maxsize=1)
def _lark() -> Lark:
    return Lark(GRAMMAR, parser="lalr", propagate_positions=True)


def _describe(exc: UnexpectedInput) -> str:
    token = getattr(exc, "token", None)
    if isinstance(token, Token):
        if token.type in ("$END", "<EOF>"):
            return "unexpected end of input"
        return f"unexpected {token.value!r}"
    char = getattr(exc, "char", None)
    if char is not None:
        return f"unexpected character {char!r}"
    return "unexpected input"


def parse(source: str) -> Program:
    """Parse fun source text into a Program.

    Raises:
        ParseError: on the first syntax error; there is no recovery.
    """
    try:
        tree = _lark().parse(source)
    except UnexpectedInput as exc:
        line, column = exc.line, exc.column
        raise ParseError(
            f"Syntax error at line {line}, column {column}: {_describe(exc)}", line, column
        ) from exc

    try:
        program = AstBuilder().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            raise exc.orig_exc from exc
        raise
    logger.info("Parsed %d function(s)", len(program.functions))
    return program
