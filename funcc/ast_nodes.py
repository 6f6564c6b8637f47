"""AST for the fun language, as immutable tagged unions over statements and expressions."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import MAX_LITERAL


class Node(BaseModel):
    """Base for every AST node. Nodes are read-only once built."""

    model_config = ConfigDict(frozen=True)


class BinaryOperator(str, Enum):
    PLUS = "+"
    MUL = "*"
    EQ = "=="
    NE = "<>"
    LT = "<"
    GT = ">"


# ── expressions ──────────────────────────────────────────────────


class Variable(Node):
    kind: Literal["variable"] = "variable"
    name: str


class IntLiteral(Node):
    """Integer constant, treated as an unsigned 64-bit quantity."""

    kind: Literal["literal"] = "literal"
    value: int = Field(ge=0, le=MAX_LITERAL)


class Call(Node):
    kind: Literal["call"] = "call"
    name: str
    actuals: list[Expression] = []


class BinaryOp(Node):
    kind: Literal["binary"] = "binary"
    op: BinaryOperator
    left: Expression
    right: Expression


Expression = Annotated[
    Union[Variable, IntLiteral, Call, BinaryOp],
    Field(discriminator="kind"),
]


# ── statements ───────────────────────────────────────────────────


class Assignment(Node):
    kind: Literal["assign"] = "assign"
    name: str
    value: Expression


class Print(Node):
    kind: Literal["print"] = "print"
    value: Expression


class If(Node):
    kind: Literal["if"] = "if"
    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None  # absent else is a no-op


class While(Node):
    kind: Literal["while"] = "while"
    condition: Expression
    body: Statement


class Block(Node):
    kind: Literal["block"] = "block"
    statements: list[Statement] = []


class Return(Node):
    kind: Literal["return"] = "return"
    value: Expression


Statement = Annotated[
    Union[Assignment, Print, If, While, Block, Return],
    Field(discriminator="kind"),
]


# ── top level ────────────────────────────────────────────────────


class Function(Node):
    name: str
    formals: list[str] = []
    body: Statement


class Program(Node):
    functions: list[Function] = []


for _model in (Call, BinaryOp, Assignment, Print, If, While, Block, Return, Function, Program):
    _model.model_rebuild()
