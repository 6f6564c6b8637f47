"""CodeGenerator — fun AST → x86-64 assembly in a single deterministic pass."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .asm import AsmLine, LineKind, render
from .ast_nodes import (
    Assignment,
    BinaryOp,
    BinaryOperator,
    Block,
    Call,
    Function,
    If,
    IntLiteral,
    Node,
    Print,
    Program,
    Return,
    Variable,
    While,
)
from .config import CodegenConfig
from .labels import LabelAllocator, label_name
from .symbols import LocationResolver, SymbolTable
from . import constants

logger = logging.getLogger(__name__)

RAX = constants.ACCUMULATOR
RCX = constants.SCRATCH
RBX = constants.STACK_SAVE
RBP = constants.FRAME_POINTER
RSP = constants.STACK_POINTER


class CodegenError(Exception):
    """Raised when the generator meets an AST node it has no rule for."""


class CodeGenerator:
    """Owns the per-run state: label allocator, symbol table, emitted lines.

    One instance may be reused for several programs; each call to
    ``generate`` starts from an empty symbol table and label id 0. An
    instance is not safe for concurrent use.
    """

    _COMPARE_SET: dict[BinaryOperator, str] = {
        BinaryOperator.EQ: "sete",
        BinaryOperator.NE: "setne",
        BinaryOperator.LT: "setb",
        BinaryOperator.GT: "seta",
    }

    def __init__(self, config: Optional[CodegenConfig] = None):
        self._config = config or CodegenConfig()
        self._labels = LabelAllocator()
        self._symbols = SymbolTable()
        self._resolver = LocationResolver(self._symbols)
        self._lines: list[AsmLine] = []
        self._STMT_DISPATCH: dict[type, Callable] = {
            Assignment: self._gen_assignment,
            Print: self._gen_print,
            If: self._gen_if,
            While: self._gen_while,
            Block: self._gen_block,
            Return: self._gen_return,
        }
        self._EXPR_DISPATCH: dict[type, Callable] = {
            Variable: self._gen_variable,
            IntLiteral: self._gen_literal,
            Call: self._gen_call,
            BinaryOp: self._gen_binary,
        }

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    @property
    def labels(self) -> LabelAllocator:
        return self._labels

    # ── helpers ──────────────────────────────────────────────────

    def _emit(self, mnemonic: str, *operands: str) -> None:
        self._lines.append(
            AsmLine(kind=LineKind.INSTRUCTION, mnemonic=mnemonic, operands=list(operands))
        )

    def _label(self, name: str) -> None:
        self._lines.append(AsmLine(kind=LineKind.LABEL, mnemonic=name))

    def _directive(self, name: str, *operands: str) -> None:
        self._lines.append(
            AsmLine(kind=LineKind.DIRECTIVE, mnemonic=name, operands=list(operands))
        )

    def _teardown_frame(self) -> None:
        self._emit("mov", RBP, RSP)
        self._emit("pop", RBP)

    # ── entry point ──────────────────────────────────────────────

    def generate(self, program: Program) -> list[AsmLine]:
        """Emit the whole program: text section, entry point, data section."""
        self._labels = LabelAllocator()
        self._symbols = SymbolTable()
        self._resolver = LocationResolver(self._symbols)
        self._lines = []

        logger.info(
            "Generating %d function(s) for target %s",
            len(program.functions),
            self._config.target.value,
        )
        self._directive(constants.TEXT_SECTION)
        for function in program.functions:
            self._gen_function(function)
        self._gen_entry_point()

        self._directive(constants.DATA_SECTION)
        self._label(constants.FORMAT_STR_LABEL)
        self._directive(".string", f'"{constants.FORMAT_STR}"')
        self._lines.extend(self._symbols.export())

        logger.info(
            "Emitted %d lines, %d label group(s), %d global(s)",
            len(self._lines),
            self._labels.issued,
            len(self._symbols),
        )
        return self._lines

    def _gen_entry_point(self) -> None:
        for name in constants.ENTRY_LABELS:
            self._directive(".global", name)
        for name in constants.ENTRY_LABELS:
            self._label(name)
        self._emit("push", RBP)
        self._emit("mov", RSP, RBP)
        # %rbx is callee-saved for the C runtime but used as scratch by print
        self._emit("push", RBX)
        self._emit("sub", f"${constants.WORD_SIZE}", RSP)
        self._emit("call", f"{constants.FUNC_LABEL_PREFIX}{constants.ENTRY_FUNCTION}")
        self._emit("mov", f"-{constants.WORD_SIZE}({RBP})", RBX)
        self._teardown_frame()
        self._emit("ret")

    # ── functions ────────────────────────────────────────────────

    def _gen_function(self, function: Function) -> None:
        logger.debug("Function %s(%s)", function.name, ", ".join(function.formals))
        label = f"{constants.FUNC_LABEL_PREFIX}{function.name}"
        alias = f"{constants.FUNC_ALIAS_PREFIX}{function.name}"
        self._directive(".global", label)
        self._directive(".global", alias)
        self._label(label)
        self._label(alias)
        self._emit("push", RBP)
        self._emit("mov", RSP, RBP)
        self._gen_stmt(function.body, function.formals)
        self._teardown_frame()
        self._emit("mov", "$0", RAX)
        self._emit("ret")

    # ── dispatchers ──────────────────────────────────────────────

    def _gen_stmt(self, stmt: Node, formals: Sequence[str]) -> None:
        handler = self._STMT_DISPATCH.get(type(stmt))
        if handler is None:
            raise CodegenError(f"No code generation rule for statement node {type(stmt).__name__}")
        handler(stmt, formals)

    def _gen_expr(self, expr: Node, formals: Sequence[str]) -> None:
        """Emit code leaving the value of *expr* in the accumulator."""
        handler = self._EXPR_DISPATCH.get(type(expr))
        if handler is None:
            raise CodegenError(f"No code generation rule for expression node {type(expr).__name__}")
        handler(expr, formals)

    # ── statements ───────────────────────────────────────────────

    def _gen_assignment(self, stmt: Assignment, formals: Sequence[str]) -> None:
        self._gen_expr(stmt.value, formals)
        self._emit("mov", RAX, self._resolver.resolve(stmt.name, formals))

    def _gen_print(self, stmt: Print, formals: Sequence[str]) -> None:
        self._gen_expr(stmt.value, formals)
        self._emit("mov", RSP, RBX)
        self._emit("and", f"$-{constants.STACK_ALIGNMENT}", RSP)
        self._emit("lea", f"{constants.FORMAT_STR_LABEL}({constants.INSTRUCTION_POINTER})", "%rdi")
        self._emit("mov", RAX, "%rsi")
        self._emit("mov", "$0", RAX)  # no vector registers used
        self._emit("call", self._config.target.printf_symbol)
        self._emit("mov", RBX, RSP)

    def _gen_if(self, stmt: If, formals: Sequence[str]) -> None:
        self._gen_expr(stmt.condition, formals)
        label_id = self._labels.next_label()
        self._emit("cmp", "$0", RAX)
        self._emit("je", label_name(label_id, "ELSE"))
        self._label(label_name(label_id, "THEN"))
        self._gen_stmt(stmt.then_branch, formals)
        self._emit("jmp", label_name(label_id, "END"))
        self._label(label_name(label_id, "ELSE"))
        if stmt.else_branch is not None:
            self._gen_stmt(stmt.else_branch, formals)
        self._label(label_name(label_id, "END"))

    def _gen_while(self, stmt: While, formals: Sequence[str]) -> None:
        label_id = self._labels.next_label()
        self._label(label_name(label_id, "BEGIN"))
        self._gen_expr(stmt.condition, formals)
        self._emit("cmp", "$0", RAX)
        self._emit("je", label_name(label_id, "END"))
        self._gen_stmt(stmt.body, formals)
        self._emit("jmp", label_name(label_id, "BEGIN"))
        self._label(label_name(label_id, "END"))

    def _gen_block(self, stmt: Block, formals: Sequence[str]) -> None:
        for child in stmt.statements:
            self._gen_stmt(child, formals)

    def _gen_return(self, stmt: Return, formals: Sequence[str]) -> None:
        self._gen_expr(stmt.value, formals)
        self._teardown_frame()
        self._emit("ret")

    # ── expressions ──────────────────────────────────────────────

    def _gen_variable(self, expr: Variable, formals: Sequence[str]) -> None:
        self._emit("mov", self._resolver.resolve(expr.name, formals), RAX)

    def _gen_literal(self, expr: IntLiteral, formals: Sequence[str]) -> None:
        self._emit("mov", f"${expr.value}", RAX)

    def _gen_call(self, expr: Call, formals: Sequence[str]) -> None:
        # Arguments go in fixed stack slots, not registers; the callee reads
        # slot i at 8*i+16(%rbp). The extra word keeps %rsp 16-byte aligned.
        reserved = constants.WORD_SIZE * len(expr.actuals) + constants.WORD_SIZE
        if expr.actuals:
            self._emit("sub", f"${reserved}", RSP)
        for index, actual in enumerate(expr.actuals):
            self._gen_expr(actual, formals)
            self._emit("mov", RAX, f"{constants.WORD_SIZE * index}({RSP})")
        self._emit("call", f"{constants.FUNC_LABEL_PREFIX}{expr.name}")
        if expr.actuals:
            self._emit("add", f"${reserved}", RSP)

    def _gen_binary(self, expr: BinaryOp, formals: Sequence[str]) -> None:
        self._gen_expr(expr.left, formals)
        self._emit("push", RAX)
        self._gen_expr(expr.right, formals)
        self._emit("pop", RCX)
        if expr.op == BinaryOperator.PLUS:
            self._emit("add", RCX, RAX)
        elif expr.op == BinaryOperator.MUL:
            self._emit("mul", RCX)
        elif expr.op in self._COMPARE_SET:
            self._emit("cmp", RAX, RCX)
            self._emit(self._COMPARE_SET[expr.op], "%al")
            self._emit("movzbq", "%al", RAX)
        else:
            raise CodegenError(f"Unsupported binary operator: {expr.op!r}")


def generate_lines(program: Program, config: Optional[CodegenConfig] = None) -> list[AsmLine]:
    return CodeGenerator(config).generate(program)


def generate(program: Program, config: Optional[CodegenConfig] = None) -> str:
    """Generate assembler source text for *program*."""
    return render(generate_lines(program, config))
