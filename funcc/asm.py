"""Assembly line model: one emitted line of AT&T-syntax x86-64 text."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

INDENT = "    "


class LineKind(str, Enum):
    DIRECTIVE = "DIRECTIVE"
    LABEL = "LABEL"
    INSTRUCTION = "INSTRUCTION"


class AsmLine(BaseModel):
    kind: LineKind
    mnemonic: str  # directive name, label name, or instruction mnemonic
    operands: list[str] = []

    def __str__(self) -> str:
        if self.kind == LineKind.LABEL:
            return f"{self.mnemonic}:"
        if not self.operands:
            return f"{INDENT}{self.mnemonic}"
        return f"{INDENT}{self.mnemonic} {', '.join(self.operands)}"


def render(lines: list[AsmLine]) -> str:
    """Join emitted lines into assembler source text, newline-terminated."""
    return "".join(f"{line}\n" for line in lines)
