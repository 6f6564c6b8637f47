"""Global symbol table and variable location resolution."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from .asm import AsmLine, LineKind
from .constants import (
    FORMAL_BASE_OFFSET,
    FRAME_POINTER,
    INSTRUCTION_POINTER,
    NAME_LABEL_PREFIX,
    VAR_LABEL_PREFIX,
    WORD_SIZE,
)

logger = logging.getLogger(__name__)


class SymbolTable:
    """Insertion-ordered set of global variable names.

    Populated lazily while code is generated and exported once, after every
    function has been emitted, so globals read before their first
    assignment are still declared.
    """

    def __init__(self):
        self._names: dict[str, None] = {}

    def register(self, name: str) -> bool:
        """Record *name*; return True if it was already present."""
        if name in self._names:
            return True
        logger.debug("Registering global %s", name)
        self._names[name] = None
        return False

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def export(self) -> list[AsmLine]:
        """Storage cells for every global, then a name string for each."""
        lines: list[AsmLine] = []
        for name in self._names:
            label = f"{VAR_LABEL_PREFIX}{name}"
            lines.append(AsmLine(kind=LineKind.DIRECTIVE, mnemonic=".global", operands=[label]))
            lines.append(AsmLine(kind=LineKind.LABEL, mnemonic=label))
            lines.append(AsmLine(kind=LineKind.DIRECTIVE, mnemonic=".quad", operands=["0"]))
        for name in self._names:
            lines.append(AsmLine(kind=LineKind.LABEL, mnemonic=f"{NAME_LABEL_PREFIX}{name}"))
            lines.append(
                AsmLine(kind=LineKind.DIRECTIVE, mnemonic=".string", operands=[f'"{name}"'])
            )
        return lines


def formal_offset(index: int) -> int:
    """Frame-pointer offset of the formal at *index*."""
    return WORD_SIZE * index + FORMAL_BASE_OFFSET


class LocationResolver:
    """Maps a variable name to its address expression.

    Formals live in the caller-reserved argument slots above the saved frame
    pointer and return address; every other name is a global cell, which
    is registered in the symbol table on first sight.
    """

    def __init__(self, symbols: SymbolTable):
        self._symbols = symbols

    def resolve(self, name: str, formals: Sequence[str]) -> str:
        for index, formal in enumerate(formals):
            if formal == name:
                return f"{formal_offset(index)}({FRAME_POINTER})"
        self._symbols.register(name)
        return f"{VAR_LABEL_PREFIX}{name}({INSTRUCTION_POINTER})"
