"""Code generation configuration types (pure data, no business logic)."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum


class Target(Enum):
    """Object-file convention of the downstream assembler and linker."""

    ELF = "elf"
    MACHO = "macho"

    @property
    def printf_symbol(self) -> str:
        return "_printf" if self is Target.MACHO else "printf"

    @classmethod
    def from_name(cls, name: str) -> Target:
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown target: {name}") from None


def host_target() -> Target:
    return Target.MACHO if sys.platform == "darwin" else Target.ELF


@dataclass(frozen=True)
class CodegenConfig:
    """Groups code generation configuration."""

    target: Target = field(default_factory=host_target)
