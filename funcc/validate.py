"""Optional semantic checks over a parsed Program.

The code generator itself never validates: a call to an undefined function
or with the wrong number of actuals is emitted as-is and only fails (or
silently misreads stack slots) once linked and run. These checks catch
those problems before any assembly is produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from .ast_nodes import Call, Node, Program
from .constants import ENTRY_FUNCTION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """One problem found in a program."""

    message: str
    function: str = ""

    def __str__(self) -> str:
        if self.function:
            return f"in function '{self.function}': {self.message}"
        return self.message


class ProgramValidationError(Exception):
    def __init__(self, diagnostics: list[Diagnostic]):
        self.diagnostics = diagnostics
        super().__init__("; ".join(str(d) for d in diagnostics))


def walk(node: Node) -> Iterator[Node]:
    """Yield *node* and every AST node beneath it, depth-first, in field order."""
    yield node
    for field_name in type(node).model_fields:
        value = getattr(node, field_name)
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, Node):
                yield from walk(child)


def validate_program(program: Program) -> list[Diagnostic]:
    """Return every problem found; an empty list means the program is sound."""
    diagnostics: list[Diagnostic] = []
    arities: dict[str, int] = {}
    for function in program.functions:
        if function.name in arities:
            diagnostics.append(Diagnostic(f"duplicate definition of function '{function.name}'"))
            continue
        arities[function.name] = len(function.formals)

    if ENTRY_FUNCTION not in arities:
        diagnostics.append(Diagnostic(f"no '{ENTRY_FUNCTION}' function defined"))

    for function in program.functions:
        for node in walk(function.body):
            if not isinstance(node, Call):
                continue
            expected = arities.get(node.name)
            if expected is None:
                diagnostics.append(
                    Diagnostic(f"call to undefined function '{node.name}'", function.name)
                )
            elif expected != len(node.actuals):
                diagnostics.append(
                    Diagnostic(
                        f"'{node.name}' takes {expected} argument(s) but {len(node.actuals)} given",
                        function.name,
                    )
                )

    logger.debug("Validation found %d problem(s)", len(diagnostics))
    return diagnostics


def check_program(program: Program) -> None:
    """Raise ProgramValidationError if *program* has any problem."""
    diagnostics = validate_program(program)
    if diagnostics:
        raise ProgramValidationError(diagnostics)
