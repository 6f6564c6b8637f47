"""Pure functions for computing statistics over emitted assembly."""

from __future__ import annotations

from collections import Counter

from .asm import AsmLine, LineKind


def count_mnemonics(lines: list[AsmLine]) -> dict[str, int]:
    """Return a frequency map of instruction mnemonics in the given lines.

    Args:
        lines: Emitted assembly lines.

    Returns:
        A dict mapping mnemonic strings to their occurrence counts. Labels
        and directives are not counted. Empty dict for an empty input list.
    """
    return dict(
        Counter(line.mnemonic for line in lines if line.kind == LineKind.INSTRUCTION)
    )
