"""Assemble and link emitted text with the system C compiler."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from .config import Target, host_target

logger = logging.getLogger(__name__)


class ToolchainError(Exception):
    """The external assembler/linker failed or could not be run."""


def assemble_and_link(
    asm_text: str,
    output: Path | str,
    cc: str = "cc",
    target: Optional[Target] = None,
) -> Path:
    """Write *asm_text* to a temporary ``.s`` file and link it into *output*.

    Global cells are addressed RIP-relative but ``printf`` is called
    directly, so ELF executables are linked non-PIE.

    Raises:
        ToolchainError: if *cc* is missing or exits nonzero.
    """
    target = target or host_target()
    output = Path(output)
    flags = ["-no-pie"] if target is Target.ELF else []
    with tempfile.TemporaryDirectory(prefix="funcc_") as tmp:
        asm_path = Path(tmp) / "program.s"
        asm_path.write_text(asm_text, encoding="utf-8")
        cmd = [cc, *flags, "-o", str(output), str(asm_path)]
        logger.info("Linking: %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise ToolchainError(f"cannot run {cc}: {exc}") from exc
    if proc.returncode != 0:
        raise ToolchainError(f"{cc} exited with status {proc.returncode}:\n{proc.stderr}")
    return output
