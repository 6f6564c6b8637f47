"""Composable API functions for the fun compiler pipeline.

Each function corresponds to a CLI workflow (default, --ast-only, --stats)
but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .asm_stats import count_mnemonics
from .codegen import generate, generate_lines
from .config import CodegenConfig
from .parser import parse
from .validate import check_program

logger = logging.getLogger(__name__)


def compile_source(
    source: str,
    config: Optional[CodegenConfig] = None,
    validate: bool = True,
) -> str:
    """Parse, optionally validate, and generate assembly for *source*.

    Args:
        source: fun source text.
        config: Code generation configuration; host defaults when omitted.
        validate: Reject undefined callees, arity mismatches and a missing
            ``main`` before generating.

    Returns:
        Assembler source text.

    Raises:
        ParseError: on a syntax error.
        ProgramValidationError: if *validate* is set and a check fails.
    """
    program = parse(source)
    if validate:
        check_program(program)
    return generate(program, config)


def compile_file(
    path: Path | str,
    config: Optional[CodegenConfig] = None,
    validate: bool = True,
) -> str:
    """Read *path* and compile it; see :func:`compile_source`."""
    logger.info("Compiling %s", path)
    source = Path(path).read_text(encoding="utf-8")
    return compile_source(source, config, validate)


def dump_ast(source: str) -> str:
    """Parse *source* and return the AST as indented JSON."""
    return parse(source).model_dump_json(indent=2)


def asm_stats(source: str, config: Optional[CodegenConfig] = None) -> dict[str, int]:
    """Compile *source* without validation and return mnemonic frequency counts."""
    return count_mnemonics(generate_lines(parse(source), config))
