"""funcc command-line driver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .api import asm_stats, compile_source, dump_ast
from .config import CodegenConfig, Target
from .parser import ParseError
from .toolchain import ToolchainError, assemble_and_link
from .validate import ProgramValidationError

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="funcc", description="Compile fun programs to x86-64 assembly"
    )
    parser.add_argument("file", help="Source file to compile ('-' reads stdin)")
    parser.add_argument("--output", "-o", default=None,
                        help="Output file (default: stdout; required with --link)")
    parser.add_argument("--target", "-t", default=None,
                        choices=[t.value for t in Target],
                        help="Object-file convention (default: host)")
    parser.add_argument("--no-validate", action="store_true",
                        help="Skip arity/undefined-function/main checks")
    parser.add_argument("--ast-only", action="store_true",
                        help="Only print the parsed AST as JSON")
    parser.add_argument("--stats", action="store_true",
                        help="Only print instruction mnemonic counts")
    parser.add_argument("--link", action="store_true",
                        help="Assemble and link into an executable")
    parser.add_argument("--cc", default="cc",
                        help="C compiler used by --link (default: cc)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log pipeline stages")
    return parser


def _write(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    config = CodegenConfig(target=Target.from_name(args.target)) if args.target else CodegenConfig()

    try:
        source = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
        if args.ast_only:
            _write(dump_ast(source) + "\n", args.output)
            return 0
        if args.stats:
            _write(json.dumps(asm_stats(source, config), indent=2) + "\n", args.output)
            return 0

        asm_text = compile_source(source, config, validate=not args.no_validate)
        if args.link:
            if not args.output:
                logger.error("--link requires --output")
                return 1
            assemble_and_link(asm_text, args.output, cc=args.cc, target=config.target)
            return 0
        _write(asm_text, args.output)
    except ParseError as exc:
        logger.error("%s: %s", args.file, exc)
        return 1
    except ProgramValidationError as exc:
        for diagnostic in exc.diagnostics:
            logger.error("%s: %s", args.file, diagnostic)
        return 1
    except ToolchainError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("%s: %s", args.file, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
