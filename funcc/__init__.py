"""fun compiler: x86-64 back end for a small imperative language."""

from .api import compile_source, compile_file, dump_ast, asm_stats  # noqa: F401
from .codegen import CodeGenerator, CodegenError, generate  # noqa: F401
from .config import CodegenConfig, Target  # noqa: F401
from .parser import ParseError, parse  # noqa: F401
