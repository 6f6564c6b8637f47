"""Named constants — eliminates magic strings across the code generator."""

from __future__ import annotations

# Registers
ACCUMULATOR = "%rax"
SCRATCH = "%rcx"
STACK_SAVE = "%rbx"
FRAME_POINTER = "%rbp"
STACK_POINTER = "%rsp"
INSTRUCTION_POINTER = "%rip"

# Frame layout
WORD_SIZE = 8
FORMAL_BASE_OFFSET = 16  # saved %rbp + return address
STACK_ALIGNMENT = 16

# Symbol prefixes
FUNC_LABEL_PREFIX = "fun_"
FUNC_ALIAS_PREFIX = "_fun_"
VAR_LABEL_PREFIX = "var_"
NAME_LABEL_PREFIX = "name_"
CONTROL_LABEL_PREFIX = "L"

ENTRY_FUNCTION = "main"
ENTRY_LABELS: tuple[str, ...] = ("main", "_main")

FORMAT_STR_LABEL = "format_str"
FORMAT_STR = "%lu\\n"

TEXT_SECTION = ".text"
DATA_SECTION = ".data"

MAX_LITERAL = 2**64 - 1
