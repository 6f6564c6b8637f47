"""Label allocation for control-flow constructs."""

from __future__ import annotations

from .constants import CONTROL_LABEL_PREFIX


class LabelAllocator:
    """Issues strictly increasing label ids, starting at 0, never reused.

    Not safe for concurrent use; each generation run owns its own allocator.
    """

    def __init__(self):
        self._counter: int = 0

    def next_label(self) -> int:
        label_id = self._counter
        self._counter += 1
        return label_id

    @property
    def issued(self) -> int:
        return self._counter


def label_name(label_id: int, suffix: str) -> str:
    """Build the jump-target name for one part of a construct, e.g. ``L3_ELSE``."""
    return f"{CONTROL_LABEL_PREFIX}{label_id}_{suffix}"
