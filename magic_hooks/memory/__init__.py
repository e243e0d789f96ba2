"""
Memory module for magic-hooks.

- cells: the closed set of cell types (state, effect, memo)
- memory: the position-addressed cell store of a host
"""

from magic_hooks.memory.cells import (
    CreateState,
    DisposeEffect,
    Effect,
    EffectCell,
    MemoCell,
    MemoryCell,
    SetState,
    StateCell,
)
from magic_hooks.memory.memory import Memory

__all__ = [
    "CreateState",
    "DisposeEffect",
    "Effect",
    "EffectCell",
    "MemoCell",
    "MemoryCell",
    "SetState",
    "StateCell",
    "Memory",
]
