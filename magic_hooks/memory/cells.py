"""
Memory cell definitions.

A memory is an ordered list of cells addressed by hook call position.
Each hook owns exactly one cell type; the ``type`` field discriminates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Optional, Sequence, TypeVar, Union

TState = TypeVar("TState")

DisposeEffect = Callable[[], None]
Effect = Callable[[], Optional[DisposeEffect]]
CreateState = Callable[[], TState]

# A queued state change: either the next state or an updater of the previous one
StateChange = Union[TState, Callable[[TState], TState]]
SetState = Callable[[StateChange], None]

CellType = Literal["state", "effect", "memo"]


@dataclass(eq=False)
class StateCell:
    """Current state, its setter and the changes queued since the last apply."""
    state: Any
    set_state: Optional[SetState] = None
    state_changes: List[Any] = field(default_factory=list)
    type: Literal["state"] = field(default="state", init=False)


@dataclass(eq=False)
class EffectCell:
    """
    Bookkeeping for one effect hook.

    Attributes:
        effect: The most recently supplied effect function
        dependencies: Its dependency list, None to re-run on every render
        outdated: Whether the effect must run at the end of the current pass
        dispose: Cleanup returned by the last successful run of the effect
    """
    effect: Effect
    dependencies: Optional[Sequence[Any]] = None
    outdated: bool = True
    dispose: Optional[DisposeEffect] = None
    type: Literal["effect"] = field(default="effect", init=False)


@dataclass(eq=False)
class MemoCell:
    value: Any
    dependencies: Optional[Sequence[Any]] = ()
    type: Literal["memo"] = field(default="memo", init=False)


MemoryCell = Union[StateCell, EffectCell, MemoCell]
