"""
Memory - the ordered, position-addressed cell store of a host.

Hooks read and write the cell under the pointer and then move the pointer
forward by one. Between two passes of the same render the pointer is
rewound (soft reset) so the next pass walks the same cells again. A hard
reset cleans up all effects and forgets every cell.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Type, TypeVar

from magic_hooks.errors import HookOrderError, TeardownError
from magic_hooks.memory.cells import EffectCell, MemoryCell, StateCell
from magic_hooks.util.dependencies import is_function, is_same

logger = logging.getLogger(__name__)

TCell = TypeVar("TCell", bound=MemoryCell)


class Memory:
    """
    Ordered list of memory cells plus a pointer.

    Across renders of the same agent the hooks must be called in the same
    order, so that every call resolves to the cell it created on the first
    render. A cell of the wrong type under the pointer raises HookOrderError.
    """

    def __init__(self):
        self._cells: List[MemoryCell] = []
        self._pointer = 0

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def cells(self) -> List[MemoryCell]:
        """A copy of the current cells, in slot order."""
        return list(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def read(self, cell_class: Type[TCell]) -> Optional[TCell]:
        """
        Return the cell under the pointer, or None on the first call at
        this position. Does not move the pointer.
        """
        if self._pointer >= len(self._cells):
            return None

        cell = self._cells[self._pointer]
        if not isinstance(cell, cell_class):
            raise HookOrderError(
                self._pointer,
                expected=cell_class.__dataclass_fields__["type"].default,
                actual=cell.type,
            )
        return cell

    def write(self, cell: TCell) -> TCell:
        """Store a new cell under the pointer. Only valid at the tail."""
        if self._pointer != len(self._cells):
            raise IndexError(
                f"Cannot write at slot {self._pointer}: memory holds {len(self._cells)} cells"
            )
        self._cells.append(cell)
        logger.debug("Memory slot %d: new %s cell", self._pointer, cell.type)
        return cell

    def move_pointer(self) -> None:
        self._pointer += 1

    def reset(self, hard: bool = False) -> None:
        """
        Rewind the pointer. A hard reset also disposes all effects and
        discards every cell.

        Cleanups run best-effort: a failing cleanup does not prevent the
        others from running, and the cells are discarded in any case. The
        collected failures are raised afterwards as a TeardownError.
        """
        self._pointer = 0

        if not hard:
            return

        errors: List[BaseException] = []

        for cell in self._cells:
            if isinstance(cell, EffectCell) and cell.dispose is not None:
                dispose, cell.dispose = cell.dispose, None
                try:
                    dispose()
                except Exception as error:
                    logger.warning("Effect cleanup failed during teardown: %r", error)
                    errors.append(error)

        logger.debug("Memory teardown: discarded %d cells", len(self._cells))
        self._cells = []

        if errors:
            raise TeardownError(errors) from errors[0]

    def has_state_changes(self) -> bool:
        """True if any state cell has queued changes that were not applied yet."""
        return any(
            isinstance(cell, StateCell) and cell.state_changes
            for cell in self._cells
        )

    def apply_state_changes(self) -> bool:
        """
        Fold every queued state change into its cell's state.

        Returns:
            True if the state of at least one cell changed
        """
        changed = False

        for cell in self._cells:
            if not isinstance(cell, StateCell) or not cell.state_changes:
                continue

            previous_state = cell.state
            state_changes, cell.state_changes = cell.state_changes, []

            state = previous_state
            for state_change in state_changes:
                state = state_change(state) if is_function(state_change) else state_change

            cell.state = state

            if not is_same(previous_state, state):
                changed = True

        return changed

    def trigger_effects(self) -> None:
        """
        Run every outdated effect in slot order, disposing the previous run
        of the same effect first.
        """
        for position, cell in enumerate(self._cells):
            if not isinstance(cell, EffectCell) or not cell.outdated:
                continue

            if cell.dispose is not None:
                dispose, cell.dispose = cell.dispose, None
                dispose()

            logger.debug("Memory slot %d: running effect", position)
            result = cell.effect()
            cell.dispose = result if is_function(result) else None
            cell.outdated = False
