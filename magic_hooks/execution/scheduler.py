"""
Microtask schedulers used to defer asynchronous re-renders.

A state update made outside of a render must never re-enter the render
procedure synchronously. The host hands a thunk to its scheduler instead,
which runs it once the current synchronous execution has completed.
Failures inside a thunk are logged and never reach the caller of schedule().
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Protocol, runtime_checkable

from magic_hooks.errors import SchedulerError

logger = logging.getLogger(__name__)

Thunk = Callable[[], None]


@runtime_checkable
class MicrotaskScheduler(Protocol):
    """Protocol for deferring a thunk until after the current call stack."""

    def schedule(self, thunk: Thunk) -> None:
        ...


def _run_guarded(thunk: Thunk) -> None:
    try:
        thunk()
    except Exception:
        logger.exception("Scheduled task %r failed", thunk)


class AsyncioScheduler:
    """
    Defer thunks to the running asyncio event loop via ``call_soon``.

    The thunk runs on the next iteration of the loop, after the code that
    scheduled it has returned control to the loop.
    """

    name = "asyncio"

    def schedule(self, thunk: Thunk) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as error:
            raise SchedulerError(
                "AsyncioScheduler requires a running event loop; "
                "use ManualScheduler for synchronous code"
            ) from error
        loop.call_soon(_run_guarded, thunk)


class ManualScheduler:
    """
    Queue thunks until run_pending() is called.

    Example:
        scheduler = ManualScheduler()
        host = Host(agent, listener, scheduler=scheduler)
        host.render()
        ...  # set state from outside the render
        scheduler.run_pending()  # performs the deferred render
    """

    name = "manual"

    def __init__(self):
        self._pending: Deque[Thunk] = deque()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, thunk: Thunk) -> None:
        self._pending.append(thunk)

    def run_pending(self) -> int:
        """
        Run queued thunks, including the ones queued while draining.

        Returns:
            Number of thunks that were run
        """
        count = 0
        while self._pending:
            _run_guarded(self._pending.popleft())
            count += 1
        return count


SCHEDULERS = {
    AsyncioScheduler.name: AsyncioScheduler,
    ManualScheduler.name: ManualScheduler,
}


def create_scheduler(name: str) -> MicrotaskScheduler:
    """Create a scheduler by name ("asyncio" or "manual")."""
    try:
        return SCHEDULERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown scheduler: {name}. Available: {list(SCHEDULERS.keys())}"
        ) from None
