"""
Exception hierarchy for magic-hooks.

Agent and effect failures raised during a render are reported to the
host's listener as error events. The errors defined here are the ones the
engine itself raises.
"""

from __future__ import annotations

from typing import List, Optional


class MagicHooksError(Exception):
    """Base class for all errors raised by the engine."""


class HookUsageError(MagicHooksError, RuntimeError):
    """A hook was called while no host is rendering."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "A hook cannot be used without an active host.")


class HookOrderError(MagicHooksError):
    """
    The hooks of an agent were called in a different order than in the
    previous render, so a memory slot was read as the wrong cell type.
    """

    def __init__(self, position: int, expected: str, actual: str):
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Hook order changed between renders: slot {position} holds a "
            f"{actual!r} cell but a {expected!r} hook was called."
        )


class TeardownError(MagicHooksError):
    """One or more effect cleanups failed while the memory was discarded."""

    def __init__(self, errors: List[BaseException]):
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} cleanup(s) failed during teardown: "
            + "; ".join(repr(error) for error in self.errors)
        )


class RenderLoopError(MagicHooksError):
    """The agent did not settle within the configured number of passes."""

    def __init__(self, max_render_passes: int):
        self.max_render_passes = max_render_passes
        super().__init__(
            f"Agent did not settle after {max_render_passes} render passes."
        )


class SchedulerError(MagicHooksError, RuntimeError):
    """A deferred render could not be scheduled."""
