"""
RenderContext - the register holding the host whose agent is being invoked.

Hooks are plain functions, so they find their host through this register
instead of a context argument. The register is set for exactly one agent
invocation and is always cleared again, including when the agent raises.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from magic_hooks.errors import HookUsageError

if TYPE_CHECKING:
    from magic_hooks.execution.host import Host


class RenderContext:
    """Single-slot register for the active host."""

    def __init__(self, name: str = "magic_hooks_active_host"):
        self._active: contextvars.ContextVar[Optional["Host"]] = contextvars.ContextVar(name, default=None)

    @property
    def active_host(self) -> Optional["Host"]:
        return self._active.get()

    def get_active_host(self) -> "Host":
        host = self._active.get()
        if host is None:
            raise HookUsageError()
        return host

    @contextmanager
    def activate(self, host: "Host") -> Iterator["Host"]:
        """Make ``host`` the active host for the duration of the block."""
        token = self._active.set(host)
        try:
            yield host
        finally:
            self._active.reset(token)


render_context = RenderContext()


def get_active_host() -> "Host":
    """Return the host currently invoking its agent or raise HookUsageError."""
    return render_context.get_active_host()
