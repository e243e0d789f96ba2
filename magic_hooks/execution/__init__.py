"""
Render execution module for magic-hooks.

This module implements the runtime that lets a plain function keep state
and schedule side effects across repeated invocations:
- HostConfig: Scheduling, render-limit and logging options
- RenderContext: Register of the host whose agent is currently running
- MicrotaskScheduler: Defers renders triggered from outside a render
- Host: Owns the memory of one agent and drives its renders

Import order matters: the config and the schedulers must be loaded before
the host.
"""

from magic_hooks.execution.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    MicrotaskScheduler,
    create_scheduler,
)
from magic_hooks.execution.config import (
    HostConfig,
    default_config,
    get_preset,
    PRESETS,
)
from magic_hooks.execution.context import RenderContext, get_active_host, render_context
from magic_hooks.execution.host import (
    Host,
    Ref,
    StateSetter,
    use_callback,
    use_effect,
    use_memo,
    use_ref,
    use_state,
)

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "MicrotaskScheduler",
    "create_scheduler",
    "HostConfig",
    "default_config",
    "get_preset",
    "PRESETS",
    "RenderContext",
    "get_active_host",
    "render_context",
    "Host",
    "Ref",
    "StateSetter",
    "use_callback",
    "use_effect",
    "use_memo",
    "use_ref",
    "use_state",
]
