"""
Magic Hooks

General reactive programming with hooks, without a UI tree. A Host owns the
memory of one agent function, re-invokes it until its state and effects
have settled, and reports the results as events to a single listener.

Example:
    from magic_hooks import Host, use_effect, use_state

    def greeter(salutation):
        name, set_name = use_state("John Doe")

        def rename():
            if name == "John Doe":
                set_name("Jane Doe")

        use_effect(rename, [name])

        return f"{salutation}, {name}!"

    host = Host(greeter, print)
    host.render("Hello")
"""

from magic_hooks.errors import (
    HookOrderError,
    HookUsageError,
    MagicHooksError,
    RenderLoopError,
    SchedulerError,
    TeardownError,
)
from magic_hooks.memory import CreateState, DisposeEffect, Effect, SetState
from magic_hooks.models.events import (
    HostErrorEvent,
    HostEvent,
    HostListener,
    HostRenderingEvent,
    HostResetEvent,
    HostValueEvent,
)
from magic_hooks.execution import (
    AsyncioScheduler,
    HostConfig,
    ManualScheduler,
    MicrotaskScheduler,
    PRESETS,
    default_config,
    get_preset,
    Host,
    Ref,
    StateSetter,
    use_callback,
    use_effect,
    use_memo,
    use_ref,
    use_state,
)
from magic_hooks.listeners import LogListener, QueueListener, RenderingListener

__all__ = [
    # Errors
    "HookOrderError",
    "HookUsageError",
    "MagicHooksError",
    "RenderLoopError",
    "SchedulerError",
    "TeardownError",
    # Types
    "CreateState",
    "DisposeEffect",
    "Effect",
    "SetState",
    # Events
    "HostErrorEvent",
    "HostEvent",
    "HostListener",
    "HostRenderingEvent",
    "HostResetEvent",
    "HostValueEvent",
    # Execution
    "AsyncioScheduler",
    "HostConfig",
    "ManualScheduler",
    "MicrotaskScheduler",
    "PRESETS",
    "default_config",
    "get_preset",
    "Host",
    "Ref",
    "StateSetter",
    # Hooks
    "use_callback",
    "use_effect",
    "use_memo",
    "use_ref",
    "use_state",
    # Listeners
    "LogListener",
    "QueueListener",
    "RenderingListener",
]
