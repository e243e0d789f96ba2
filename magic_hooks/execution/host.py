"""
Host - owns the memory of one agent and drives its renders.

The host invokes its agent repeatedly until the agent's state and effects
have settled, and reports the results to a single listener:

- state set while the agent runs re-invokes the agent before effects run
- state set by effects re-invokes the agent before anything is final
- state set from outside a render is deferred to the host's scheduler,
  and all changes queued until then are applied together

Only the last value of a render is reported as final; the values of the
superseded passes are reported before it as intermediate events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Sequence, Tuple, TypeVar

from magic_hooks.errors import HookUsageError, RenderLoopError, SchedulerError, TeardownError
from magic_hooks.execution.config import HostConfig, default_config
from magic_hooks.execution.context import get_active_host, render_context
from magic_hooks.execution.scheduler import MicrotaskScheduler
from magic_hooks.memory import Effect, EffectCell, MemoCell, Memory, StateCell
from magic_hooks.models.events import (
    HostListener,
    create_error_event,
    create_reset_event,
    create_value_event,
)
from magic_hooks.util.dependencies import are_dependencies_equal, is_function
from magic_hooks.util.telemetry import render_telemetry

logger = logging.getLogger(__name__)

TValue = TypeVar("TValue")
TCallback = TypeVar("TCallback", bound=Callable[..., Any])

AnyAgent = Callable[..., Any]


@dataclass(eq=False)
class Ref(Generic[TValue]):
    """Mutable container returned by use_ref, stable for the agent's lifetime."""
    current: TValue


class StateSetter:
    """
    Setter of one state cell.

    Calling it queues a state change (the next state, or a function of the
    previous state). The change takes effect the next time the host applies
    its queued changes: within the running render, or in a deferred render
    when the setter is called while the host is not rendering.
    """

    __slots__ = ("_host", "_cell")

    def __init__(self, host: "Host", cell: StateCell):
        self._host = host
        self._cell = cell

    def __call__(self, state: Any) -> None:
        self._cell.state_changes.append(state)

        if self._host.rendering:
            return

        try:
            self._host._schedule_async_render()
        except Exception:
            # a change that cannot be rendered is not kept
            self._cell.state_changes.pop()
            raise

    def __repr__(self) -> str:
        return f"StateSetter(host={self._host.agent_name})"


class Host:
    """
    Orchestrates the renders of one agent.

    Example:
        def greeter(salutation):
            name, set_name = use_state("John Doe")
            return f"{salutation}, {name}!"

        host = Host(greeter, print)
        host.render("Hello")
        # HostValueEvent(type='value', value='Hello, John Doe!', async_=False, intermediate=False)
    """

    @staticmethod
    def use_state(initial_state: Any) -> Tuple[Any, StateSetter]:
        """
        Return the current state of this slot and its setter.

        ``initial_state`` is either the initial state itself or a function
        producing it, called once on the first render.
        """
        host = get_active_host()
        memory = host._memory

        cell = memory.read(StateCell)

        if cell is None:
            cell = memory.write(
                StateCell(state=initial_state() if is_function(initial_state) else initial_state)
            )
            cell.set_state = StateSetter(host, cell)

        memory.move_pointer()

        return cell.state, cell.set_state

    @staticmethod
    def use_effect(effect: Effect, dependencies: Optional[Sequence[Any]] = None) -> None:
        """
        Run ``effect`` after the render has settled, on the first render and
        whenever ``dependencies`` change. Without dependencies the effect
        runs after every render. A callable returned by the effect is
        called before its next run and on teardown.
        """
        host = get_active_host()
        memory = host._memory

        dependencies = tuple(dependencies) if dependencies is not None else None
        cell = memory.read(EffectCell)

        if cell is None:
            memory.write(EffectCell(effect=effect, dependencies=dependencies, outdated=True))
        elif not are_dependencies_equal(cell.dependencies, dependencies) or cell.outdated:
            cell.outdated = True
            cell.effect = effect
            cell.dependencies = dependencies

        memory.move_pointer()

    @staticmethod
    def use_memo(create_value: Callable[[], TValue], dependencies: Optional[Sequence[Any]] = None) -> TValue:
        """
        Return the memoized result of ``create_value``, recomputed when
        ``dependencies`` change. Without dependencies it is recomputed on
        every render.
        """
        host = get_active_host()
        memory = host._memory

        dependencies = tuple(dependencies) if dependencies is not None else None
        cell = memory.read(MemoCell)

        if cell is None:
            cell = memory.write(MemoCell(value=create_value(), dependencies=dependencies))
        elif not are_dependencies_equal(cell.dependencies, dependencies):
            cell.value = create_value()
            cell.dependencies = dependencies

        memory.move_pointer()

        return cell.value

    @staticmethod
    def use_callback(callback: TCallback, dependencies: Optional[Sequence[Any]] = None) -> TCallback:
        """Return the same ``callback`` object for as long as ``dependencies`` are unchanged."""
        return Host.use_memo(lambda: callback, dependencies)

    @staticmethod
    def use_ref(initial_value: TValue) -> Ref[TValue]:
        return Host.use_memo(lambda: Ref(initial_value), ())

    def __init__(
        self,
        agent: AnyAgent,
        listener: HostListener,
        *,
        config: Optional[HostConfig] = None,
        scheduler: Optional[MicrotaskScheduler] = None,
    ):
        """
        Args:
            agent: The function whose renders this host orchestrates
            listener: Receives every event of this host
            config: Host configuration (defaults if None)
            scheduler: Scheduler for deferred renders; built from the config if None
        """
        self._agent = agent
        self._listener = listener
        self.config = config if config is not None else default_config()
        self._scheduler = scheduler if scheduler is not None else self.config.create_scheduler()
        self._memory = Memory()
        self._args: Tuple[Tuple[Any, ...], Dict[str, Any]] = ((), {})
        self._rendering = False

    @property
    def agent_name(self) -> str:
        return getattr(self._agent, "__qualname__", repr(self._agent))

    @property
    def args(self) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        """Positional and keyword arguments of the most recent render() call."""
        return self._args

    @property
    def rendering(self) -> bool:
        """True while the render procedure is on the call stack."""
        return self._rendering

    @property
    def memory_size(self) -> int:
        return len(self._memory)

    @property
    def scheduler(self) -> MicrotaskScheduler:
        return self._scheduler

    def render(self, *args: Any, **kwargs: Any) -> None:
        """
        Render the agent with the given arguments.

        Results are delivered to the listener. A failing render is reported
        as an error event and resets the host; it never raises here.
        """
        if self._rendering:
            raise HookUsageError(f"Host {self.agent_name} cannot render while it is already rendering.")

        self._args = (args, kwargs)

        try:
            self._render(False)
        except Exception as error:
            self._fail(error, is_async=False)
            return

        self._schedule_pending_changes()

    def reset(self) -> None:
        """
        Reset the state and clean up all side effects.
        The next rendering will start from scratch.
        """
        self._teardown()
        logger.debug("Host %s reset", self.agent_name)
        self._listener(create_reset_event())

    def _schedule_async_render(self) -> None:
        self._scheduler.schedule(self._render_async)

    def _render_async(self) -> None:
        try:
            if not self._memory.apply_state_changes():
                return
            self._render(True)
        except Exception as error:
            self._fail(error, is_async=True)
            return

        self._schedule_pending_changes()

    def _schedule_pending_changes(self) -> None:
        """
        Schedule a deferred render for changes queued by the listener while
        the final value was delivered. The render itself already succeeded,
        so a scheduling failure is logged and the changes stay queued for
        the next render.
        """
        if not self._memory.has_state_changes():
            return

        try:
            self._schedule_async_render()
        except SchedulerError as error:
            logger.warning("Host %s: queued state changes not scheduled: %s", self.agent_name, error)

    def _teardown(self) -> None:
        try:
            self._memory.reset(hard=True)
        except TeardownError as error:
            logger.warning("Host %s: %s", self.agent_name, error)

    def _fail(self, error: Exception, is_async: bool) -> None:
        logger.debug("Host %s render failed (async=%s): %r", self.agent_name, is_async, error)
        self._teardown()
        self._listener(create_error_event(error, is_async))

    @render_telemetry
    def _render(self, is_async: bool) -> None:
        args, kwargs = self._args
        max_render_passes = self.config.max_render_passes

        self._rendering = True
        try:
            has_value = False
            value = None
            passes = 0

            while True:
                while True:
                    if has_value:
                        self._listener(create_value_event(value, is_async, intermediate=True))

                    passes += 1
                    if max_render_passes is not None and passes > max_render_passes:
                        raise RenderLoopError(max_render_passes)

                    with render_context.activate(self):
                        value = self._agent(*args, **kwargs)
                    has_value = True

                    self._memory.reset()

                    if not self._memory.apply_state_changes():
                        break

                self._memory.trigger_effects()

                if not self._memory.apply_state_changes():
                    break

            logger.debug("Host %s settled after %d pass(es)", self.agent_name, passes)
            self._listener(create_value_event(value, is_async, intermediate=False))
        finally:
            self._rendering = False

    def __repr__(self) -> str:
        return f"Host(agent={self.agent_name}, cells={len(self._memory)}, rendering={self._rendering})"


use_state = Host.use_state
use_effect = Host.use_effect
use_memo = Host.use_memo
use_callback = Host.use_callback
use_ref = Host.use_ref
