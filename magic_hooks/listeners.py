"""
Host Listeners.

A host delivers its events to exactly one listener callable. This module
provides listeners for common destinations: async queues, logging, and an
adapter that regroups value events into rendering events.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, List

from magic_hooks.execution.config import HostConfig
from magic_hooks.models.events import (
    HostErrorEvent,
    HostEvent,
    HostRenderingEvent,
    HostValueEvent,
    create_rendering_event,
)


class RenderingListener:
    """
    Regroup value events into one rendering event per render.

    Intermediate values are buffered and attached to the next final value
    as ``interim_results``, most recent first. Reset and error events are
    passed through unchanged and drop any buffered intermediates.

    Example:
        events = []
        host = Host(agent, RenderingListener(events.append))
        host.render("Hello")
        # [HostRenderingEvent(result='Hello, Jane Doe!', interim_results=['Hello, John Doe!'])]
    """

    def __init__(self, listener: Callable[[Any], None]):
        """
        Args:
            listener: Receives HostRenderingEvent, HostResetEvent and HostErrorEvent
        """
        self._listener = listener
        self._interim_results: List[Any] = []

    def __call__(self, event: HostEvent) -> None:
        if isinstance(event, HostValueEvent):
            if event.intermediate:
                self._interim_results.insert(0, event.value)
                return

            interim_results, self._interim_results = self._interim_results, []
            self._listener(create_rendering_event(event.value, *interim_results))
            return

        self._interim_results = []
        self._listener(event)


class QueueListener:
    """
    Put every event on an asyncio queue.

    Example:
        queue = asyncio.Queue()
        host = Host(agent, QueueListener(queue))
        host.render()
        event = await queue.get()
    """

    def __init__(self, queue: asyncio.Queue, skip_intermediate: bool = False):
        """
        Args:
            queue: The queue to put events on
            skip_intermediate: Drop intermediate value events
        """
        self._queue = queue
        self._skip_intermediate = skip_intermediate

    def __call__(self, event: HostEvent) -> None:
        if self._skip_intermediate and isinstance(event, HostValueEvent) and event.intermediate:
            return
        self._queue.put_nowait(event)


class LogListener:
    """
    Emit events to the logging system.

    Error events are logged at ERROR, everything else at the configured level.

    Example:
        listener = LogListener(logger_name="myapp.agent")
        host = Host(agent, listener)
    """

    def __init__(
        self,
        logger_name: str = "magic_hooks.events",
        level: int | str = logging.DEBUG,
        format_json: bool = False,
    ):
        """
        Args:
            logger_name: Name of the logger to use
            level: Log level for value and reset events
            format_json: If True, log events as JSON
        """
        self._logger = logging.getLogger(logger_name)
        self._level = logging.getLevelName(level) if isinstance(level, str) else level
        self._format_json = format_json

    @classmethod
    def from_config(
        cls,
        config: HostConfig,
        logger_name: str = "magic_hooks.events",
        format_json: bool = False,
    ) -> "LogListener":
        """Create a LogListener logging at the config's ``log_level``."""
        return cls(logger_name=logger_name, level=config.log_level, format_json=format_json)

    def __call__(self, event: HostEvent) -> None:
        level = logging.ERROR if isinstance(event, HostErrorEvent) else self._level

        if not self._logger.isEnabledFor(level):
            return

        if self._format_json:
            message = json.dumps(event.model_dump(by_alias=True), default=repr)
        else:
            message = self._format_event(event)

        self._logger.log(level, message)

    @staticmethod
    def _format_event(event: HostEvent) -> str:
        """Format an event for human-readable logging."""
        parts = [f"[{event.type}]"]

        if isinstance(event, HostValueEvent):
            parts.append(f"value={event.value!r}")
            parts.append(f"async={event.async_}")
            if event.intermediate:
                parts.append("intermediate")
        elif isinstance(event, HostErrorEvent):
            parts.append(f"error={event.error!r}")
            parts.append(f"async={event.async_}")
        elif isinstance(event, HostRenderingEvent):
            parts.append(f"result={event.result!r}")
            parts.append(f"interim={len(event.interim_results)}")

        return " ".join(parts)
