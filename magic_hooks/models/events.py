"""
Host event definitions.

A host reports everything to its listener as one of these records:
value events for rendered results, a reset event after reset(), and an
error event when a render failed. The rendering event is the alternate
shape that bundles a final result with its interim results, produced by
RenderingListener.
"""

from __future__ import annotations

from typing import Annotated, Any, Callable, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class BaseHostEvent(BaseModel):
    """
    Base model for all host events.
    Events are immutable; ``async_`` is exposed as ``async`` when dumped by alias.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)


class HostValueEvent(BaseHostEvent):
    type: Literal['value'] = 'value'
    value: Any = None
    async_: bool = Field(default=False, alias='async')
    intermediate: bool = False


class HostResetEvent(BaseHostEvent):
    """
    The host has lost its state and all side effects have been cleaned up.
    The next rendering will start from scratch.
    """
    type: Literal['reset'] = 'reset'


class HostErrorEvent(BaseHostEvent):
    """
    A render failed. The host has lost its state and all side effects have
    been cleaned up. The next rendering will start from scratch.
    """
    type: Literal['error'] = 'error'
    error: Any = None
    async_: bool = Field(default=False, alias='async')


class HostRenderingEvent(BaseHostEvent):
    type: Literal['rendering'] = 'rendering'
    result: Any = None
    # Sorted most recent first
    interim_results: List[Any] = Field(default_factory=list)


HostEvent = Annotated[
    Union[HostValueEvent, HostResetEvent, HostErrorEvent],
    Field(discriminator='type'),
]

HostListener = Callable[[HostEvent], None]


def create_value_event(value: Any, is_async: bool = False, intermediate: bool = False) -> HostValueEvent:
    return HostValueEvent(value=value, async_=is_async, intermediate=intermediate)


def create_reset_event() -> HostResetEvent:
    return HostResetEvent()


def create_error_event(error: Any, is_async: bool = False) -> HostErrorEvent:
    return HostErrorEvent(error=error, async_=is_async)


def create_rendering_event(result: Any, *interim_results: Any) -> HostRenderingEvent:
    return HostRenderingEvent(result=result, interim_results=list(interim_results))
