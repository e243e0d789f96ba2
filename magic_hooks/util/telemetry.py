import functools
import logging
import time

logger = logging.getLogger(__name__)

MAX_REPR_LENGTH = 200


def _short_repr(value) -> str:
    text = repr(value)
    if len(text) > MAX_REPR_LENGTH:
        return text[:MAX_REPR_LENGTH] + "..."
    return text


def render_telemetry(func):
    """
    Log the start and the duration of a host's render procedure.

    The wrapped method must belong to an object exposing ``agent_name``,
    ``config`` and ``args``. Lines are logged at INFO when the host config has
    ``log_renders`` enabled, otherwise at DEBUG.
    """
    qualname = func.__qualname__.split('.')[0]

    @functools.wraps(func)
    def wrapper(self, is_async, *args, **kwargs):
        level = logging.INFO if self.config.log_renders else logging.DEBUG
        if not logger.isEnabledFor(level):
            return func(self, is_async, *args, **kwargs)

        start_time = time.monotonic()
        logger.log(level, "Rendering %s:%s (async=%s)...", qualname, self.agent_name, is_async)
        logger.debug("%s:%s args: %s", qualname, self.agent_name, _short_repr(self.args))
        try:
            return func(self, is_async, *args, **kwargs)
        finally:
            execution_time = time.monotonic() - start_time
            logger.log(level, "%s:%s render time: %.4f seconds", qualname, self.agent_name, execution_time)

    return wrapper
