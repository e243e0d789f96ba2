"""
Host Configuration.

This module provides configuration options for hosts, allowing
customization of scheduling, render-loop limits and render logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from magic_hooks.execution.scheduler import MicrotaskScheduler, SCHEDULERS, create_scheduler


@dataclass
class HostConfig:
    """
    Configuration for a host.

    Use default_config() for sensible defaults.

    Attributes:
        scheduler: Name of the scheduler deferring asynchronous renders
        max_render_passes: Maximum agent invocations per render procedure
            (None = unlimited)
        log_renders: Log every render procedure at INFO instead of DEBUG
        log_level: Log level of LogListener.from_config(config)
    """

    scheduler: str = "asyncio"
    max_render_passes: Optional[int] = None
    log_renders: bool = False
    log_level: str = "DEBUG"

    def __post_init__(self):
        if self.scheduler not in SCHEDULERS:
            raise ValueError(
                f"Unknown scheduler: {self.scheduler}. Available: {list(SCHEDULERS.keys())}"
            )
        if self.max_render_passes is not None and self.max_render_passes < 1:
            raise ValueError("max_render_passes must be at least 1")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "HostConfig":
        """
        Create a HostConfig from a dictionary (e.g., from JSON).

        ```json
        {"preset": "debug", "max_render_passes": 50}
        ```

        Args:
            data: Dictionary with configuration values

        Returns:
            HostConfig instance
        """
        if not data:
            return cls()

        data = dict(data)
        preset_name = data.pop("preset", None)
        base_config = get_preset(preset_name) if preset_name else cls()

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown host config keys: {sorted(unknown)}")

        return cls(**{**base_config.to_dict(), **data})

    @classmethod
    def from_env(cls, prefix: str = "MAGIC_HOOKS_", environ: Optional[Mapping[str, str]] = None) -> "HostConfig":
        """
        Create a HostConfig from environment variables.

        Recognized variables (with the default prefix): MAGIC_HOOKS_PRESET,
        MAGIC_HOOKS_SCHEDULER, MAGIC_HOOKS_MAX_RENDER_PASSES,
        MAGIC_HOOKS_LOG_RENDERS, MAGIC_HOOKS_LOG_LEVEL.
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        if f"{prefix}PRESET" in environ:
            data["preset"] = environ[f"{prefix}PRESET"]
        if f"{prefix}SCHEDULER" in environ:
            data["scheduler"] = environ[f"{prefix}SCHEDULER"]
        if f"{prefix}MAX_RENDER_PASSES" in environ:
            value = environ[f"{prefix}MAX_RENDER_PASSES"].strip()
            data["max_render_passes"] = int(value) if value else None
        if f"{prefix}LOG_RENDERS" in environ:
            data["log_renders"] = environ[f"{prefix}LOG_RENDERS"].strip().lower() in ("1", "true", "yes", "on")
        if f"{prefix}LOG_LEVEL" in environ:
            data["log_level"] = environ[f"{prefix}LOG_LEVEL"].strip().upper()

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the HostConfig to a dictionary (for JSON serialization)."""
        return {
            "scheduler": self.scheduler,
            "max_render_passes": self.max_render_passes,
            "log_renders": self.log_renders,
            "log_level": self.log_level,
        }

    def create_scheduler(self) -> MicrotaskScheduler:
        return create_scheduler(self.scheduler)


def default_config() -> HostConfig:
    """Get the default host configuration."""
    return HostConfig()


PRESETS: Dict[str, HostConfig] = {
    # Asyncio scheduling, no render limit, quiet logging
    "default": HostConfig(),

    # Log every render and stop runaway agents early
    "debug": HostConfig(
        max_render_passes=100,
        log_renders=True,
        log_level="DEBUG",
    ),

    # Deferred renders run only when the owner drains the scheduler
    "manual": HostConfig(
        scheduler="manual",
    ),
}


def get_preset(name: str) -> HostConfig:
    """
    Get a configuration preset by name.

    Args:
        name: Preset name (default, debug, manual)

    Returns:
        A copy of the preset configuration

    Raises:
        ValueError: If preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {list(PRESETS.keys())}")
    return HostConfig(**PRESETS[name].to_dict())
