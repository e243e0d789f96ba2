import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from magic_hooks import (
    AsyncioScheduler,
    Host,
    HostConfig,
    ManualScheduler,
    PRESETS,
    default_config,
    get_preset,
)


class TestHostConfig:
    """Test suite for host configuration."""

    def test_defaults(self):
        config = default_config()

        assert config.scheduler == "asyncio"
        assert config.max_render_passes is None
        assert config.log_renders is False
        assert isinstance(config.create_scheduler(), AsyncioScheduler)

    def test_from_dict_with_preset_and_overrides(self):
        config = HostConfig.from_dict({"preset": "debug", "max_render_passes": 7})

        assert config.log_renders is True
        assert config.max_render_passes == 7

    def test_from_dict_empty(self):
        assert HostConfig.from_dict(None) == HostConfig()
        assert HostConfig.from_dict({}) == HostConfig()

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError):
            HostConfig.from_dict({"schedular": "manual"})

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            HostConfig(scheduler="threads")
        with pytest.raises(ValueError):
            HostConfig(max_render_passes=0)
        with pytest.raises(ValueError):
            get_preset("verbose")

    def test_get_preset_returns_a_copy(self):
        config = get_preset("manual")
        config.max_render_passes = 3

        assert PRESETS["manual"].max_render_passes is None
        assert isinstance(config.create_scheduler(), ManualScheduler)

    def test_from_env(self):
        config = HostConfig.from_env(environ={
            "MAGIC_HOOKS_SCHEDULER": "manual",
            "MAGIC_HOOKS_MAX_RENDER_PASSES": "25",
            "MAGIC_HOOKS_LOG_RENDERS": "yes",
            "MAGIC_HOOKS_LOG_LEVEL": "info",
        })

        assert config == HostConfig(
            scheduler="manual",
            max_render_passes=25,
            log_renders=True,
            log_level="INFO",
        )

    def test_host_builds_scheduler_from_config(self):
        host = Host(lambda: None, lambda event: None, config=get_preset("manual"))

        assert isinstance(host.scheduler, ManualScheduler)

    def test_log_renders(self, caplog):
        host = Host(lambda: None, lambda event: None, config=HostConfig(scheduler="manual", log_renders=True))

        with caplog.at_level(logging.INFO, logger="magic_hooks"):
            host.render()

        messages = [record.getMessage() for record in caplog.records]
        assert any("render time" in message for message in messages)

    def test_long_render_arguments_are_shortened(self, caplog):
        host = Host(lambda text: len(text), lambda event: None, config=get_preset("manual"))

        with caplog.at_level(logging.DEBUG, logger="magic_hooks.util.telemetry"):
            host.render("x" * 1000)

        args_lines = [record.getMessage() for record in caplog.records if " args: " in record.getMessage()]
        assert len(args_lines) == 1
        assert args_lines[0].endswith("...")
        assert "x" * 300 not in args_lines[0]
