import json
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from magic_hooks import (
    Host,
    HostConfig,
    HostErrorEvent,
    HostRenderingEvent,
    HostResetEvent,
    LogListener,
    ManualScheduler,
    RenderingListener,
    use_effect,
    use_state,
)


def counter(limit):
    count, set_count = use_state(0)
    if count < limit:
        set_count(count + 1)
    return count


class TestRenderingListener:
    """Test suite for regrouping value events into rendering events."""

    def setup_method(self):
        self.events = []
        self.scheduler = ManualScheduler()
        self.host = Host(counter, RenderingListener(self.events.append), scheduler=self.scheduler)

    def test_interim_results_are_sorted_most_recent_first(self):
        self.host.render(3)

        assert self.events == [HostRenderingEvent(result=3, interim_results=[2, 1, 0])]

    def test_render_without_interim_results(self):
        self.host.render(0)

        assert self.events == [HostRenderingEvent(result=0, interim_results=[])]

    def test_reset_and_error_pass_through(self):
        self.host.render(1)
        self.host.reset()

        failure = ValueError("nope")

        def failing(value):
            raise failure

        events = []
        host = Host(failing, RenderingListener(events.append), scheduler=self.scheduler)
        host.render(1)

        assert self.events[-1] == HostResetEvent()
        assert events == [HostErrorEvent(error=failure, async_=False)]

    def test_greeter_in_rendering_shape(self):
        def greeter(salutation):
            name, set_name = use_state("John Doe")

            def rename():
                if name == "John Doe":
                    set_name("Jane Doe")

            use_effect(rename, [name])
            return f"{salutation}, {name}!"

        events = []
        host = Host(greeter, RenderingListener(events.append), scheduler=self.scheduler)
        host.render("Hello")

        assert events == [
            HostRenderingEvent(result="Hello, Jane Doe!", interim_results=["Hello, John Doe!"]),
        ]


class TestLogListener:
    """Test suite for logging events."""

    def test_events_are_logged(self, caplog):
        host = Host(counter, LogListener(logger_name="test.events", level="INFO"), scheduler=ManualScheduler())

        with caplog.at_level(logging.INFO, logger="test.events"):
            host.render(1)
            host.reset()

        messages = [record.getMessage() for record in caplog.records if record.name == "test.events"]
        assert messages == [
            "[value] value=0 async=False intermediate",
            "[value] value=1 async=False",
            "[reset]",
        ]

    def test_errors_are_logged_at_error_level(self, caplog):
        def failing():
            raise RuntimeError("bad agent")

        host = Host(failing, LogListener(logger_name="test.events"), scheduler=ManualScheduler())

        with caplog.at_level(logging.DEBUG, logger="test.events"):
            host.render()

        records = [record for record in caplog.records if record.name == "test.events"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert "bad agent" in records[0].getMessage()

    def test_json_format(self, caplog):
        host = Host(lambda: "done", LogListener(logger_name="test.events", format_json=True), scheduler=ManualScheduler())

        with caplog.at_level(logging.DEBUG, logger="test.events"):
            host.render()

        records = [record for record in caplog.records if record.name == "test.events"]
        payload = json.loads(records[0].getMessage())
        assert payload == {"type": "value", "value": "done", "async": False, "intermediate": False}

    def test_from_config_uses_the_configured_level(self, caplog):
        config = HostConfig(scheduler="manual", log_level="INFO")
        host = Host(lambda: "done", LogListener.from_config(config, logger_name="test.events"), config=config)

        with caplog.at_level(logging.DEBUG, logger="test.events"):
            host.render()

        records = [record for record in caplog.records if record.name == "test.events"]
        assert [record.levelno for record in records] == [logging.INFO]
        assert records[0].getMessage() == "[value] value='done' async=False"
