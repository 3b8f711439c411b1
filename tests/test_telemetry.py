from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import pytest

from indent_guide.runtime import CallbackGuard, OneShotTrigger, telemetry


class RecordingLogger:
    def __init__(self) -> None:
        self.records: List[Tuple[str, str, Dict[str, str]]] = []
        self.context: Dict[str, str] = {}
        self.profiled: List[str] = []
        self.components: List[str] = []

    def _record(self, level: str):
        def write(message: str, pairs: List[Tuple[str, str]]) -> None:
            self.records.append((level, message, dict(pairs)))

        return write

    def __getattr__(self, name: str) -> Any:
        if name.endswith("_with"):
            return self._record(name[: -len("_with")])
        raise AttributeError(name)

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        self.components.append(name)
        yield


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> Dict[str, RecordingLogger]:
    loggers: Dict[str, RecordingLogger] = {}

    def fake_get_logger(name: str | None = None) -> RecordingLogger:
        return loggers.setdefault(name or telemetry.ROOT_LOGGER, RecordingLogger())

    monkeypatch.setattr(telemetry, "get_logger", fake_get_logger)
    return loggers


def test_state_event_logs_debug_pairs(recorder: Dict[str, RecordingLogger]) -> None:
    telemetry.state_event("buffer_created", 3, shiftwidth=4)

    level, message, data = recorder[telemetry.STATE_LOGGER].records[0]
    assert level == "debug"
    assert message == "event::state.buffer_created"
    assert data == {"event": "state.buffer_created", "buffer": "3", "shiftwidth": "4"}


def test_guard_failure_splits_context_from_traceback(
    recorder: Dict[str, RecordingLogger]
) -> None:
    guard = CallbackGuard(trigger=OneShotTrigger())
    guard.activate()

    def explode() -> None:
        raise KeyError("missing")

    guard.call("[win 1 buf 2]", explode)
    guard.call("[win 1 buf 2]", explode)

    records = recorder[telemetry.GUARD_LOGGER].records
    assert len(records) == 1
    level, message, data = records[0]
    assert (level, message) == ("error", "event::guard.failure")
    assert data["context"] == "[win 1 buf 2]"
    assert "KeyError: 'missing'" in data["traceback"]


def test_span_scopes_metadata_and_reports_failures(
    recorder: Dict[str, RecordingLogger]
) -> None:
    with telemetry.span("render::viewport", component="engine", metadata={"buffer": 1}):
        log = recorder[telemetry.ROOT_LOGGER]
        assert log.context == {"buffer": "1"}

    with pytest.raises(ValueError):
        with telemetry.span("engine::setup"):
            raise ValueError("bad option")

    assert log.context == {}
    assert log.profiled == ["render::viewport", "engine::setup"]
    assert log.components == ["engine"]
    assert log.records == [
        ("error", "span::fail", {"span": "engine::setup", "reason": "bad option"})
    ]


def test_preset_settings_honour_log_file_override(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("INDENT_GUIDE_LOG_FILE", "/tmp/guides.log")

    production = telemetry.preset_settings("Production")
    development = telemetry.preset_settings("development")

    assert production.log_file == "/tmp/guides.log"
    assert production.console is False
    assert development.log_file == ""
    assert development.level == "DEBUG"
    with pytest.raises(ValueError):
        telemetry.preset_settings("verbose")


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDENT_GUIDE_LOG_LEVEL", "info")
    monkeypatch.setenv("INDENT_GUIDE_LOG_BUFFERED", "yes")
    monkeypatch.delenv("INDENT_GUIDE_LOG_BUFFER_SIZE", raising=False)
    monkeypatch.setenv("INDENT_GUIDE_PROFILE", "1")

    settings = telemetry.LogSettings.from_env()

    assert settings.level == "INFO"
    assert settings.buffer_size == 2048
    assert settings.profiling is True


def test_configure_rejects_conflicting_sources() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="development", settings=telemetry.LogSettings())
