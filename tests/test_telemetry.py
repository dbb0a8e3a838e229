from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

import pytest

from graph_history.document import Node, Snapshot
from graph_history.history import TimeMachine
from graph_history.host import InMemoryGraphHost
from graph_history.runtime import HistorySettings, telemetry


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        telemetry.configure(preset="verbose")


def test_config_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_loggers_are_cached_per_name() -> None:
    first = telemetry.get_logger("graph_history.tests")

    assert telemetry.get_logger("graph_history.tests") is first


def test_span_propagates_errors() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("tests::boom", logger_name="graph_history.tests"):
            raise RuntimeError("boom")


class RecordingLogger:
    """Stands in for a telelog logger and keeps every structured line."""

    def __init__(self) -> None:
        self.lines: List[Tuple[str, str, Dict[str, str]]] = []
        self.profiled: List[str] = []
        self.context: Dict[str, str] = {}

    def debug_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.lines.append(("debug", message, dict(pairs)))

    def error_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.lines.append(("error", message, dict(pairs)))

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    logger = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)
    return logger


def messages(logger: RecordingLogger) -> List[str]:
    return [message for _, message, _ in logger.lines]


def test_history_emits_commit_and_undo_span(recorder: RecordingLogger) -> None:
    host = InMemoryGraphHost()
    machine = TimeMachine(host.get_snapshot(), host)

    assert machine.record(Snapshot(nodes=[Node(id="n1", data={"label": "a"})]))
    machine.undo()

    assert messages(recorder) == ["event::history.commit", "span::done"]
    _, _, commit = recorder.lines[0]
    assert commit == {"event": "history.commit", "past": "1", "nodes": "1"}
    _, _, done = recorder.lines[1]
    assert done["span"] == "history::undo"
    assert done["restored_nodes"] == "0"
    assert recorder.profiled == ["history::undo"]
    assert recorder.context == {}


def test_history_reports_eviction(recorder: RecordingLogger) -> None:
    host = InMemoryGraphHost()
    machine = TimeMachine(
        host.get_snapshot(), host, settings=HistorySettings(max_size=1)
    )

    machine.record(Snapshot(nodes=[Node(id="a")]))
    machine.record(Snapshot(nodes=[Node(id="b")]))

    assert "event::history.evict" in messages(recorder)


def test_failed_span_reports_reason(recorder: RecordingLogger) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("tests::boom", metadata={"step": 3}) as handle:
            assert recorder.context == {"step": "3"}
            handle.add_metadata("stage", "late")
            raise RuntimeError("boom")

    (level, message, payload) = recorder.lines[-1]
    assert (level, message) == ("error", "span::fail")
    assert payload == {
        "span": "tests::boom",
        "step": "3",
        "stage": "late",
        "reason": "boom",
    }
    assert recorder.context == {}
