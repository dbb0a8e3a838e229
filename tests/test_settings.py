from __future__ import annotations

import pytest

from graph_history.runtime import HistorySettings, SettingsError
from graph_history.runtime.settings import DEFAULT_MAX_SIZE, DEFAULT_TRANSITION_MS


def test_defaults() -> None:
    settings = HistorySettings()

    assert settings.max_size == DEFAULT_MAX_SIZE
    assert settings.transition_ms == DEFAULT_TRANSITION_MS


def test_from_env_reads_prefixed_values() -> None:
    settings = HistorySettings.from_env(
        {"GRAPH_HISTORY_MAX_SIZE": "12", "GRAPH_HISTORY_TRANSITION_MS": "0"}
    )

    assert settings == HistorySettings(max_size=12, transition_ms=0)


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRAPH_HISTORY_MAX_SIZE", "7")
    monkeypatch.delenv("GRAPH_HISTORY_TRANSITION_MS", raising=False)

    settings = HistorySettings.from_env()

    assert settings.max_size == 7
    assert settings.transition_ms == DEFAULT_TRANSITION_MS


def test_blank_values_fall_back_to_defaults() -> None:
    settings = HistorySettings.from_env({"GRAPH_HISTORY_MAX_SIZE": "  "})

    assert settings.max_size == DEFAULT_MAX_SIZE


def test_non_integer_value_is_rejected() -> None:
    with pytest.raises(SettingsError) as excinfo:
        HistorySettings.from_env({"GRAPH_HISTORY_MAX_SIZE": "lots"})

    assert excinfo.value.key == "MAX_SIZE"


@pytest.mark.parametrize(
    "kwargs", [{"max_size": 0}, {"max_size": -5}, {"transition_ms": -1}]
)
def test_out_of_range_values_are_rejected(kwargs: dict) -> None:
    with pytest.raises(SettingsError):
        HistorySettings(**kwargs)
