from __future__ import annotations

from typing import List

import pytest

from graph_history.adapters.textual import GraphUIHooks, TextualHistoryAdapter
from graph_history.document import Snapshot
from graph_history.history import HistorySession
from graph_history.host import InMemoryGraphHost


def make_adapter(
    graphs: List[Snapshot], statuses: List[str], logs: List[str] | None = None
) -> tuple[TextualHistoryAdapter, InMemoryGraphHost]:
    host = InMemoryGraphHost()
    session = HistorySession(host)
    hooks = GraphUIHooks(
        update_graph=graphs.append,
        update_status=statuses.append,
        log=(logs.append if logs is not None else lambda _line: None),
    )
    return TextualHistoryAdapter(session, hooks), host


def test_adapter_pushes_initial_view() -> None:
    graphs: List[Snapshot] = []
    statuses: List[str] = []
    make_adapter(graphs, statuses)

    assert graphs == [Snapshot.empty()]
    assert statuses == ["undo:0/50 redo:0"]


def test_undo_redo_keys_drive_the_session() -> None:
    graphs: List[Snapshot] = []
    statuses: List[str] = []
    adapter, host = make_adapter(graphs, statuses)
    host.add_node(node_id="n1")

    assert adapter.handle_textual_key("ctrl+z") is True
    assert graphs[-1].nodes == []
    assert statuses[-1] == "undo:0/50 redo:1"

    assert adapter.handle_textual_key("z", modifiers=("ctrl", "shift")) is True
    assert [n.id for n in graphs[-1].nodes] == ["n1"]
    assert statuses[-1] == "undo:1/50 redo:0"


def test_unbound_keys_are_not_consumed() -> None:
    graphs: List[Snapshot] = []
    statuses: List[str] = []
    adapter, host = make_adapter(graphs, statuses)
    host.add_node(node_id="n1")

    assert adapter.handle_textual_key("x") is False
    assert adapter.session.can_undo


def test_host_changes_refresh_status() -> None:
    graphs: List[Snapshot] = []
    statuses: List[str] = []
    _, host = make_adapter(graphs, statuses)

    host.add_node(node_id="n1")

    assert [n.id for n in graphs[-1].nodes] == ["n1"]
    assert statuses[-1] == "undo:1/50 redo:0"


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    adapter, _ = make_adapter([], [], logs)

    adapter.handle_textual_key("ctrl+z")

    assert any(line.startswith("key ->") for line in logs)
    assert "action='history.undo'" in logs[-1]


def test_unknown_action_is_rejected() -> None:
    adapter, _ = make_adapter([], [])

    with pytest.raises(ValueError):
        adapter.run_action("history.rewind")


def test_close_detaches_from_host() -> None:
    graphs: List[Snapshot] = []
    statuses: List[str] = []
    adapter, host = make_adapter(graphs, statuses)
    adapter.close()
    seen = len(graphs)

    host.add_node(node_id="n1")

    assert len(graphs) == seen
