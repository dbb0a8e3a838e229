"""Executable Textual app that hosts a graph document with undo/redo."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use graph_history.adapters.textual.app"
    ) from exc

from graph_history.document import Snapshot
from graph_history.history import HistorySession
from graph_history.host import InMemoryGraphHost
from graph_history.runtime import HistorySettings

from .controller import GraphUIHooks, TextualHistoryAdapter

MOVE_STEP = 20.0


def render_snapshot(snapshot: Snapshot) -> str:
    lines: List[str] = []
    vp = snapshot.viewport
    lines.append(f"viewport x={vp.x:g} y={vp.y:g} zoom={vp.zoom:g}")
    lines.append("")
    lines.append("nodes:")
    for node in snapshot.nodes:
        marker = "*" if node.selected else " "
        label = node.data.get("label", "")
        flags = " (editing)" if node.is_editing else ""
        lines.append(
            f" {marker} {node.id} @ ({node.position.x:g}, {node.position.y:g})"
            f" {label!r}{flags}"
        )
    lines.append("edges:")
    for edge in snapshot.edges:
        marker = "*" if edge.selected else " "
        lines.append(f" {marker} {edge.id}: {edge.source} -> {edge.target}")
    return "\n".join(lines)


@dataclass
class UIState:
    graph_text: str = ""
    status_text: str = ""


class GraphHistoryApp(App[None]):
    """Minimal Textual UI driving an in-memory graph host."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#graph-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("a", "add_node", "Add node"),
        ("c", "connect", "Connect"),
        ("d", "delete", "Delete"),
        ("n", "cycle_selection", "Select next"),
        ("e", "toggle_editing", "Edit label"),
        ("left", "move(-1, 0)", "Move"),
        ("right", "move(1, 0)", "Move"),
        ("up", "move(0, -1)", "Move"),
        ("down", "move(0, 1)", "Move"),
        ("p", "pan", "Pan"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, settings: Optional[HistorySettings] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._settings = settings
        self.graph_host = InMemoryGraphHost()
        self.session: HistorySession | None = None
        self.adapter: TextualHistoryAdapter | None = None
        self._graph_widget: Static | None = None
        self._status_widget: Static | None = None
        self._selected_id: Optional[str] = None
        self._node_counter = 0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="graph-area"):
            self._graph_widget = Static("", id="graph-view")
            yield self._graph_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.session = HistorySession(self.graph_host, settings=self._settings)
        hooks = GraphUIHooks(
            update_graph=self._update_graph,
            update_status=self._update_status,
        )
        self.adapter = TextualHistoryAdapter(self.session, hooks)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()
        if self.session:
            self.session.close()

    def on_key(self, event: events.Key) -> None:
        if self.adapter and self.adapter.handle_textual_key(event.key):
            self._sync_selection()
            event.stop()

    def action_add_node(self) -> None:
        self._node_counter += 1
        offset = MOVE_STEP * self._node_counter
        label = f"idea {self._node_counter}"
        node = self.graph_host.add_node(x=offset, y=offset, label=label)
        self._selected_id = node.id
        self.graph_host.select(node.id)

    def action_connect(self) -> None:
        nodes = self.graph_host.get_snapshot().nodes
        if len(nodes) < 2:
            return
        self.graph_host.add_edge(nodes[-2].id, nodes[-1].id)

    def action_delete(self) -> None:
        if self._selected_id is None:
            return
        self.graph_host.remove_node(self._selected_id)
        self._selected_id = None

    def action_cycle_selection(self) -> None:
        ids = [node.id for node in self.graph_host.get_snapshot().nodes]
        if not ids:
            return
        index = ids.index(self._selected_id) + 1 if self._selected_id in ids else 0
        self._selected_id = ids[index % len(ids)]
        self.graph_host.select(self._selected_id)

    def action_toggle_editing(self) -> None:
        node = self._selected_node()
        if node is None:
            return
        if node.is_editing:
            label = str(node.data.get("label", ""))
            self.graph_host.update_node_data(node.id, label=f"{label}!", editing=False)
        else:
            self.graph_host.update_node_data(node.id, editing=True)

    def action_move(self, dx: int, dy: int) -> None:
        node = self._selected_node()
        if node is None:
            return
        self.graph_host.move_node(
            node.id,
            node.position.x + dx * MOVE_STEP,
            node.position.y + dy * MOVE_STEP,
        )

    def action_pan(self) -> None:
        self.graph_host.pan(MOVE_STEP, 0)

    def _selected_node(self):
        if self._selected_id is None:
            return None
        return self.graph_host.get_snapshot().get_node(self._selected_id)

    def _sync_selection(self) -> None:
        if self._selected_node() is None:
            self._selected_id = None

    def _update_graph(self, snapshot: Snapshot) -> None:
        self._state.graph_text = render_snapshot(snapshot)
        if self._graph_widget:
            self._graph_widget.update(self._state.graph_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = HistorySettings.from_env()
    parser = argparse.ArgumentParser(description="Run the graph history Textual demo.")
    parser.add_argument(
        "--max-size",
        type=int,
        default=defaults.max_size,
        help=f"Undo depth (default: {defaults.max_size})",
    )
    parser.add_argument(
        "--transition-ms",
        type=int,
        default=defaults.transition_ms,
        help=f"Viewport animation on undo/redo (default: {defaults.transition_ms})",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    settings = HistorySettings(max_size=args.max_size, transition_ms=args.transition_ms)
    app = GraphHistoryApp(settings=settings)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
