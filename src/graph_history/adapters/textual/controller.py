"""Hook-based adapter that wires a HistorySession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Mapping, Optional

from graph_history.document import Snapshot
from graph_history.history import HistorySession
from graph_history.keymaps import REDO, UNDO, KeyStroke, resolve_action


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class GraphUIHooks:
    """Callbacks invoked by the adapter to update host widgets."""

    update_graph: Callable[[Snapshot], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualHistoryAdapter:
    """Bridges key events and host notifications to a Textual-friendly surface."""

    def __init__(
        self,
        session: HistorySession,
        hooks: GraphUIHooks,
        *,
        bindings: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.bindings = bindings
        self._unsubscribe = session.host.subscribe(self._on_host_change)
        self._refresh()

    def handle_textual_key(self, key: str, *, modifiers: Iterable[str] = ()) -> bool:
        """Run the history action bound to ``key``; return True if consumed."""

        stroke = KeyStroke.parse(key)
        if modifiers:
            stroke = KeyStroke(stroke.key, stroke.modifiers + tuple(modifiers))
        action = resolve_action(stroke, self.bindings)
        self._log_state("key ->", key=stroke.token, action=action)
        if action is None:
            return False
        self.run_action(action)
        return True

    def run_action(self, action: str) -> None:
        if action == UNDO:
            self.session.undo()
        elif action == REDO:
            self.session.redo()
        else:
            raise ValueError(f"Unknown history action '{action}'")
        self._refresh()

    def close(self) -> None:
        self._unsubscribe()

    def status_text(self) -> str:
        machine = self.session.machine
        return (
            f"undo:{machine.past_size}/{machine.max_size} "
            f"redo:{machine.future_size}"
        )

    def _on_host_change(self, snapshot: Snapshot) -> None:
        self.hooks.update_graph(snapshot)
        self.hooks.update_status(self.status_text())

    def _refresh(self) -> None:
        self.hooks.update_graph(self.session.host.get_snapshot())
        self.hooks.update_status(self.status_text())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        machine = self.session.machine
        return {
            "can_undo": machine.can_undo,
            "can_redo": machine.can_redo,
            "traveling": machine.traveling,
        }


__all__ = ["GraphUIHooks", "TextualHistoryAdapter"]
