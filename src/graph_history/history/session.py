"""Per-document session wiring a host canvas to its time machine."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Callable, ContextManager, Optional

from graph_history.document import Snapshot
from graph_history.host import ObservableGraphHost
from graph_history.runtime import HistorySettings

from .time_machine import TimeMachine


class HistorySession:
    """Feeds settled host states into a :class:`TimeMachine`.

    States observed while a node is being dragged or a label is being edited
    are skipped; the state reported once the interaction finishes is the one
    that gets recorded.
    """

    def __init__(
        self,
        host: ObservableGraphHost,
        *,
        settings: Optional[HistorySettings] = None,
    ) -> None:
        self.host = host
        self.machine = TimeMachine(host.get_snapshot(), host, settings=settings)
        self._unsubscribe: Optional[Callable[[], None]] = host.subscribe(self.observe)

    @property
    def can_undo(self) -> bool:
        return self.machine.can_undo

    @property
    def can_redo(self) -> bool:
        return self.machine.can_redo

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def observe(self, snapshot: Snapshot) -> bool:
        if not snapshot.is_settled and not self.machine.traveling:
            return False
        return self.machine.record(snapshot)

    def undo(self) -> None:
        with self._host_batch():
            self.machine.undo()

    def redo(self) -> None:
        with self._host_batch():
            self.machine.redo()

    def get_past(self) -> Optional[Snapshot]:
        return self.machine.get_past()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _host_batch(self) -> ContextManager[object]:
        batch = getattr(self.host, "batch", None)
        if batch is None:
            return nullcontext()
        return batch()


__all__ = ["HistorySession"]
