"""Snapshot-based undo/redo history for one open graph document.

The time machine keeps the document ``current`` snapshot plus two stacks:
``past`` (oldest first, bounded) and ``future`` (nearest redo first). Every
snapshot crossing a stack boundary is deep-copied so that later mutation of
the host's live objects can never rewrite history.

``undo`` and ``redo`` push the restored snapshot back into the host, which
answers with a state-change notification. That echo must not be recorded as a
new edit, so both set ``traveling`` and the next ``record`` call only clears
it.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from graph_history.document import Snapshot, equal_across_time
from graph_history.host import GraphHost
from graph_history.runtime import HistorySettings
from graph_history.runtime import telemetry

LOGGER_NAME = "graph_history.history"


class TimeMachine:
    """Owns the past/future stacks and the re-entrancy guard."""

    def __init__(
        self,
        present: Snapshot,
        host: GraphHost,
        *,
        settings: Optional[HistorySettings] = None,
    ) -> None:
        self.host = host
        self.settings = settings or HistorySettings()
        self._past: Deque[Snapshot] = deque()
        self._future: Deque[Snapshot] = deque()
        self._present = present.copy()
        self._traveling = False

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    @property
    def traveling(self) -> bool:
        return self._traveling

    @property
    def max_size(self) -> int:
        return self.settings.max_size

    @property
    def past_size(self) -> int:
        return len(self._past)

    @property
    def future_size(self) -> int:
        return len(self._future)

    @property
    def current(self) -> Snapshot:
        return self._present.copy()

    def past(self) -> List[Snapshot]:
        """Copies of the past stack, oldest first."""

        return [snapshot.copy() for snapshot in self._past]

    def future(self) -> List[Snapshot]:
        """Copies of the future stack, nearest redo first."""

        return [snapshot.copy() for snapshot in self._future]

    def record(self, snapshot: Snapshot) -> bool:
        """Observe the host's latest state; return True if it was committed."""

        if self._traveling:
            self._traveling = False
            return False

        if equal_across_time(snapshot, self._present):
            return False

        self._push_past(self._present)
        self._present = snapshot.copy()
        self._future.clear()
        telemetry.record_event(
            "history.commit",
            level="debug",
            data={"past": len(self._past), "nodes": len(snapshot.nodes)},
            logger_name=LOGGER_NAME,
        )
        return True

    def undo(self) -> None:
        if not self.can_undo:
            return

        with telemetry.span(
            "history::undo",
            logger_name=LOGGER_NAME,
            metadata={"past": len(self._past), "future": len(self._future)},
        ) as handle:
            self._traveling = True
            restored = self._past.pop()
            handle.add_metadata("restored_nodes", len(restored.nodes))
            self._future.appendleft(self._present.copy())
            self._present = restored.copy()
            self._restore_host()

    def redo(self) -> None:
        if not self.can_redo:
            return

        with telemetry.span(
            "history::redo",
            logger_name=LOGGER_NAME,
            metadata={"past": len(self._past), "future": len(self._future)},
        ) as handle:
            self._traveling = True
            restored = self._future.popleft()
            handle.add_metadata("restored_nodes", len(restored.nodes))
            self._push_past(self._present)
            self._present = restored.copy()
            self._restore_host()

    def get_past(self) -> Optional[Snapshot]:
        """Peek at the most recent past snapshot without changing anything."""

        if not self._past:
            return None
        return self._past[-1].copy()

    def _push_past(self, snapshot: Snapshot) -> None:
        self._past.append(snapshot.copy())
        while len(self._past) > self.settings.max_size:
            self._past.popleft()
            telemetry.record_event(
                "history.evict",
                level="debug",
                data={"max_size": self.settings.max_size},
                logger_name=LOGGER_NAME,
            )

    def _restore_host(self) -> None:
        target = self._present.copy()
        self.host.set_nodes(target.nodes)
        self.host.set_edges(target.edges)
        self.host.set_viewport(target.viewport, duration_ms=self.settings.transition_ms)


__all__ = ["TimeMachine"]
