"""Boundary types describing the host editor the history drives."""

from __future__ import annotations

from typing import Callable, List, Protocol, TypeVar, Union

from graph_history.document import Edge, Node, Snapshot, Viewport

T = TypeVar("T")

Update = Union[T, Callable[[T], T]]
SnapshotListener = Callable[[Snapshot], None]


def resolve_update(update: Update[T], previous: T) -> T:
    """Apply a setter argument: a literal value or a transform of ``previous``."""

    if callable(update):
        return update(previous)
    return update


class GraphHost(Protocol):
    """Entry points the history manager calls on the host canvas."""

    def get_snapshot(self) -> Snapshot:
        """Return the full document as currently rendered."""
        ...

    def set_nodes(self, nodes: Update[List[Node]]) -> None:
        """Replace the node list (or transform the previous one)."""
        ...

    def set_edges(self, edges: Update[List[Edge]]) -> None:
        """Replace the edge list (or transform the previous one)."""
        ...

    def set_viewport(self, viewport: Viewport, *, duration_ms: int = 0) -> None:
        """Move the camera, animating over ``duration_ms`` when positive."""
        ...


class ObservableGraphHost(GraphHost, Protocol):
    """A host that can report its own state changes."""

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        ...


__all__ = [
    "GraphHost",
    "ObservableGraphHost",
    "SnapshotListener",
    "Update",
    "resolve_update",
]
