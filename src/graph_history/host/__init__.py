"""Host editor boundary and the in-memory reference host."""

from .memory import InMemoryGraphHost
from .protocol import GraphHost, ObservableGraphHost, SnapshotListener, resolve_update

__all__ = [
    "GraphHost",
    "InMemoryGraphHost",
    "ObservableGraphHost",
    "SnapshotListener",
    "resolve_update",
]
