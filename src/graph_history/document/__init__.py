"""Snapshot model, codec and the history comparison policy."""

from .compare import comparable, equal_across_time
from .models import Edge, Node, Snapshot, SnapshotError, Viewport, XYPosition

__all__ = [
    "Edge",
    "Node",
    "Snapshot",
    "SnapshotError",
    "Viewport",
    "XYPosition",
    "comparable",
    "equal_across_time",
]
