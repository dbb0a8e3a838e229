"""Snapshot-based undo/redo history for node/edge graph editors."""

__all__ = [
    "adapters",
    "document",
    "history",
    "host",
    "keymaps",
    "runtime",
]

__version__ = "0.1.0"
