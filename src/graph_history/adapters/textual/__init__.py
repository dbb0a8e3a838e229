"""Textual adapter; ``app`` additionally needs the ``textual`` extra."""

from .controller import GraphUIHooks, TextualHistoryAdapter

__all__ = ["GraphUIHooks", "TextualHistoryAdapter"]
