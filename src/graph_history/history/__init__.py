"""Undo/redo history for graph documents."""

from .session import HistorySession
from .time_machine import TimeMachine

__all__ = ["HistorySession", "TimeMachine"]
