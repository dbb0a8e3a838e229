"""Telemetry and settings shared across the package."""

from .settings import HistorySettings, SettingsError

__all__ = ["HistorySettings", "SettingsError"]
