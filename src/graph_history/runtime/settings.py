"""Environment-driven settings for history sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX

DEFAULT_MAX_SIZE = 50
DEFAULT_TRANSITION_MS = 500


class SettingsError(ValueError):
    """Raised when an environment override cannot be used."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


@dataclass(frozen=True, slots=True)
class HistorySettings:
    """Bounds and presentation knobs for one time machine."""

    max_size: int = DEFAULT_MAX_SIZE
    transition_ms: int = DEFAULT_TRANSITION_MS

    def __post_init__(self) -> None:
        if self.max_size < 1:
            raise SettingsError("max_size must be at least 1", key="MAX_SIZE")
        if self.transition_ms < 0:
            raise SettingsError(
                "transition_ms cannot be negative", key="TRANSITION_MS"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HistorySettings":
        env = os.environ if environ is None else environ
        return cls(
            max_size=_env_int(env, "MAX_SIZE", DEFAULT_MAX_SIZE),
            transition_ms=_env_int(env, "TRANSITION_MS", DEFAULT_TRANSITION_MS),
        )


def _env_int(env: Mapping[str, str], name: str, fallback: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return fallback
    try:
        return int(raw)
    except ValueError as exc:
        raise SettingsError(
            f"{ENV_PREFIX}{name} must be an integer, got {raw!r}", key=name
        ) from exc


__all__ = [
    "DEFAULT_MAX_SIZE",
    "DEFAULT_TRANSITION_MS",
    "HistorySettings",
    "SettingsError",
]
