"""Structured history telemetry on top of telelog.

The history core only needs four calls:

``configure(...)`` -- adopt an explicit ``tl.Config`` or a named preset
``get_logger(name)`` -- cached logger bound to the active configuration
``record_event(name, ...)`` -- one ``event::<name>`` line with key/value pairs
``span(name, ...)`` -- profile a block, then report ``span::done`` or ``span::fail``

Without an explicit ``configure`` call the configuration is read lazily from
``GRAPH_HISTORY_*`` environment variables the first time a logger is needed.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "GRAPH_HISTORY_"
LOGGER_NAME = "graph_history"
DEFAULT_BUFFER_SIZE = 2048
_TRUTHY = frozenset({"1", "true", "yes", "on"})

_loggers: Dict[str, Any] = {}
_config: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value or None


def _env_flag(name: str) -> bool:
    value = _env(name)
    return value is not None and value.lower() in _TRUTHY


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _pairs(payload: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _text(value)) for key, value in payload.items()]


def _development() -> Any:
    config = tl.Config()
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_colored_output(True)
    config.with_json_format(False)
    return config


def _production() -> Any:
    config = tl.Config()
    config.with_min_level("INFO")
    config.with_console_output(False)
    config.with_file_output(_env("LOG_FILE") or "graph_history.log")
    config.with_buffering(True)
    return config


PRESETS: Mapping[str, Callable[[], Any]] = MappingProxyType(
    {"development": _development, "production": _production}
)


def _from_environment() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())

    console = not _env_flag("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR"))
    if _env_flag("LOG_JSON"):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or DEFAULT_BUFFER_SIZE))
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` and ``preset`` are mutually exclusive. With neither, the
    configuration is rebuilt from the environment. Cached loggers are dropped
    so the next ``get_logger`` call picks up the change.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        factory = PRESETS.get(preset.lower())
        if factory is None:
            raise ValueError(f"Unknown preset '{preset}'.")
        config = factory()
    elif config is None:
        config = _from_environment()

    # span() relies on logger.profile
    config.with_profiling(True)
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or LOGGER_NAME
    logger = _loggers.get(logger_name)
    if logger is None:
        if _config is None:
            configure()
        logger = tl.Logger.with_config(logger_name, _config)
        _loggers[logger_name] = logger
    return logger


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return

    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Collects metadata reported when the span closes."""

    logger: Any
    name: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def done(self) -> None:
        _emit(self.logger, "debug", "span::done", {"span": self.name, **self.metadata})

    def fail(self, reason: str) -> None:
        payload = {"span": self.name, **self.metadata, "reason": reason}
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block under ``name``.

    ``metadata`` is attached as logger context while the block runs. The
    handle's metadata, including anything added inside the block, is reported
    once the block ends. Exceptions are logged and re-raised.
    """

    logger = get_logger(logger_name)
    handle = SpanHandle(
        logger=logger,
        name=name,
        metadata={key: _text(value) for key, value in (metadata or {}).items()},
    )
    context_keys = tuple(handle.metadata)
    for key in context_keys:
        logger.add_context(key, handle.metadata[key])

    try:
        with logger.profile(name):
            yield handle
    except Exception as exc:
        handle.fail(str(exc))
        raise
    else:
        handle.done()
    finally:
        for key in context_keys:
            logger.remove_context(key)


__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
