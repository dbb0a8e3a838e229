"""Key strokes and the default undo/redo bindings."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

UNDO = "history.undo"
REDO = "history.redo"

_MODIFIER_ALIASES = {"control": "ctrl", "cmd": "meta", "command": "meta", "super": "meta"}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = (m.strip().lower() for m in modifiers if m.strip())
    values = tuple(_MODIFIER_ALIASES.get(m, m) for m in values)
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Parse ``"ctrl+shift+z"`` style tokens (the last part is the key)."""

        parts = [part for part in token.split("+") if part.strip()]
        if not parts:
            raise ValueError(f"cannot parse key token {token!r}")
        return cls(key=parts[-1].strip(), modifiers=tuple(parts[:-1]))


DEFAULT_BINDINGS: Mapping[str, str] = MappingProxyType(
    {
        KeyStroke.parse("ctrl+z").token: UNDO,
        KeyStroke.parse("meta+z").token: UNDO,
        KeyStroke.parse("ctrl+y").token: REDO,
        KeyStroke.parse("ctrl+shift+z").token: REDO,
        KeyStroke.parse("meta+shift+z").token: REDO,
    }
)


def resolve_action(
    stroke: KeyStroke, bindings: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    table = DEFAULT_BINDINGS if bindings is None else bindings
    return table.get(stroke.token)


__all__ = [
    "DEFAULT_BINDINGS",
    "KeyStroke",
    "REDO",
    "UNDO",
    "resolve_action",
]
