import pytest

from graph_history.keymaps import (
    DEFAULT_BINDINGS,
    REDO,
    UNDO,
    KeyStroke,
    resolve_action,
)


def test_parse_normalizes_order_case_and_aliases() -> None:
    assert KeyStroke.parse("Shift+Ctrl+Z").token == "ctrl+shift+z"
    assert KeyStroke.parse("cmd+z").token == "meta+z"
    assert KeyStroke("z", ("control", "ctrl")).token == "ctrl+z"


def test_parse_rejects_empty_tokens() -> None:
    with pytest.raises(ValueError):
        KeyStroke.parse("+")
    with pytest.raises(ValueError):
        KeyStroke("")


@pytest.mark.parametrize(
    ("token", "action"),
    [
        ("ctrl+z", UNDO),
        ("meta+z", UNDO),
        ("ctrl+y", REDO),
        ("ctrl+shift+z", REDO),
        ("shift+meta+z", REDO),
        ("z", None),
        ("ctrl+x", None),
    ],
)
def test_default_resolution(token: str, action: str | None) -> None:
    assert resolve_action(KeyStroke.parse(token)) == action


def test_custom_bindings_replace_defaults() -> None:
    bindings = {"alt+u": UNDO}

    assert resolve_action(KeyStroke.parse("alt+u"), bindings) == UNDO
    assert resolve_action(KeyStroke.parse("ctrl+z"), bindings) is None


def test_default_bindings_are_read_only() -> None:
    with pytest.raises(TypeError):
        DEFAULT_BINDINGS["ctrl+u"] = UNDO  # type: ignore[index]
