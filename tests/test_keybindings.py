"""Tests for env_swap.keybindings -- selection keybindings manager."""

from __future__ import annotations

import pytest

from env_swap.keybindings import (
    DEFAULT_SELECTION_KEYBINDINGS,
    SelectionKeybindingsManager,
    get_selection_keybindings,
    set_selection_keybindings,
)

KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_ENTER = "\r"
KEY_ESCAPE = "\x1b"


class TestDefaults:
    def test_has_all_actions(self) -> None:
        assert set(DEFAULT_SELECTION_KEYBINDINGS) == {
            "selectUp",
            "selectDown",
            "selectConfirm",
            "selectCancel",
            "quit",
        }

    @pytest.mark.parametrize(
        "data, action",
        [
            (KEY_UP, "selectUp"),
            ("k", "selectUp"),
            (KEY_DOWN, "selectDown"),
            ("j", "selectDown"),
            (KEY_ENTER, "selectConfirm"),
            (KEY_ESCAPE, "selectCancel"),
            ("q", "quit"),
            ("\x03", "selectCancel"),
        ],
    )
    def test_resolve(self, data: str, action: str) -> None:
        assert SelectionKeybindingsManager().resolve(data) == action

    def test_unbound_key(self) -> None:
        mgr = SelectionKeybindingsManager()
        assert mgr.resolve("x") is None
        assert mgr.resolve("\x1b[C") is None


class TestOverrides:
    def test_override_replaces_keys(self) -> None:
        mgr = SelectionKeybindingsManager({"quit": "x"})
        assert mgr.get_keys("quit") == ["x"]
        assert mgr.matches("x", "quit")
        assert not mgr.matches("q", "quit")

    def test_other_actions_keep_defaults(self) -> None:
        mgr = SelectionKeybindingsManager({"quit": "x"})
        assert mgr.get_keys("selectUp") == ["up", "k"]

    def test_set_config_rebuilds(self) -> None:
        mgr = SelectionKeybindingsManager({"quit": "x"})
        mgr.set_config({})
        assert mgr.get_keys("quit") == ["q"]

    def test_quit_wins_over_other_actions(self) -> None:
        mgr = SelectionKeybindingsManager({"selectDown": ["down", "q"]})
        assert mgr.resolve("q") == "quit"


class TestGlobalManager:
    def test_singleton_and_replace(self) -> None:
        original = get_selection_keybindings()
        assert get_selection_keybindings() is original
        custom = SelectionKeybindingsManager({"quit": "x"})
        try:
            set_selection_keybindings(custom)
            assert get_selection_keybindings() is custom
        finally:
            set_selection_keybindings(original)
