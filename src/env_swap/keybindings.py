"""Selection keybindings manager.

Maps raw key input to the logical actions the selection screen understands.
Which action means what depends on the phase; see :mod:`env_swap.handler`.
"""

from __future__ import annotations

from typing import Literal

from env_swap.keys import KeyId, matches_key

SelectionAction = Literal[
    "selectUp",
    "selectDown",
    "selectConfirm",
    "selectCancel",
    "quit",
]

SelectionKeybindingsConfig = dict[SelectionAction, KeyId | list[KeyId]]

DEFAULT_SELECTION_KEYBINDINGS: dict[SelectionAction, KeyId | list[KeyId]] = {
    "selectUp": ["up", "k"],
    "selectDown": ["down", "j"],
    "selectConfirm": "enter",
    "selectCancel": ["escape", "ctrl+c"],
    "quit": "q",
}

# Resolution order when a key is bound to more than one action
_ACTION_ORDER: tuple[SelectionAction, ...] = (
    "quit",
    "selectCancel",
    "selectConfirm",
    "selectUp",
    "selectDown",
)


class SelectionKeybindingsManager:
    """Manages keybindings for the selection screen."""

    def __init__(
        self, config: SelectionKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[SelectionAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: SelectionKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_SELECTION_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: SelectionAction) -> bool:
        """Check if input matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return any(matches_key(data, key) for key in keys)

    def resolve(self, data: str) -> SelectionAction | None:
        """Return the action bound to *data*, or ``None``."""
        for action in _ACTION_ORDER:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: SelectionAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: SelectionKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


_global_selection_keybindings: SelectionKeybindingsManager | None = None


def get_selection_keybindings() -> SelectionKeybindingsManager:
    global _global_selection_keybindings
    if _global_selection_keybindings is None:
        _global_selection_keybindings = SelectionKeybindingsManager()
    return _global_selection_keybindings


def set_selection_keybindings(manager: SelectionKeybindingsManager | None) -> None:
    global _global_selection_keybindings
    _global_selection_keybindings = manager
