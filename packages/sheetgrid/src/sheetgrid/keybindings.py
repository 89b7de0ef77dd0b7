"""Grid keybindings manager."""

from __future__ import annotations

from typing import Literal

from sheetgrid.keys import KeyId, KeyPress, matches_key

GridAction = Literal[
    # Selection movement
    "navigateUp",
    "navigateDown",
    "navigateLeft",
    "navigateRight",
    "extendUp",
    "extendDown",
    "extendLeft",
    "extendRight",
    "nextCell",
    "previousCell",
    # Editing
    "startEdit",
    "commit",
    "commitUp",
    "revert",
    "clearCells",
    # Clipboard
    "copy",
    "cut",
    "paste",
    # Cell editor buffer
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineStart",
    "deleteToLineEnd",
]

GridKeybindingsConfig = dict[GridAction, KeyId | list[KeyId]]

DEFAULT_GRID_KEYBINDINGS: dict[GridAction, KeyId | list[KeyId]] = {
    # Selection movement
    "navigateUp": "up",
    "navigateDown": "down",
    "navigateLeft": "left",
    "navigateRight": "right",
    "extendUp": "shift+up",
    "extendDown": "shift+down",
    "extendLeft": "shift+left",
    "extendRight": "shift+right",
    "nextCell": "tab",
    "previousCell": "shift+tab",
    # Editing
    "startEdit": "enter",
    "commit": "enter",
    "commitUp": "shift+enter",
    "revert": "escape",
    "clearCells": ["delete", "backspace"],
    # Clipboard
    "copy": "ctrl+c",
    "cut": "ctrl+x",
    "paste": "ctrl+v",
    # Cell editor buffer
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteToLineStart": "ctrl+u",
    "deleteToLineEnd": "ctrl+k",
}


class GridKeybindingsManager:
    """Maps grid actions to the keys that trigger them."""

    def __init__(self, config: GridKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[GridAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: GridKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        for source in (DEFAULT_GRID_KEYBINDINGS, config):
            for action, keys in source.items():
                key_array = keys if isinstance(keys, list) else [keys]
                self._action_to_keys[action] = list(key_array)

    def matches(self, data: str | KeyPress, action: GridAction) -> bool:
        """Check if input triggers *action*."""
        return any(matches_key(data, key) for key in self._action_to_keys.get(action, []))

    def get_keys(self, action: GridAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: GridKeybindingsConfig) -> None:
        self._build_maps(config)


_global_grid_keybindings: GridKeybindingsManager | None = None


def get_grid_keybindings() -> GridKeybindingsManager:
    global _global_grid_keybindings
    if _global_grid_keybindings is None:
        _global_grid_keybindings = GridKeybindingsManager()
    return _global_grid_keybindings


def set_grid_keybindings(manager: GridKeybindingsManager) -> None:
    global _global_grid_keybindings
    _global_grid_keybindings = manager
