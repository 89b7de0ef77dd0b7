"""Default cell editor: a single-line buffer with a grapheme-aware cursor."""

from __future__ import annotations

from typing import Callable

from sheetgrid.keybindings import GridKeybindingsManager, get_grid_keybindings
from sheetgrid.keys import KeyPress, parse_key
from sheetgrid.utils import graphemes, is_whitespace_char, truncate_to_width, visible_width


class CellEditor:
    """Edit buffer of the cell being edited.

    Only buffer keys are handled here; commit and revert keys are decided by
    the cell before input reaches the editor. Every change of the value is
    reported through ``on_change``.
    """

    def __init__(
        self,
        value: str = "",
        keybindings: GridKeybindingsManager | None = None,
    ) -> None:
        self._value: str = value
        self._cursor: int = len(value)
        self._kb = keybindings
        self.on_change: Callable[[str], None] | None = None

    @property
    def cursor(self) -> int:
        return self._cursor

    def get_value(self) -> str:
        return self._value

    def set_value(self, value: str) -> None:
        self._value = value
        self._cursor = len(value)

    def handle_input(self, data: str | KeyPress) -> bool:
        """Apply one key to the buffer. Returns ``False`` for unhandled keys."""
        key = data if isinstance(data, KeyPress) else parse_key(data)
        if key is None:
            return False
        kb = self._kb or get_grid_keybindings()

        if kb.matches(key, "deleteCharBackward"):
            self._delete_backward()
        elif kb.matches(key, "deleteCharForward"):
            self._delete_forward()
        elif kb.matches(key, "deleteWordBackward"):
            self._delete_word_backward()
        elif kb.matches(key, "deleteToLineStart"):
            self._replace(self._value[self._cursor :], 0)
        elif kb.matches(key, "deleteToLineEnd"):
            self._replace(self._value[: self._cursor], self._cursor)
        elif kb.matches(key, "cursorLeft"):
            if self._cursor > 0:
                before = graphemes(self._value[: self._cursor])
                self._cursor -= len(before[-1])
        elif kb.matches(key, "cursorRight"):
            if self._cursor < len(self._value):
                after = graphemes(self._value[self._cursor :])
                self._cursor += len(after[0])
        elif kb.matches(key, "cursorLineStart"):
            self._cursor = 0
        elif kb.matches(key, "cursorLineEnd"):
            self._cursor = len(self._value)
        elif key.text:
            self.insert(key.text)
        else:
            return False
        return True

    def insert(self, text: str) -> None:
        """Insert *text* at the cursor; line breaks are dropped."""
        clean = text.replace("\r\n", "").replace("\r", "").replace("\n", "")
        if not clean:
            return
        value = self._value[: self._cursor] + clean + self._value[self._cursor :]
        self._replace(value, self._cursor + len(clean))

    def _replace(self, value: str, cursor: int) -> None:
        changed = value != self._value
        self._value = value
        self._cursor = cursor
        if changed and self.on_change:
            self.on_change(value)

    def _delete_backward(self) -> None:
        if self._cursor == 0:
            return
        width = len(graphemes(self._value[: self._cursor])[-1])
        self._replace(
            self._value[: self._cursor - width] + self._value[self._cursor :],
            self._cursor - width,
        )

    def _delete_forward(self) -> None:
        if self._cursor >= len(self._value):
            return
        width = len(graphemes(self._value[self._cursor :])[0])
        self._replace(
            self._value[: self._cursor] + self._value[self._cursor + width :],
            self._cursor,
        )

    def _delete_word_backward(self) -> None:
        if self._cursor == 0:
            return
        before = graphemes(self._value[: self._cursor])
        start = self._cursor
        while before and is_whitespace_char(before[-1]):
            start -= len(before.pop())
        while before and not is_whitespace_char(before[-1]):
            start -= len(before.pop())
        self._replace(self._value[:start] + self._value[self._cursor :], start)

    def render(self, width: int) -> list[str]:
        """One line with the cursor shown in reverse video."""
        if width <= 0:
            return [""]
        before = self._value[: self._cursor]
        after = graphemes(self._value[self._cursor :])
        at_cursor = after[0] if after else " "
        rest = "".join(after[1:])

        # Keep the cursor visible by dropping text from the left
        while before and visible_width(before) + visible_width(at_cursor) > width:
            before = "".join(graphemes(before)[1:])

        line = f"{before}\x1b[7m{at_cursor}\x1b[27m{rest}"
        return [truncate_to_width(line, width, "", pad=True)]
