"""Clipboard text codec and clipboard backends.

Interchange format is plain text: columns separated by a horizontal tab,
rows by a newline. CRLF, LF and CR are all accepted when reading; LF is
written.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Protocol

import pyperclip

from sheetgrid.cells import DataRenderer, Matrix, ValueRenderer, cell_at
from sheetgrid.coords import Rect

logger = logging.getLogger(__name__)

PasteParser = Callable[[str], list[list[str]]]

_ROW_SPLIT_RE = re.compile(r"\r\n|\n|\r")


def default_parse_paste(text: str) -> list[list[str]]:
    """Split pasted text into rows of tab-separated string cells."""
    return [row.split("\t") for row in _ROW_SPLIT_RE.split(text)]


def _copy_value(
    cell: object,
    row: int,
    col: int,
    value_renderer: ValueRenderer,
    data_renderer: DataRenderer | None,
) -> str:
    if cell is None:
        return ""
    value = data_renderer(cell, row, col) if data_renderer else None
    if value is None or value == "":
        value = value_renderer(cell, row, col)
    return "" if value is None else str(value)


def serialize_cells(
    matrix: Matrix,
    rect: Rect,
    value_renderer: ValueRenderer,
    data_renderer: DataRenderer | None = None,
) -> str:
    """Serialize the cells of *rect* row-major for the clipboard.

    Each cell goes through *data_renderer* first and falls back to
    *value_renderer* when that yields nothing.
    """
    lines = []
    for row in range(rect.min_row, rect.max_row + 1):
        lines.append(
            "\t".join(
                _copy_value(cell_at(matrix, row, col), row, col, value_renderer, data_renderer)
                for col in range(rect.min_col, rect.max_col + 1)
            )
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class Clipboard(Protocol):
    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...


class MemoryClipboard:
    """Clipboard kept in process memory."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text


class SystemClipboard:
    """System clipboard through pyperclip.

    When no clipboard mechanism is available the failure is logged once and
    the clipboard keeps working in memory.
    """

    def __init__(self) -> None:
        self._fallback: MemoryClipboard | None = None

    def _degrade(self, exc: pyperclip.PyperclipException) -> MemoryClipboard:
        if self._fallback is None:
            logger.warning("System clipboard unavailable, using in-memory clipboard: %s", exc)
            self._fallback = MemoryClipboard()
        return self._fallback

    def get_text(self) -> str:
        if self._fallback is not None:
            return self._fallback.get_text()
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as exc:
            return self._degrade(exc).get_text()

    def set_text(self, text: str) -> None:
        if self._fallback is not None:
            self._fallback.set_text(text)
            return
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            self._degrade(exc).set_text(text)


_global_clipboard: Clipboard | None = None


def get_clipboard() -> Clipboard:
    global _global_clipboard
    if _global_clipboard is None:
        _global_clipboard = SystemClipboard()
    return _global_clipboard


def set_clipboard(clipboard: Clipboard) -> None:
    global _global_clipboard
    _global_clipboard = clipboard
