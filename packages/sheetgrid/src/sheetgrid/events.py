"""Event objects passed between hosts, the document and grids."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

PointerEventType = Literal["mousedown", "mouseup", "mouseover", "dblclick", "contextmenu"]
ClipboardEventType = Literal["cut", "copy", "paste"]
EventType = Literal["mousedown", "mouseup", "cut", "copy", "paste"]


@dataclass
class PointerEvent:
    """Pointer gesture. ``target`` is whatever the host hit-tested."""

    type: PointerEventType
    target: Any = None
    shift: bool = False
    detail: Any = None


@dataclass
class ClipboardData:
    """Clipboard payload keyed by MIME type."""

    items: dict[str, str] = field(default_factory=dict)

    def get_data(self, fmt: str = "text/plain") -> str:
        return self.items.get(fmt, "")

    def set_data(self, fmt: str, data: str) -> None:
        self.items[fmt] = data


@dataclass
class ClipboardEvent:
    type: ClipboardEventType
    clipboard_data: ClipboardData = field(default_factory=ClipboardData)
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    @classmethod
    def paste(cls, text: str) -> ClipboardEvent:
        return cls("paste", ClipboardData({"text/plain": text}))
