"""Configuration of a sheet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from sheetgrid.cells import AttributesRenderer, DataRenderer, Overflow, ValueRenderer
from sheetgrid.clipboard import Clipboard, PasteParser
from sheetgrid.coords import Range
from sheetgrid.document import Document
from sheetgrid.keybindings import GridKeybindingsConfig
from sheetgrid.notifier import OnCellsChanged, OnChange, OnPaste
from sheetgrid.renderers import (
    CellRenderer,
    DataEditorFactory,
    RowRenderer,
    SheetRenderer,
    SheetTheme,
    ValueViewer,
)
from sheetgrid.scheduler import Scheduler
from sheetgrid.selection import SelectCallback

OVERFLOW_MODES: tuple[str, ...] = ("wrap", "nowrap", "clip")

# (event, cell, row, col)
ContextMenuCallback = Callable[[Any, Any, int, int], None]


@dataclass
class SheetOptions:
    """Host callbacks, render delegates and collaborators of a sheet.

    Only ``value_renderer`` is required. Collaborators left as ``None``
    (document, clipboard, scheduler, keybindings) fall back to the
    process-wide defaults.
    """

    value_renderer: ValueRenderer
    data_renderer: DataRenderer | None = None

    # Notifications
    on_change: OnChange | None = None
    on_cells_changed: OnCellsChanged | None = None
    on_paste: OnPaste | None = None
    on_select: SelectCallback | None = None
    on_context_menu: ContextMenuCallback | None = None
    request_render: Callable[[], None] | None = None

    parse_paste: PasteParser | None = None
    attributes_renderer: AttributesRenderer | None = None

    # Host-owned selection
    selected: Range | None = None
    controlled: bool = False

    # Render delegates
    sheet_renderer: SheetRenderer | None = None
    row_renderer: RowRenderer | None = None
    cell_renderer: CellRenderer | None = None
    value_viewer: ValueViewer | None = None
    data_editor: DataEditorFactory | None = None
    key_fn: Callable[[int], Any] | None = None
    class_name: str | None = None
    overflow: Overflow | None = None
    theme: SheetTheme = field(default_factory=SheetTheme)

    # Timing and layout
    updated_flash: float = 0.7
    column_width: int = 10

    # Collaborators
    keybindings: GridKeybindingsConfig | None = None
    clipboard: Clipboard | None = None
    scheduler: Scheduler | None = None
    document: Document | None = None

    def __post_init__(self) -> None:
        if not callable(self.value_renderer):
            raise TypeError("value_renderer must be callable")
        if self.overflow is not None and self.overflow not in OVERFLOW_MODES:
            raise ValueError(
                f"overflow must be one of {', '.join(OVERFLOW_MODES)}, got {self.overflow!r}"
            )
        if self.updated_flash < 0:
            raise ValueError("updated_flash must not be negative")
        if self.column_width <= 0:
            raise ValueError("column_width must be positive")
        if self.selected is not None:
            self.controlled = True
