"""Per-cell interaction adapter.

A :class:`DataCell` exists for every cell of the matrix. It guards pointer
events of ``disable_events`` cells, owns the edit session and editor of the
cell being edited, and keeps the transient "updated" flag.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sheetgrid.cells import cell_field, events_disabled, render_data, render_value
from sheetgrid.coords import Coordinate
from sheetgrid.editing import EditSession, SessionPhase
from sheetgrid.events import PointerEvent
from sheetgrid.keys import KeyPress, parse_key
from sheetgrid.renderers import (
    CellContent,
    CellProps,
    EditorProps,
    ViewerProps,
    cell_class_names,
    render_component,
    resolve_content,
    width_style,
)
from sheetgrid.scheduler import Cancellable

if TYPE_CHECKING:
    from sheetgrid.sheet import DataSheet

logger = logging.getLogger(__name__)

_UNSET = object()

# Keys that end an edit session with a commit, whatever the editor
_COMMIT_ACTIONS = ("commit", "commitUp", "nextCell", "previousCell")
# Keys that commit only when the editor does not consume them
_ARROW_ACTIONS = (
    "navigateUp",
    "navigateDown",
    "navigateLeft",
    "navigateRight",
    "extendUp",
    "extendDown",
    "extendLeft",
    "extendRight",
)


class DataCell:
    def __init__(self, sheet: DataSheet) -> None:
        self._sheet = sheet
        self.row = -1
        self.col = -1
        self.cell: Any = None
        self.selected = False
        self.editing = False
        self.clearing = False
        self.forced = False
        self.updated = False
        self.session: EditSession | None = None
        self.editor: Any = None
        self._display: Any = _UNSET
        self._timer: Cancellable | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    @property
    def sheet(self) -> DataSheet:
        return self._sheet

    def initial_value(self) -> Any:
        return render_value(self.cell, self.row, self.col, self._sheet.options.value_renderer)

    def initial_data(self) -> Any:
        options = self._sheet.options
        return render_data(
            self.cell, self.row, self.col, options.value_renderer, options.data_renderer
        )

    # ------------------------------------------------------------------
    # Updates from the sheet
    # ------------------------------------------------------------------

    def receive(
        self,
        row: int,
        col: int,
        cell: Any,
        *,
        selected: bool = False,
        editing: bool = False,
        clearing: bool = False,
        forced: bool = False,
    ) -> None:
        """Take new props from the sheet and react to what changed."""
        was_editing = self.editing
        self.row, self.col, self.cell = row, col, cell
        self.selected = selected
        self.editing = editing
        self.clearing = clearing
        self.forced = forced

        display = self.initial_value()
        if self._display is not _UNSET and display != self._display:
            self._flash()
        self._display = display

        if editing and not was_editing:
            self._begin_session()
        elif was_editing and not editing:
            self._end_session()

    def teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.session = None
        self.editor = None

    def _flash(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self.updated = True
        self._timer = self._sheet.scheduler.call_later(
            self._sheet.options.updated_flash, self._end_flash
        )

    def _end_flash(self) -> None:
        self._timer = None
        self.updated = False
        self._sheet.invalidate()

    def _begin_session(self) -> None:
        value = "" if self.clearing else self.initial_data()
        self.session = EditSession(self.coordinate, value)
        self.editor = None
        content = self.content()
        if content.kind == "editor":
            self.editor = content.delegate(
                EditorProps(
                    cell=self.cell,
                    row=self.row,
                    col=self.col,
                    value=value,
                    on_change=self.change,
                    on_commit=self.commit,
                    on_revert=self.revert,
                    keybindings=self._sheet.keybindings,
                )
            )
        logger.debug("edit session opened at (%d, %d)", self.row, self.col)

    def _end_session(self) -> None:
        session, self.session, self.editor = self.session, None, None
        if session is None:
            return
        logger.debug("edit session closed at (%d, %d): %s", self.row, self.col, session.phase.value)
        if session.needs_flush(self.initial_data()):
            self._sheet._on_cell_change(self.row, self.col, session.buffer)

    # ------------------------------------------------------------------
    # Edit session
    # ------------------------------------------------------------------

    def change(self, value: Any) -> None:
        if self.session is not None:
            self.session.change(value)

    def commit(self, value: Any, key: KeyPress | None = None) -> None:
        """Commit *value*; an unchanged value reverts instead.

        With *key* the sheet then moves the selection the way that key
        moves it after a commit.
        """
        if self.session is None:
            return
        if value != self.initial_data():
            self.session.buffer = value
            self.session.phase = SessionPhase.COMMITTING
            self._sheet._on_cell_change(self.row, self.col, value)
        else:
            self.revert()
        if key is not None:
            self._sheet._keyboard_cell_movement(key, commit=True)

    def revert(self) -> None:
        if self.session is not None:
            self.session.phase = SessionPhase.REVERTING
        self._sheet._revert(self.coordinate)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key(self, key: KeyPress) -> bool:
        """Handle a commit or revert key. Returns ``False`` for other keys."""
        if self.session is None:
            return False
        kb = self._sheet.keybindings
        if kb.matches(key, "revert"):
            self.revert()
            return True
        eat_keys = self.forced or cell_field(self.cell, "component") is not None
        if any(kb.matches(key, action) for action in _COMMIT_ACTIONS) or (
            not eat_keys and any(kb.matches(key, action) for action in _ARROW_ACTIONS)
        ):
            self.commit(self.session.buffer, key)
            return True
        return False

    def handle_input(self, data: str) -> bool:
        key = parse_key(data)
        if key is not None and self.handle_key(key):
            return True
        handler = getattr(self.editor, "handle_input", None)
        if handler is None:
            return False
        return handler(data) is not False

    def insert(self, text: str) -> None:
        """Insert text into the editor, as typed or pasted."""
        insert = getattr(self.editor, "insert", None)
        if insert is not None:
            insert(text)
        elif self.editor is not None and hasattr(self.editor, "handle_input"):
            self.editor.handle_input(text)

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def handle_mouse_down(self, event: PointerEvent) -> None:
        if not events_disabled(self.cell):
            self._sheet._on_mouse_down(self.row, self.col, event)

    def handle_mouse_over(self, event: PointerEvent) -> None:
        if not events_disabled(self.cell):
            self._sheet._on_mouse_over(self.row, self.col)

    def handle_double_click(self, event: PointerEvent) -> None:
        if not events_disabled(self.cell):
            self._sheet._on_double_click(self.row, self.col)

    def handle_context_menu(self, event: PointerEvent) -> None:
        if not events_disabled(self.cell):
            self._sheet._on_context_menu(event, self.row, self.col)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def content(self) -> CellContent:
        options = self._sheet.options
        return resolve_content(self.cell, self.editing, options.data_editor, options.value_viewer)

    def column_width(self) -> int:
        width = cell_field(self.cell, "width")
        if isinstance(width, int) and width > 0:
            return width
        return self._sheet.options.column_width

    def props(self) -> CellProps:
        options = self._sheet.options
        width = self.column_width()
        content = self.content()
        if content.kind == "component":
            text = render_component(content.delegate, width)
        elif content.kind == "editor":
            text = render_component(self.editor, width) if self.editor is not None else ""
        else:
            viewed = content.delegate(
                ViewerProps(self.cell, self.row, self.col, self.initial_value())
            )
            text = render_component(viewed, width)
        attributes = (
            options.attributes_renderer(self.cell, self.row, self.col)
            if options.attributes_renderer
            else None
        )
        return CellProps(
            row=self.row,
            col=self.col,
            cell=self.cell,
            selected=self.selected,
            editing=self.editing,
            updated=self.updated,
            class_name=cell_class_names(self.cell, self.selected, self.editing, self.updated),
            style=width_style(self.cell),
            attributes=attributes or {},
            content=text,
            width=width,
            col_span=cell_field(self.cell, "col_span"),
            row_span=cell_field(self.cell, "row_span"),
        )

    def __repr__(self) -> str:
        return f"DataCell(row={self.row}, col={self.col}, editing={self.editing})"
