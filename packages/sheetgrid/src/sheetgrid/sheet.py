"""DataSheet: keyboard, pointer and clipboard interaction over a cell matrix.

The host owns the matrix and re-supplies it through :meth:`DataSheet.update`
after applying change notifications. The sheet only owns transient
interaction state: the selection range (unless the host controls it) and
the :data:`~sheetgrid.editing.InteractionState`.

Input arrives in three ways:

- raw terminal data through :meth:`DataSheet.handle_input`;
- pointer gestures through :meth:`mouse_down`, :meth:`mouse_over`,
  :meth:`mouse_up`, :meth:`double_click` and :meth:`context_menu`;
- document events (outside clicks, pointer releases, clipboard events)
  while the sheet is engaged.
"""

from __future__ import annotations

import dataclasses
import logging
from functools import partial
from typing import Any, Callable, Iterator

from sheetgrid.cell import DataCell
from sheetgrid.cells import Matrix, cell_at, cell_field, is_read_only
from sheetgrid.clipboard import default_parse_paste, get_clipboard, serialize_cells
from sheetgrid.config import SheetOptions
from sheetgrid.coords import Coordinate, Range, contains
from sheetgrid.document import Engagement, get_document
from sheetgrid.editing import IDLE, SELECTING, Editing, InteractionState, Selecting, editing_at
from sheetgrid.events import ClipboardEvent, ClipboardEventType, PointerEvent
from sheetgrid.keybindings import GridAction, GridKeybindingsManager, get_grid_keybindings
from sheetgrid.keys import BRACKETED_PASTE_END, BRACKETED_PASTE_START, KeyPress, is_edit_trigger, parse_key
from sheetgrid.navigation import DOWN, LEFT, RIGHT, UP, Offset, navigate
from sheetgrid.notifier import ChangeNotifier, ChangeRecord
from sheetgrid.renderers import (
    RowProps,
    SheetProps,
    default_sheet_renderer,
    make_cell_renderer,
    make_row_renderer,
    sheet_class_names,
)
from sheetgrid.scheduler import Scheduler
from sheetgrid.selection import KEEP, ControlledSelection, Keep, make_selection

logger = logging.getLogger(__name__)

_MOVE_ACTIONS: tuple[tuple[GridAction, Offset], ...] = (
    ("navigateUp", UP),
    ("navigateDown", DOWN),
    ("navigateLeft", LEFT),
    ("navigateRight", RIGHT),
)

_EXTEND_ACTIONS: tuple[tuple[GridAction, Offset], ...] = (
    ("extendUp", UP),
    ("extendDown", DOWN),
    ("extendLeft", LEFT),
    ("extendRight", RIGHT),
)

_CLIPBOARD_ACTIONS: tuple[tuple[GridAction, ClipboardEventType], ...] = (
    ("copy", "copy"),
    ("cut", "cut"),
    ("paste", "paste"),
)


class DataSheet:
    """Spreadsheet grid interaction engine."""

    def __init__(self, data: Matrix, options: SheetOptions) -> None:
        self._data = data
        self.options = options
        self.document = options.document or get_document()
        self.clipboard = options.clipboard or get_clipboard()
        self.scheduler = options.scheduler or Scheduler()
        self.keybindings = (
            GridKeybindingsManager(options.keybindings)
            if options.keybindings is not None
            else get_grid_keybindings()
        )

        self._selection = make_selection(options.controlled, options.selected, options.on_select)
        self._notifier = ChangeNotifier(
            options.on_change, options.on_cells_changed, options.on_paste
        )
        self._state: InteractionState = IDLE

        self._cells: dict[Any, DataCell] = {}
        self._by_coord: dict[Coordinate, DataCell] = {}
        self._syncing = False
        self._resync = False

        # Released on pointer release
        self._drag = Engagement(self.document, {"mouseup": self._on_mouse_up}, name="drag")
        # Released on outside click or unmount
        self._page = Engagement(
            self.document,
            {
                "mousedown": self._page_click,
                "cut": self.handle_cut,
                "copy": self.handle_copy,
                "paste": self.handle_paste,
            },
            name="page",
        )

        self.focused = False
        self._sync_cells()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def data(self) -> Matrix:
        return self._data

    @property
    def controlled(self) -> bool:
        return self._selection.controlled

    @property
    def selection(self) -> Range:
        return self._selection.range

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def editing(self) -> Coordinate | None:
        return editing_at(self._state)

    @property
    def selecting(self) -> bool:
        return isinstance(self._state, Selecting)

    @property
    def engaged(self) -> bool:
        return self._page.active

    def is_selected(self, row: int, col: int) -> bool:
        return contains(self._selection.range.rect(), Coordinate(row, col))

    def is_editing(self, row: int, col: int) -> bool:
        return self.editing == Coordinate(row, col)

    def is_clearing(self, row: int, col: int) -> bool:
        state = self._state
        return isinstance(state, Editing) and state.clearing and state.at == Coordinate(row, col)

    def cell(self, row: int, col: int) -> DataCell | None:
        return self._by_coord.get(Coordinate(row, col))

    def cells(self) -> Iterator[DataCell]:
        return iter(list(self._by_coord.values()))

    def contains(self, target: Any) -> bool:
        """Whether *target* is this sheet or one of its cells."""
        return target is self or (isinstance(target, DataCell) and target.sheet is self)

    # ------------------------------------------------------------------
    # Host updates
    # ------------------------------------------------------------------

    def update(
        self,
        data: Matrix | None = None,
        selected: Range | None | Keep = KEEP,
    ) -> None:
        """Re-supply the matrix and, for a host-owned selection, the range."""
        if data is not None:
            self._data = data
        if not isinstance(selected, Keep) and isinstance(self._selection, ControlledSelection):
            self._selection.receive(selected)
        self._sync_cells()
        self.invalidate()

    def unmount(self) -> None:
        """Tear down cells and detach every document listener."""
        self._drag.release()
        self._page.release()
        for adapter in self._cells.values():
            adapter.teardown()
        self._cells = {}
        self._by_coord = {}
        self._state = IDLE
        self._selection.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _set_state(
        self,
        state: InteractionState | None = None,
        *,
        start: Coordinate | None | Keep = KEEP,
        end: Coordinate | None | Keep = KEEP,
    ) -> None:
        if state is not None and state != self._state:
            logger.debug("%s -> %s", self._state, state)
            self._state = state
        if not isinstance(start, Keep) or not isinstance(end, Keep):
            self._selection.set_range(start, end)
        self._sync_cells()
        self.invalidate()

    def _sync_cells(self) -> None:
        # Cells call back into the sheet while receiving props; those calls
        # only request another pass.
        if self._syncing:
            self._resync = True
            return
        self._syncing = True
        try:
            while True:
                self._resync = False
                self._reconcile()
                if not self._resync:
                    break
        finally:
            self._syncing = False

    def _reconcile(self) -> None:
        key_fn = self.options.key_fn
        stale = dict(self._cells)
        fresh: dict[Any, DataCell] = {}
        by_coord: dict[Coordinate, DataCell] = {}
        for i, row in enumerate(self._data):
            row_key = key_fn(i) if key_fn else i
            for j, cell in enumerate(row):
                coord = Coordinate(i, j)
                key = cell_field(cell, "key")
                if key is None or key in fresh:
                    key = (row_key, j)
                adapter = stale.pop(key, None) or DataCell(self)
                fresh[key] = adapter
                by_coord[coord] = adapter
                state = self._state
                is_editing = isinstance(state, Editing) and state.at == coord
                adapter.receive(
                    i,
                    j,
                    cell,
                    selected=contains(self._selection.range.rect(), coord),
                    editing=is_editing,
                    clearing=is_editing and state.clearing,
                    forced=is_editing and state.forced,
                )
        self._cells = fresh
        self._by_coord = by_coord
        for adapter in stale.values():
            adapter.teardown()

    def _revert(self, at: Coordinate | None = None) -> None:
        state = self._state
        if isinstance(state, Editing) and (at is None or state.at == at):
            self._set_state(IDLE)
        self.focused = True

    def _on_cell_change(self, row: int, col: int, value: Any) -> None:
        cell = cell_at(self._data, row, col)
        logger.debug("cell (%d, %d) changed", row, col)
        self._notifier.notify_edit(ChangeRecord(row, col, value, cell))
        self._revert(Coordinate(row, col))

    def _editing_cell(self) -> DataCell | None:
        at = editing_at(self._state)
        return self._by_coord.get(at) if at is not None else None

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def mouse_down(self, row: int, col: int, shift: bool = False) -> None:
        """Pointer pressed on (row, col); the event then reaches the document."""
        adapter = self.cell(row, col)
        event = PointerEvent("mousedown", target=adapter or self, shift=shift)
        if adapter is not None:
            adapter.handle_mouse_down(event)
        self.document.dispatch_event(event)

    def mouse_over(self, row: int, col: int) -> None:
        adapter = self.cell(row, col)
        if adapter is not None:
            adapter.handle_mouse_over(PointerEvent("mouseover", target=adapter))

    def mouse_up(self) -> None:
        self.document.dispatch_event(PointerEvent("mouseup", target=self))

    def double_click(self, row: int, col: int) -> None:
        adapter = self.cell(row, col)
        if adapter is not None:
            adapter.handle_double_click(PointerEvent("dblclick", target=adapter))

    def context_menu(self, row: int, col: int, event: Any = None) -> None:
        adapter = self.cell(row, col)
        if adapter is not None:
            adapter.handle_context_menu(event or PointerEvent("contextmenu", target=adapter))

    def select(self, start: Coordinate, end: Coordinate | None = None) -> None:
        """Select a range without a pointer and engage the sheet."""
        self.document.dispatch_event(PointerEvent("mousedown", target=self))
        self._set_state(IDLE, start=start, end=end or start)
        self._page.acquire()

    def _on_mouse_down(self, row: int, col: int, event: PointerEvent) -> None:
        coord = Coordinate(row, col)
        state = self._state
        if isinstance(state, Editing) and state.at == coord:
            next_state: InteractionState = dataclasses.replace(state, forced=True)
        else:
            next_state = SELECTING
        start = self._selection.range.start if event.shift else coord
        self._set_state(next_state, start=start or coord, end=coord)
        self._drag.acquire()
        self._page.acquire()

    def _on_mouse_over(self, row: int, col: int) -> None:
        if isinstance(self._state, Selecting):
            self._set_state(end=Coordinate(row, col))

    def _on_mouse_up(self, event: PointerEvent) -> None:
        if isinstance(self._state, Selecting):
            self._set_state(IDLE)
        self._drag.release()

    def _on_double_click(self, row: int, col: int) -> None:
        cell = cell_at(self._data, row, col)
        if cell is not None and not is_read_only(cell):
            self._set_state(Editing(Coordinate(row, col), clearing=False, forced=True))

    def _on_context_menu(self, event: Any, row: int, col: int) -> None:
        if self.options.on_context_menu:
            self.options.on_context_menu(event, cell_at(self._data, row, col), row, col)

    def _page_click(self, event: PointerEvent) -> None:
        if self.contains(event.target):
            return
        logger.debug("outside click, resetting")
        self._drag.release()
        self._page.release()
        self._selection.reset()
        self._set_state(IDLE)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_input(self, data: str) -> bool:
        """Handle raw terminal input. Returns ``False`` when left to the host."""
        if data.startswith(BRACKETED_PASTE_START):
            text = data[len(BRACKETED_PASTE_START) :]
            if text.endswith(BRACKETED_PASTE_END):
                text = text[: -len(BRACKETED_PASTE_END)]
            return self._paste_text(text)

        key = parse_key(data)
        editing = self._editing_cell()
        if editing is not None:
            content = editing.content()
            if content.kind == "component":
                handler = getattr(content.delegate, "handle_input", None)
                if handler is not None:
                    handler(data)
                if key is not None:
                    self._handle_component_key(key)
                return True
            if key is not None and self.keybindings.matches(key, "paste"):
                editing.insert(self.clipboard.get_text())
                return True
            return editing.handle_input(data)

        if key is None:
            return False
        for action, event_type in _CLIPBOARD_ACTIONS:
            if self.keybindings.matches(key, action):
                return self._dispatch_clipboard(event_type)
        return self.handle_key(key)

    def handle_key(self, key: KeyPress) -> bool:
        """Key press while no cell is being edited."""
        start = self._selection.range.start
        if start is None or key.ctrl:
            return False
        if isinstance(self._state, Editing):
            return False

        kb = self.keybindings
        if self._keyboard_cell_movement(key):
            return True
        current = cell_at(self._data, start.row, start.col)
        if kb.matches(key, "clearCells"):
            self.clear_selected_cells()
            return True
        if current is not None and not is_read_only(current):
            if kb.matches(key, "startEdit"):
                self._set_state(Editing(start, clearing=False, forced=True))
                return True
            if is_edit_trigger(key):
                self._set_state(Editing(start, clearing=True, forced=False))
                editing = self._editing_cell()
                if editing is not None:
                    editing.insert(key.text)
                return True
        return False

    def _keyboard_cell_movement(self, key: KeyPress, commit: bool = False) -> bool:
        editing = isinstance(self._state, Editing)
        if editing and not commit:
            return False
        start = self._selection.range.start
        current = cell_at(self._data, start.row, start.col) if start is not None else None
        if editing and cell_field(current, "component") is not None:
            return False

        kb = self.keybindings
        if kb.matches(key, "nextCell"):
            return self._navigate(RIGHT, jump_row=True)
        if kb.matches(key, "previousCell"):
            return self._navigate(LEFT, jump_row=True)
        for action, offset in _MOVE_ACTIONS:
            if kb.matches(key, action):
                return self._navigate(offset)
        for action, offset in _EXTEND_ACTIONS:
            if kb.matches(key, action):
                return self._navigate(offset, extend=True)
        if commit and kb.matches(key, "commit"):
            return self._navigate(DOWN)
        if commit and kb.matches(key, "commitUp"):
            return self._navigate(UP)
        return False

    def _navigate(self, offset: Offset, *, extend: bool = False, jump_row: bool = False) -> bool:
        target = navigate(
            self._data, self._selection.range, offset, extend=extend, jump_row=jump_row
        )
        if target is None:
            return False
        state = IDLE if isinstance(self._state, Editing) else self._state
        self._set_state(state, start=target.start, end=target.end)
        return True

    def _handle_component_key(self, key: KeyPress) -> None:
        at = editing_at(self._state)
        if at is None:
            return
        cell = cell_at(self._data, at.row, at.col)
        if cell_field(cell, "component") is None or cell_field(cell, "force_component", False):
            return

        kb = self.keybindings
        action: Callable[[], Any]
        if kb.matches(key, "revert"):
            action = self._revert
        elif kb.matches(key, "commit"):
            action = partial(self._navigate, DOWN)
        elif kb.matches(key, "commitUp"):
            action = partial(self._navigate, UP)
        elif kb.matches(key, "nextCell"):
            action = partial(self._navigate, RIGHT, jump_row=True)
        elif kb.matches(key, "previousCell"):
            action = partial(self._navigate, LEFT, jump_row=True)
        else:
            return

        # Runs after the component has handled the same key
        def finish() -> None:
            action()
            self.focused = True

        self.scheduler.call_soon(finish)

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def _dispatch_clipboard(self, event_type: ClipboardEventType) -> bool:
        if event_type == "paste":
            event = ClipboardEvent.paste(self.clipboard.get_text())
        else:
            event = ClipboardEvent(event_type)
        self.document.dispatch_event(event)
        if event_type != "paste" and event.default_prevented:
            self.clipboard.set_text(event.clipboard_data.get_data("text/plain"))
        return event.default_prevented

    def _paste_text(self, text: str) -> bool:
        editing = self._editing_cell()
        if editing is not None:
            editing.insert(text)
            return True
        event = self.document.dispatch_event(ClipboardEvent.paste(text))
        return event.default_prevented

    def clear_selected_cells(self) -> None:
        """Set every writable cell of the selection to ``""``."""
        rect = self._selection.range.rect()
        if rect is None:
            return
        records = []
        for coord in rect:
            cell = cell_at(self._data, coord.row, coord.col)
            if cell is not None and not is_read_only(cell):
                records.append(ChangeRecord(coord.row, coord.col, "", cell))
        self._notifier.notify_clear(records)
        self._revert()

    def handle_copy(self, event: ClipboardEvent) -> None:
        if isinstance(self._state, Editing):
            return
        rect = self._selection.range.rect()
        if rect is None:
            return
        event.prevent_default()
        text = serialize_cells(
            self._data, rect, self.options.value_renderer, self.options.data_renderer
        )
        event.clipboard_data.set_data("text/plain", text)

    def handle_cut(self, event: ClipboardEvent) -> None:
        if isinstance(self._state, Editing) or self._selection.range.is_empty:
            return
        self.handle_copy(event)
        self.clear_selected_cells()

    def handle_paste(self, event: ClipboardEvent) -> None:
        if isinstance(self._state, Editing):
            return
        rect = self._selection.range.rect()
        if rect is None:
            return
        event.prevent_default()
        parse = self.options.parse_paste or default_parse_paste
        rows = parse(event.clipboard_data.get_data("text/plain"))
        anchor = rect.top_left
        self._notifier.notify_paste(self._data, anchor, rows)
        width = max((len(row) for row in rows), default=0)
        if rows and width:
            self._set_state(end=anchor.offset(len(rows) - 1, width - 1))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        if self.options.request_render:
            self.options.request_render()

    def render(self, width: int) -> list[str]:
        options = self.options
        cell_renderer = options.cell_renderer or make_cell_renderer(options.theme)
        row_renderer = options.row_renderer or make_row_renderer(options.theme)
        sheet_renderer = options.sheet_renderer or default_sheet_renderer

        lines = []
        for i, row in enumerate(self._data):
            rendered = []
            for j in range(len(row)):
                adapter = self._by_coord.get(Coordinate(i, j))
                if adapter is not None:
                    rendered.append(cell_renderer(adapter.props()))
            key = options.key_fn(i) if options.key_fn else i
            lines.append(row_renderer(RowProps(row=i, cells=row, rendered=rendered, key=key)))
        return sheet_renderer(
            SheetProps(
                data=self._data,
                class_name=sheet_class_names(options.class_name, options.overflow),
                rows=lines,
                width=width,
            )
        )
