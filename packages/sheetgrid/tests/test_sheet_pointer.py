"""Pointer gestures, document engagement and host-owned selection."""

from __future__ import annotations

from typing import Callable

from sheetgrid.coords import EMPTY_RANGE, Coordinate, Range
from sheetgrid.document import Document
from sheetgrid.editing import IDLE, SELECTING, Editing
from sheetgrid.events import PointerEvent
from sheetgrid.sheet import DataSheet

from conftest import Recorder, grid

SheetFactory = Callable[..., DataSheet]


def at(row: int, col: int) -> Range:
    return Range(Coordinate(row, col), Coordinate(row, col))


def outside_click(document: Document) -> None:
    document.dispatch_event(PointerEvent("mousedown", target=object()))


# ---------------------------------------------------------------------------
# Drag selection
# ---------------------------------------------------------------------------


class TestDragSelection:
    def test_mouse_down_selects_and_starts_selecting(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(1, 0)
        assert sheet.selection == at(1, 0)
        assert sheet.state == SELECTING
        assert sheet.selecting

    def test_drag_extends_focus(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_over(1, 1)
        assert sheet.selection == Range(Coordinate(0, 0), Coordinate(1, 1))

    def test_drag_backwards(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(1, 1)
        sheet.mouse_over(0, 0)
        assert sheet.selection == Range(Coordinate(1, 1), Coordinate(0, 0))
        assert sheet.is_selected(0, 1)

    def test_mouse_up_ends_selecting(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_over(0, 1)
        sheet.mouse_up()
        assert sheet.state == IDLE
        sheet.mouse_over(1, 1)
        assert sheet.selection == Range(Coordinate(0, 0), Coordinate(0, 1))

    def test_hover_without_press_is_ignored(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_over(1, 1)
        assert sheet.selection == EMPTY_RANGE

    def test_shift_click_keeps_anchor(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_up()
        sheet.mouse_down(1, 1, shift=True)
        assert sheet.selection == Range(Coordinate(0, 0), Coordinate(1, 1))

    def test_shift_click_without_selection_anchors_on_cell(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(1, 0, shift=True)
        assert sheet.selection == at(1, 0)

    def test_disabled_cell_ignores_pointer(self, make_sheet: SheetFactory) -> None:
        data = grid([["A", "B"], ["C", "D"]])
        data[0][1].disable_events = True
        sheet = make_sheet(data)
        sheet.mouse_down(0, 1)
        assert sheet.selection == EMPTY_RANGE
        sheet.mouse_down(0, 0)
        sheet.mouse_over(0, 1)
        assert sheet.selection == at(0, 0)

    def test_missing_cell_is_ignored(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.mouse_down(5, 5)
        assert sheet.selection == EMPTY_RANGE


# ---------------------------------------------------------------------------
# Engagement
# ---------------------------------------------------------------------------


class TestEngagement:
    def test_mouse_down_engages_page_and_drag(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        assert document.listener_count() == 0
        sheet.mouse_down(0, 0)
        assert sheet.engaged
        assert document.listener_count("mouseup") == 1
        assert document.listener_count("mousedown") == 1
        for event_type in ("cut", "copy", "paste"):
            assert document.listener_count(event_type) == 1

    def test_mouse_up_releases_drag_only(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_up()
        assert document.listener_count("mouseup") == 0
        assert document.listener_count("mousedown") == 1
        assert sheet.engaged

    def test_repeated_clicks_attach_once(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        for _ in range(3):
            sheet.mouse_down(0, 0)
        assert document.listener_count("mousedown") == 1
        assert document.listener_count("mouseup") == 1

    def test_outside_click_resets(self, make_sheet: SheetFactory, document: Document) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_over(1, 1)
        outside_click(document)
        assert sheet.selection == EMPTY_RANGE
        assert sheet.state == IDLE
        assert not sheet.engaged
        assert document.listener_count() == 0

    def test_click_inside_does_not_reset(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.mouse_up()
        document.dispatch_event(PointerEvent("mousedown", target=sheet))
        assert sheet.selection == at(0, 0)
        assert sheet.engaged

    def test_select_engages_without_pointer(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        sheet.select(Coordinate(0, 0), Coordinate(0, 1))
        assert sheet.selection == Range(Coordinate(0, 0), Coordinate(0, 1))
        assert sheet.engaged
        assert document.listener_count("mouseup") == 0

    def test_second_grid_disengages_first(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        first = make_sheet()
        second = make_sheet()
        first.mouse_down(0, 0)
        first.mouse_up()
        second.mouse_down(1, 1)
        assert not first.engaged
        assert first.selection == EMPTY_RANGE
        assert second.engaged
        assert second.selection == at(1, 1)
        assert document.listener_count("mousedown") == 1

    def test_unmount_detaches_everything(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.unmount()
        assert document.listener_count() == 0
        assert list(sheet.cells()) == []

    def test_unmount_twice(self, make_sheet: SheetFactory, document: Document) -> None:
        sheet = make_sheet()
        sheet.mouse_down(0, 0)
        sheet.unmount()
        sheet.unmount()
        assert document.listener_count() == 0


# ---------------------------------------------------------------------------
# Double click and context menu
# ---------------------------------------------------------------------------


class TestDoubleClick:
    def test_starts_edit_with_current_value(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.double_click(1, 1)
        assert sheet.state == Editing(Coordinate(1, 1), clearing=False, forced=True)
        cell = sheet.cell(1, 1)
        assert cell is not None and cell.session is not None
        assert cell.session.buffer == "D"

    def test_read_only_cell(self, make_sheet: SheetFactory) -> None:
        data = grid([["A"]])
        data[0][0].read_only = True
        sheet = make_sheet(data)
        sheet.double_click(0, 0)
        assert sheet.editing is None

    def test_disabled_cell(self, make_sheet: SheetFactory) -> None:
        data = grid([["A"]])
        data[0][0].disable_events = True
        sheet = make_sheet(data)
        sheet.double_click(0, 0)
        assert sheet.editing is None


class TestContextMenu:
    def test_callback_receives_cell(self, make_sheet: SheetFactory) -> None:
        on_context_menu = Recorder()
        sheet = make_sheet(on_context_menu=on_context_menu)
        sheet.context_menu(0, 1, event="evt")
        assert on_context_menu.calls == [("evt", sheet.data[0][1], 0, 1)]

    def test_default_event(self, make_sheet: SheetFactory) -> None:
        on_context_menu = Recorder()
        sheet = make_sheet(on_context_menu=on_context_menu)
        sheet.context_menu(1, 0)
        ((event, cell, row, col),) = on_context_menu.calls
        assert isinstance(event, PointerEvent)
        assert event.type == "contextmenu"
        assert (row, col) == (1, 0)

    def test_without_callback(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet()
        sheet.context_menu(0, 0)
        assert sheet.selection == EMPTY_RANGE

    def test_disabled_cell(self, make_sheet: SheetFactory) -> None:
        on_context_menu = Recorder()
        data = grid([["A"]])
        data[0][0].disable_events = True
        sheet = make_sheet(data, on_context_menu=on_context_menu)
        sheet.context_menu(0, 0)
        assert on_context_menu.count == 0


# ---------------------------------------------------------------------------
# Pointer while editing
# ---------------------------------------------------------------------------


class TestPointerWhileEditing:
    def test_click_on_edited_cell_keeps_editing(self, make_sheet: SheetFactory) -> None:
        on_change = Recorder()
        sheet = make_sheet(on_change=on_change)
        sheet.select(Coordinate(0, 0))
        sheet.handle_input("x")
        sheet.mouse_down(0, 0)
        assert sheet.state == Editing(Coordinate(0, 0), clearing=True, forced=True)
        # Arrows now move the caret instead of committing
        sheet.handle_input("\x1b[D")
        assert sheet.editing == Coordinate(0, 0)
        assert on_change.count == 0

    def test_click_elsewhere_commits_pending_buffer_once(
        self, make_sheet: SheetFactory
    ) -> None:
        on_change = Recorder()
        sheet = make_sheet(on_change=on_change)
        sheet.select(Coordinate(0, 0))
        sheet.handle_input("x")
        sheet.mouse_down(1, 1)
        assert on_change.calls == [(sheet.data[0][0], 0, 0, "x")]
        assert sheet.editing is None
        assert sheet.selection == at(1, 1)

    def test_click_elsewhere_unchanged_buffer_is_silent(
        self, make_sheet: SheetFactory
    ) -> None:
        on_change = Recorder()
        sheet = make_sheet(on_change=on_change)
        sheet.double_click(0, 0)
        sheet.mouse_down(1, 1)
        assert on_change.count == 0

    def test_outside_click_commits_pending_buffer_once(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        batched = Recorder()
        sheet = make_sheet(on_cells_changed=batched)
        sheet.select(Coordinate(1, 0))
        sheet.handle_input("q")
        outside_click(document)
        assert batched.count == 1
        ((records,),) = batched.calls
        assert [(r.row, r.col, r.value) for r in records] == [(1, 0, "q")]
        assert sheet.editing is None


# ---------------------------------------------------------------------------
# Host-owned selection
# ---------------------------------------------------------------------------


class TestControlledSelection:
    def test_range_comes_from_host(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet(selected=at(1, 1))
        assert sheet.controlled
        assert sheet.is_selected(1, 1)
        assert not sheet.is_selected(0, 0)

    def test_pointer_is_forwarded_not_applied(self, make_sheet: SheetFactory) -> None:
        on_select = Recorder()
        sheet = make_sheet(selected=at(1, 1), on_select=on_select)
        sheet.mouse_down(0, 0)
        assert on_select.calls == [(at(0, 0),)]
        assert sheet.selection == at(1, 1)

    def test_echoed_selection_applies(self, make_sheet: SheetFactory) -> None:
        sheet: DataSheet = make_sheet(
            selected=at(0, 0), on_select=lambda r: sheet.update(selected=r)
        )
        sheet.mouse_down(0, 0)
        sheet.mouse_over(1, 1)
        assert sheet.selection == Range(Coordinate(0, 0), Coordinate(1, 1))
        sheet.handle_input("\x1b[C")
        assert sheet.selection == Range(Coordinate(0, 1), Coordinate(0, 1))

    def test_host_update_moves_selection(self, make_sheet: SheetFactory) -> None:
        sheet = make_sheet(selected=at(0, 0))
        sheet.update(selected=at(1, 0))
        assert sheet.selection == at(1, 0)
        cell = sheet.cell(1, 0)
        assert cell is not None and cell.selected

    def test_controlled_without_initial_range(self, make_sheet: SheetFactory) -> None:
        on_select = Recorder()
        sheet = make_sheet(controlled=True, on_select=on_select)
        assert sheet.controlled
        assert sheet.selection == EMPTY_RANGE
        sheet.mouse_down(1, 1)
        assert on_select.calls == [(at(1, 1),)]

    def test_outside_click_leaves_host_selection(
        self, make_sheet: SheetFactory, document: Document
    ) -> None:
        sheet = make_sheet(selected=at(1, 1))
        sheet.mouse_down(1, 1)
        outside_click(document)
        assert sheet.selection == at(1, 1)
        assert not sheet.engaged
