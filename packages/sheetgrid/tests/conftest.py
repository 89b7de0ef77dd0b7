from __future__ import annotations

from typing import Any, Callable, Iterator

import pytest

from sheetgrid.cells import Cell
from sheetgrid.clipboard import MemoryClipboard
from sheetgrid.config import SheetOptions
from sheetgrid.document import Document
from sheetgrid.sheet import DataSheet


class ManualTimer:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose callbacks only run when the test says so."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def call_soon(self, callback: Callable[[], None]) -> ManualTimer:
        return self.call_later(0, callback)

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [t for t in self.pending if t.when <= self.now]
        for timer in due:
            self.timers.remove(timer)
            timer.callback()

    def run_soon(self) -> None:
        self.advance(0)


class Recorder:
    """Records every call made to it."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


def value_renderer(cell: Any, row: int, col: int) -> Any:
    return cell.value


def grid(rows: list[list[Any]]) -> list[list[Cell]]:
    """Matrix of :class:`Cell` from plain values."""
    return [[Cell(value=v) for v in row] for row in rows]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def document() -> Document:
    return Document()


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def make_sheet(
    scheduler: ManualScheduler, document: Document, clipboard: MemoryClipboard
) -> Iterator[Callable[..., DataSheet]]:
    sheets: list[DataSheet] = []

    def factory(data: Any = None, **kwargs: Any) -> DataSheet:
        if data is None:
            data = grid([["A", "B"], ["C", "D"]])
        kwargs.setdefault("value_renderer", value_renderer)
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("document", document)
        kwargs.setdefault("clipboard", clipboard)
        sheet = DataSheet(data, SheetOptions(**kwargs))
        sheets.append(sheet)
        return sheet

    yield factory
    for sheet in sheets:
        sheet.unmount()
