"""Selection model: locally owned or delegated to the host.

The strategy is picked once per grid. Only the write path differs between
the two; reads always go through :attr:`SelectionModel.range`.
"""

from __future__ import annotations

from typing import Callable, Protocol

from sheetgrid.coords import EMPTY_RANGE, Coordinate, Range, contains

SelectCallback = Callable[[Range], None]


class Keep:
    def __repr__(self) -> str:
        return "KEEP"


KEEP = Keep()


class SelectionModel(Protocol):
    @property
    def controlled(self) -> bool: ...

    @property
    def range(self) -> Range: ...

    def set_range(
        self,
        start: Coordinate | None | Keep = KEEP,
        end: Coordinate | None | Keep = KEEP,
    ) -> None: ...

    def reset(self) -> None: ...


class LocalSelection:
    """Selection owned by the grid.

    ``on_select`` fires whenever the focus moves to a new, non-empty
    coordinate so hosts can observe the selection without owning it.
    """

    controlled = False

    def __init__(self, on_select: SelectCallback | None = None) -> None:
        self._range = EMPTY_RANGE
        self.on_select = on_select

    @property
    def range(self) -> Range:
        return self._range

    def set_range(
        self,
        start: Coordinate | None | Keep = KEEP,
        end: Coordinate | None | Keep = KEEP,
    ) -> None:
        previous_end = self._range.end
        self._range = Range(
            self._range.start if isinstance(start, Keep) else start,
            self._range.end if isinstance(end, Keep) else end,
        )
        new_end = self._range.end
        if new_end is not None and new_end != previous_end and self.on_select:
            self.on_select(self._range)

    def reset(self) -> None:
        self._range = EMPTY_RANGE


class ControlledSelection:
    """Selection owned by the host.

    Every write is forwarded to ``on_select`` with the full resulting range;
    the range only changes once the host echoes it back through
    :meth:`receive`.
    """

    controlled = True

    def __init__(
        self,
        selected: Range | None = None,
        on_select: SelectCallback | None = None,
    ) -> None:
        self._selected = selected
        self.on_select = on_select

    def receive(self, selected: Range | None) -> None:
        """Take the host's current selection (``None`` means unspecified)."""
        self._selected = selected

    @property
    def range(self) -> Range:
        return self._selected or EMPTY_RANGE

    def set_range(
        self,
        start: Coordinate | None | Keep = KEEP,
        end: Coordinate | None | Keep = KEEP,
    ) -> None:
        current = self.range
        resolved = Range(
            current.start if isinstance(start, Keep) or start is None else start,
            current.end if isinstance(end, Keep) or end is None else end,
        )
        if self.on_select:
            self.on_select(resolved)

    def reset(self) -> None:
        # Host-owned; outside clicks leave it alone.
        pass


def make_selection(
    controlled: bool,
    selected: Range | None = None,
    on_select: SelectCallback | None = None,
) -> SelectionModel:
    if controlled:
        return ControlledSelection(selected, on_select)
    return LocalSelection(on_select)


def is_selected(model: SelectionModel, coord: Coordinate) -> bool:
    return contains(model.range.rect(), coord)
