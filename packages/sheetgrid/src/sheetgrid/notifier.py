"""Change notifications to the host.

Three notification tiers, chosen by which callbacks the host registered, in
order of preference:

1. ``on_cells_changed(edits[, additions])`` -- batched records.
2. ``on_paste(rows)`` -- raw pasted rows, only used for paste.
3. ``on_change(cell, row, col, value)`` -- once per affected cell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal

from sheetgrid.cells import Matrix, cell_at, is_read_only
from sheetgrid.coords import Coordinate

logger = logging.getLogger(__name__)

ChangeKind = Literal["edit", "addition"]


@dataclass(frozen=True)
class ChangeRecord:
    """One affected coordinate.

    Edits target an existing, writable cell (``cell`` is the descriptor
    before the change). Additions target a coordinate outside the current
    matrix and carry no cell.
    """

    row: int
    col: int
    value: Any
    cell: Any = None
    kind: ChangeKind = "edit"

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.row, self.col)

    @property
    def is_addition(self) -> bool:
        return self.kind == "addition"


@dataclass(frozen=True)
class PastedCell:
    """Tier 2 paste payload: the existing cell (if any) and the raw string."""

    cell: Any
    data: str


OnChange = Callable[[Any, int, int, Any], None]
OnCellsChanged = Callable[..., None]
OnPaste = Callable[[list[list[PastedCell]]], None]


class ChangeNotifier:
    def __init__(
        self,
        on_change: OnChange | None = None,
        on_cells_changed: OnCellsChanged | None = None,
        on_paste: OnPaste | None = None,
    ) -> None:
        self.on_change = on_change
        self.on_cells_changed = on_cells_changed
        self.on_paste = on_paste

    def notify_edit(self, record: ChangeRecord) -> None:
        """Report a single committed cell value."""
        if self.on_cells_changed:
            self.on_cells_changed([record])
        elif self.on_change:
            self.on_change(record.cell, record.row, record.col, record.value)

    def notify_clear(self, records: list[ChangeRecord]) -> None:
        """Report a cleared rectangle; *records* already exclude read-only cells."""
        logger.debug("clearing %d cells", len(records))
        if self.on_cells_changed:
            self.on_cells_changed(records)
        elif self.on_change:
            for record in records:
                self.on_change(record.cell, record.row, record.col, record.value)

    def notify_paste(
        self, matrix: Matrix, anchor: Coordinate, rows: list[list[str]]
    ) -> None:
        """Map a parsed paste block onto the matrix starting at *anchor*."""
        if self.on_cells_changed:
            edits: list[ChangeRecord] = []
            additions: list[ChangeRecord] = []
            for i, row in enumerate(rows):
                for j, value in enumerate(row):
                    r, c = anchor.row + i, anchor.col + j
                    cell = cell_at(matrix, r, c)
                    if cell is None:
                        additions.append(ChangeRecord(r, c, value, kind="addition"))
                    elif not is_read_only(cell):
                        edits.append(ChangeRecord(r, c, value, cell))
            logger.debug("paste: %d edits, %d additions", len(edits), len(additions))
            if additions:
                self.on_cells_changed(edits, additions)
            else:
                self.on_cells_changed(edits)
        elif self.on_paste:
            self.on_paste(
                [
                    [
                        PastedCell(cell_at(matrix, anchor.row + i, anchor.col + j), value)
                        for j, value in enumerate(row)
                    ]
                    for i, row in enumerate(rows)
                ]
            )
        elif self.on_change:
            for i, row in enumerate(rows):
                for j, value in enumerate(row):
                    r, c = anchor.row + i, anchor.col + j
                    cell = cell_at(matrix, r, c)
                    if cell is not None and not is_read_only(cell):
                        self.on_change(cell, r, c, value)
