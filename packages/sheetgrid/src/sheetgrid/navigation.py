"""Navigation: next coordinate for arrow, Tab and Enter gestures."""

from __future__ import annotations

from dataclasses import dataclass

from sheetgrid.cells import Matrix, has_cell
from sheetgrid.coords import Coordinate, Range


@dataclass(frozen=True)
class Offset:
    di: int
    dj: int

    def __bool__(self) -> bool:
        return bool(self.di or self.dj)


UP = Offset(-1, 0)
DOWN = Offset(1, 0)
LEFT = Offset(0, -1)
RIGHT = Offset(0, 1)


def _wrap_target(matrix: Matrix, start: Coordinate, offset: Offset) -> Coordinate:
    if offset.dj < 0:
        row = start.row - 1
        width = len(matrix[row]) if 0 <= row < len(matrix) else 0
        return Coordinate(row, width - 1)
    return Coordinate(start.row + 1, 0)


def navigate(
    matrix: Matrix,
    current: Range,
    offset: Offset,
    *,
    extend: bool = False,
    jump_row: bool = False,
) -> Range | None:
    """Range after moving by *offset*, or ``None`` when the move is a no-op.

    The move is accepted when ``start + offset`` is a cell of the matrix.
    With *extend* the anchor stays and the focus moves by the offset, unless
    that would carry the focus off the matrix. Without it both collapse onto
    the new coordinate. With *jump_row* a move
    past the end of a row continues on the first cell of the next row, and
    a move before its start on the last cell of the previous row. Row jumps
    never extend.
    """
    start, end = current.start, current.end
    if not offset or start is None or end is None:
        return None

    target = start.offset(offset.di, offset.dj)
    if has_cell(matrix, target):
        if extend and not jump_row:
            focus = end.offset(offset.di, offset.dj)
            # the focus never leaves the matrix
            if not has_cell(matrix, focus):
                return None
            return Range(start, focus)
        return Range(target, target)

    if jump_row:
        wrapped = _wrap_target(matrix, start, offset)
        if has_cell(matrix, wrapped):
            return Range(wrapped, wrapped)
    return None
