"""Coordinates, anchor/focus ranges and normalized rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, order=True)
class Coordinate:
    """One matrix position."""

    row: int
    col: int

    def offset(self, di: int, dj: int) -> Coordinate:
        return Coordinate(self.row + di, self.col + dj)


@dataclass(frozen=True)
class Range:
    """Selection range given by an anchor (``start``) and a focus (``end``).

    Either corner may be numerically greater than the other on either axis.
    Both are ``None`` before the first interaction.
    """

    start: Coordinate | None = None
    end: Coordinate | None = None

    @property
    def is_empty(self) -> bool:
        return self.start is None or self.end is None

    def rect(self) -> Rect | None:
        """Normalized rectangle, or ``None`` for an empty range."""
        return normalize(self)


EMPTY_RANGE = Range()


@dataclass(frozen=True)
class Rect:
    """Inclusive rectangle derived from a :class:`Range`."""

    min_row: int
    max_row: int
    min_col: int
    max_col: int

    @property
    def top_left(self) -> Coordinate:
        return Coordinate(self.min_row, self.min_col)

    @property
    def bottom_right(self) -> Coordinate:
        return Coordinate(self.max_row, self.max_col)

    @property
    def height(self) -> int:
        return self.max_row - self.min_row + 1

    @property
    def width(self) -> int:
        return self.max_col - self.min_col + 1

    def __contains__(self, coord: object) -> bool:
        return isinstance(coord, Coordinate) and contains(self, coord)

    def __iter__(self) -> Iterator[Coordinate]:
        return iterate(self)


def normalize(range_: Range) -> Rect | None:
    """Inclusive rectangle spanned by *range_*, or ``None`` while it is empty."""
    start, end = range_.start, range_.end
    if start is None or end is None:
        return None
    return Rect(
        min_row=min(start.row, end.row),
        max_row=max(start.row, end.row),
        min_col=min(start.col, end.col),
        max_col=max(start.col, end.col),
    )


def contains(rect: Rect | None, coord: Coordinate) -> bool:
    if rect is None:
        return False
    return (
        rect.min_row <= coord.row <= rect.max_row
        and rect.min_col <= coord.col <= rect.max_col
    )


def iterate(rect: Rect) -> Iterator[Coordinate]:
    """Yield every coordinate of *rect* in row-major order.

    Each call returns a fresh generator, so a rectangle can be walked any
    number of times.
    """
    for row in range(rect.min_row, rect.max_row + 1):
        for col in range(rect.min_col, rect.max_col + 1):
            yield Coordinate(row, col)
