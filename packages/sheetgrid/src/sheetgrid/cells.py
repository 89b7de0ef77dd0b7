"""Cell descriptors and matrix access helpers.

The engine never interprets cell values. It only reads the recognized
descriptor fields (``read_only``, ``disable_events``, ``component``, ...)
and goes through the host's renderer callbacks for anything value related.
Hosts may use :class:`Cell`, any object exposing the same attributes, or a
plain mapping with the same keys.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from sheetgrid.coords import Coordinate

Overflow = Literal["wrap", "nowrap", "clip"]

# (cell, row, col) -> value
ValueRenderer = Callable[[Any, int, int], Any]
DataRenderer = Callable[[Any, int, int], Any]
AttributesRenderer = Callable[[Any, int, int], dict[str, Any]]

Matrix = Sequence[Sequence[Any]]


@dataclass
class Cell:
    """Default cell descriptor."""

    value: Any = None
    read_only: bool = False
    disable_events: bool = False
    component: Any = None
    force_component: bool = False
    data_editor: Any = None
    value_viewer: Any = None
    class_name: str | None = None
    overflow: Overflow | None = None
    width: int | str | None = None
    col_span: int | None = None
    row_span: int | None = None
    key: Any = None
    meta: dict[str, Any] = field(default_factory=dict)


def cell_field(cell: Any, name: str, default: Any = None) -> Any:
    """Read a recognized descriptor field from an object or a mapping."""
    if cell is None:
        return default
    if isinstance(cell, Mapping):
        return cell.get(name, default)
    return getattr(cell, name, default)


def is_read_only(cell: Any) -> bool:
    return bool(cell_field(cell, "read_only", False))


def events_disabled(cell: Any) -> bool:
    return bool(cell_field(cell, "disable_events", False))


def cell_at(matrix: Matrix, row: int, col: int) -> Any | None:
    """Return the descriptor at (row, col), or ``None`` when absent.

    Short rows and negative indices are treated as missing cells.
    """
    if row < 0 or col < 0 or row >= len(matrix):
        return None
    cells = matrix[row]
    if col >= len(cells):
        return None
    return cells[col]


def has_cell(matrix: Matrix, coord: Coordinate) -> bool:
    return cell_at(matrix, coord.row, coord.col) is not None


def render_value(cell: Any, row: int, col: int, value_renderer: ValueRenderer) -> Any:
    """Display value of a cell; ``None`` renders as an empty string."""
    value = value_renderer(cell, row, col)
    return "" if value is None else value


def render_data(
    cell: Any,
    row: int,
    col: int,
    value_renderer: ValueRenderer,
    data_renderer: DataRenderer | None,
) -> Any:
    """Editable value of a cell, falling back to the display value."""
    value = data_renderer(cell, row, col) if data_renderer else None
    if value is None:
        return render_value(cell, row, col, value_renderer)
    return value
