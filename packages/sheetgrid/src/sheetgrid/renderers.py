"""Presentation delegates for a sheet rendered as terminal lines.

Delegates are plain callables receiving a props object. They make no
decisions about interaction state; everything they need is computed by the
grid and passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from sheetgrid.cells import cell_field, is_read_only
from sheetgrid.editor import CellEditor
from sheetgrid.keybindings import GridKeybindingsManager
from sheetgrid.utils import truncate_to_width

ContentKind = Literal["component", "editor", "viewer"]


# ---------------------------------------------------------------------------
# Props
# ---------------------------------------------------------------------------


@dataclass
class ViewerProps:
    cell: Any
    row: int
    col: int
    value: Any


@dataclass
class EditorProps:
    """Props handed to a data editor factory when an edit session starts.

    ``on_change`` must be called with every new buffer value. Editors that
    decide on their own when to finish may call ``on_commit(value)`` or
    ``on_revert()``.
    """

    cell: Any
    row: int
    col: int
    value: Any
    on_change: Callable[[Any], None]
    on_commit: Callable[..., None]
    on_revert: Callable[[], None]
    keybindings: GridKeybindingsManager | None = None


@dataclass
class CellProps:
    row: int
    col: int
    cell: Any
    selected: bool
    editing: bool
    updated: bool
    class_name: str
    style: dict[str, Any] | None
    attributes: dict[str, Any]
    content: str
    width: int
    col_span: int | None = None
    row_span: int | None = None


@dataclass
class RowProps:
    row: int
    cells: Any
    rendered: list[str]
    key: Any = None


@dataclass
class SheetProps:
    data: Any
    class_name: str
    rows: list[str]
    width: int


ValueViewer = Callable[[ViewerProps], Any]
DataEditorFactory = Callable[[EditorProps], Any]
CellRenderer = Callable[[CellProps], str]
RowRenderer = Callable[[RowProps], str]
SheetRenderer = Callable[[SheetProps], list[str]]


# ---------------------------------------------------------------------------
# Content resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CellContent:
    """What fills a cell this render: an override component, an editor or a viewer.

    ``delegate`` is the component itself, the editor factory, or the viewer.
    """

    kind: ContentKind
    delegate: Any


def resolve_content(
    cell: Any,
    editing: bool,
    data_editor: DataEditorFactory | None = None,
    value_viewer: ValueViewer | None = None,
) -> CellContent:
    component = cell_field(cell, "component")
    if component is not None and (
        (editing and not is_read_only(cell)) or cell_field(cell, "force_component", False)
    ):
        return CellContent("component", component)
    if editing:
        return CellContent(
            "editor", cell_field(cell, "data_editor") or data_editor or default_data_editor
        )
    return CellContent(
        "viewer", cell_field(cell, "value_viewer") or value_viewer or default_value_viewer
    )


def cell_class_names(
    cell: Any, selected: bool, editing: bool, updated: bool
) -> str:
    names = [
        cell_field(cell, "class_name"),
        "cell",
        cell_field(cell, "overflow"),
        selected and "selected",
        editing and "editing",
        is_read_only(cell) and "read-only",
        updated and "updated",
    ]
    return " ".join(name for name in names if name)


def sheet_class_names(class_name: str | None, overflow: str | None) -> str:
    return " ".join(name for name in ("data-grid", class_name, overflow) if name)


def width_style(cell: Any) -> dict[str, Any] | None:
    width = cell_field(cell, "width")
    return {"width": width} if width else None


def render_component(component: Any, width: int) -> str:
    """First line of a component exposing ``render(width)``, else its text."""
    render = getattr(component, "render", None)
    if callable(render):
        lines = render(width)
        return lines[0] if lines else ""
    return str(component)


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


def _sgr(code: str) -> Callable[[str], str]:
    return lambda text: f"\x1b[{code}m{text}\x1b[0m"


def _plain(text: str) -> str:
    return text


@dataclass
class SheetTheme:
    """Styles applied by the default cell renderer, one per visual state."""

    selected: Callable[[str], str] = field(default_factory=lambda: _sgr("7"))
    editing: Callable[[str], str] = field(default_factory=lambda: _sgr("4"))
    read_only: Callable[[str], str] = field(default_factory=lambda: _sgr("2"))
    updated: Callable[[str], str] = field(default_factory=lambda: _sgr("1"))
    separator: str = "│"


PLAIN_THEME = SheetTheme(
    selected=_plain, editing=_plain, read_only=_plain, updated=_plain, separator="|"
)


# ---------------------------------------------------------------------------
# Default delegates
# ---------------------------------------------------------------------------


def default_value_viewer(props: ViewerProps) -> str:
    return str(props.value)


def default_data_editor(props: EditorProps) -> CellEditor:
    editor = CellEditor(
        "" if props.value is None else str(props.value), keybindings=props.keybindings
    )
    editor.on_change = props.on_change
    return editor


def make_cell_renderer(theme: SheetTheme) -> CellRenderer:
    """Fixed-width cell renderer styled by *theme*."""

    def render_cell(props: CellProps) -> str:
        text = truncate_to_width(props.content, props.width, "…", pad=True)
        classes = props.class_name.split()
        # Editing style replaces every other state style
        if "editing" in classes:
            return theme.editing(text)
        if "read-only" in classes:
            text = theme.read_only(text)
        if "updated" in classes:
            text = theme.updated(text)
        if "selected" in classes:
            text = theme.selected(text)
        return text

    return render_cell


def make_row_renderer(theme: SheetTheme) -> RowRenderer:
    def render_row(props: RowProps) -> str:
        return theme.separator.join(props.rendered)

    return render_row


def default_sheet_renderer(props: SheetProps) -> list[str]:
    return [truncate_to_width(line, props.width, "") for line in props.rows]
