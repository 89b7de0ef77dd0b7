"""sheetgrid: spreadsheet grid interaction engine for terminal hosts."""

# Cell descriptors
from sheetgrid.cells import Cell, Matrix, cell_at, render_data, render_value

# Clipboard
from sheetgrid.clipboard import (
    Clipboard,
    MemoryClipboard,
    SystemClipboard,
    default_parse_paste,
    get_clipboard,
    serialize_cells,
    set_clipboard,
)

# Configuration
from sheetgrid.config import SheetOptions

# Coordinates and ranges
from sheetgrid.coords import EMPTY_RANGE, Coordinate, Range, Rect, contains, iterate, normalize

# Document and listener engagement
from sheetgrid.document import Document, Engagement, get_document, set_document

# Cell editor
from sheetgrid.editor import CellEditor

# Interaction state
from sheetgrid.editing import (
    IDLE,
    SELECTING,
    EditSession,
    Editing,
    Idle,
    InteractionState,
    Selecting,
    SessionPhase,
)

# Events
from sheetgrid.events import ClipboardData, ClipboardEvent, PointerEvent

# Keybindings
from sheetgrid.keybindings import (
    DEFAULT_GRID_KEYBINDINGS,
    GridAction,
    GridKeybindingsManager,
    get_grid_keybindings,
    set_grid_keybindings,
)

# Keyboard input handling
from sheetgrid.keys import KeyId, KeyPress, is_edit_trigger, matches_key, parse_key

# Navigation
from sheetgrid.navigation import DOWN, LEFT, RIGHT, UP, Offset, navigate

# Change notifications
from sheetgrid.notifier import ChangeNotifier, ChangeRecord, PastedCell

# Render delegates
from sheetgrid.renderers import (
    PLAIN_THEME,
    CellContent,
    CellProps,
    EditorProps,
    RowProps,
    SheetProps,
    SheetTheme,
    ViewerProps,
    resolve_content,
)

# Timing
from sheetgrid.scheduler import Scheduler

# Selection
from sheetgrid.selection import ControlledSelection, LocalSelection, make_selection

# Grid
from sheetgrid.cell import DataCell
from sheetgrid.sheet import DataSheet

__all__ = [
    # Cells
    "Cell",
    "Matrix",
    "cell_at",
    "render_data",
    "render_value",
    # Clipboard
    "Clipboard",
    "MemoryClipboard",
    "SystemClipboard",
    "default_parse_paste",
    "get_clipboard",
    "serialize_cells",
    "set_clipboard",
    # Configuration
    "SheetOptions",
    # Coordinates
    "EMPTY_RANGE",
    "Coordinate",
    "Range",
    "Rect",
    "contains",
    "iterate",
    "normalize",
    # Document
    "Document",
    "Engagement",
    "get_document",
    "set_document",
    # Editor
    "CellEditor",
    # Interaction state
    "IDLE",
    "SELECTING",
    "EditSession",
    "Editing",
    "Idle",
    "InteractionState",
    "Selecting",
    "SessionPhase",
    # Events
    "ClipboardData",
    "ClipboardEvent",
    "PointerEvent",
    # Keybindings
    "DEFAULT_GRID_KEYBINDINGS",
    "GridAction",
    "GridKeybindingsManager",
    "get_grid_keybindings",
    "set_grid_keybindings",
    # Keys
    "KeyId",
    "KeyPress",
    "is_edit_trigger",
    "matches_key",
    "parse_key",
    # Navigation
    "DOWN",
    "LEFT",
    "RIGHT",
    "UP",
    "Offset",
    "navigate",
    # Notifications
    "ChangeNotifier",
    "ChangeRecord",
    "PastedCell",
    # Render delegates
    "PLAIN_THEME",
    "CellContent",
    "CellProps",
    "EditorProps",
    "RowProps",
    "SheetProps",
    "SheetTheme",
    "ViewerProps",
    "resolve_content",
    # Timing
    "Scheduler",
    # Selection
    "ControlledSelection",
    "LocalSelection",
    "make_selection",
    # Grid
    "DataCell",
    "DataSheet",
]
