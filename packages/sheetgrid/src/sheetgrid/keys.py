"""Keyboard input parsing for the grid.

Turns raw terminal input (legacy CSI/SS3 sequences, kitty CSI-u,
modifyOtherKeys, control bytes and plain text) into a :class:`KeyPress`, and
matches input against key identifiers such as ``"shift+tab"`` or
``"ctrl+c"``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock / num lock bits reported by kitty
LOCK_MASK = 64 + 128

_MODIFIER_ORDER = ("ctrl", "shift", "alt")

# Final byte of CSI/SS3 cursor sequences
_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
}

# Numeric parameter of CSI ... ~ sequences
_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
}

# kitty CSI-u codepoints with a name
_NAMED_CODEPOINTS: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    32: "space",
    127: "backspace",
    8: "backspace",
    57414: "enter",  # keypad enter
}

# kitty keypad codepoints that produce text
KEYPAD_TEXT: dict[int, str] = {
    57399: "0",
    57400: "1",
    57401: "2",
    57402: "3",
    57403: "4",
    57404: "5",
    57405: "6",
    57406: "7",
    57407: "8",
    57408: "9",
    57409: ".",
    57410: "/",
    57411: "*",
    57412: "-",
    57413: "+",
    57415: "=",
}

# Characters produced by the equal, minus and period keys (plain and
# shifted) and by keypad add, subtract and decimal.
EQUATION_CHARS = frozenset({"=", "+", "-", "_", ".", ">"})

BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$"
)

# \x1b[1;<modifier>(:<event>)?<letter>, \x1b[<letter>, \x1bO<letter>
_CSI_LETTER_RE = re.compile(r"\x1b(?:\[(?:1;(\d+)(?::(\d+))?)?|O)([ABCDHFE])$")

# \x1b[<number>(;<modifier>(:<event>))?~
_CSI_TILDE_RE = re.compile(r"\x1b\[(\d+)(?:;(\d+)(?::(\d+))?)?~$")

# modifyOtherKeys: \x1b[27;<modifier>;<keycode>~
_MODIFY_OTHER_KEYS_RE = re.compile(r"\x1b\[27;(\d+);(\d+)~$")

# ---------------------------------------------------------------------------
# KeyPress
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPress:
    """A single parsed key press.

    ``key`` is the base key name (``"up"``, ``"tab"``, ``"a"``, ``"="``).
    ``text`` is the text the key types, empty for non-printing keys and for
    chords with ctrl or alt held.
    """

    key: str
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    text: str = ""

    @property
    def id(self) -> KeyId:
        parts = [name for name in _MODIFIER_ORDER if getattr(self, name)]
        parts.append(self.key)
        return "+".join(parts)


def _decode_modifier(raw: int) -> tuple[bool, bool, bool]:
    mod = (raw - 1) & ~LOCK_MASK
    return (
        bool(mod & MODIFIERS["shift"]),
        bool(mod & MODIFIERS["alt"]),
        bool(mod & MODIFIERS["ctrl"]),
    )


def _from_codepoint(
    codepoint: int, shifted: int | None, modifier: int
) -> KeyPress | None:
    shift, alt, ctrl = _decode_modifier(modifier)

    name = _NAMED_CODEPOINTS.get(codepoint)
    if name is not None:
        text = " " if name == "space" and not (ctrl or alt) else ""
        return KeyPress(name, shift=shift, alt=alt, ctrl=ctrl, text=text)

    keypad = KEYPAD_TEXT.get(codepoint)
    if keypad is not None:
        return KeyPress(keypad, shift=shift, alt=alt, ctrl=ctrl, text="" if ctrl or alt else keypad)

    if codepoint <= 0:
        return None
    ch = chr(codepoint)
    if not ch.isprintable():
        return None
    text = ""
    if not (ctrl or alt):
        text = chr(shifted) if shift and shifted else (ch.upper() if shift else ch)
    return KeyPress(ch.lower(), shift=shift, alt=alt, ctrl=ctrl, text=text)


def parse_key(data: str) -> KeyPress | None:  # noqa: C901
    """Parse raw terminal input into a :class:`KeyPress`.

    Returns ``None`` for unrecognized input, bracketed-paste markers and
    kitty key-release events.
    """
    if not data:
        return None

    m = _KITTY_CSI_U_RE.match(data)
    if m:
        if m.group(5) == "3":
            return None
        shifted = int(m.group(2)) if m.group(2) else None
        modifier = int(m.group(4)) if m.group(4) else 1
        return _from_codepoint(int(m.group(1)), shifted, modifier)

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        return _from_codepoint(int(m.group(2)), None, int(m.group(1)))

    m = _CSI_LETTER_RE.match(data)
    if m:
        if m.group(2) == "3":
            return None
        shift, alt, ctrl = _decode_modifier(int(m.group(1)) if m.group(1) else 1)
        return KeyPress(_LETTER_KEYS[m.group(3)], shift=shift, alt=alt, ctrl=ctrl)

    m = _CSI_TILDE_RE.match(data)
    if m:
        number = int(m.group(1))
        name = _TILDE_KEYS.get(number)
        if name is None or m.group(3) == "3":
            return None
        shift, alt, ctrl = _decode_modifier(int(m.group(2)) if m.group(2) else 1)
        return KeyPress(name, shift=shift, alt=alt, ctrl=ctrl)

    if data == "\x1b[Z":
        return KeyPress("tab", shift=True)

    # --- Single-byte keys ---
    if data == "\x1b":
        return KeyPress("escape")
    if data in ("\r", "\n"):
        return KeyPress("enter")
    if data == "\t":
        return KeyPress("tab")
    if data in ("\x7f", "\x08"):
        return KeyPress("backspace")
    if data == " ":
        return KeyPress("space", text=" ")
    if data == "\x00":
        return KeyPress("space", ctrl=True)

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyPress(chr(ord(data) + ord("a") - 1), ctrl=True)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is None:
            return None
        return KeyPress(inner.key.lower(), shift=inner.shift or data[1].isupper(), alt=True, ctrl=inner.ctrl)

    # --- Printable text (one grapheme or a plain character) ---
    if "\x1b" not in data and data.isprintable():
        key = data.lower() if len(data) == 1 else data
        return KeyPress(key, shift=len(data) == 1 and data != key, text=data)

    return None


def normalize_key_id(key_id: KeyId) -> KeyId:
    """Canonical form of a key id: ``ctrl``, ``shift``, ``alt`` then the key."""
    parts = key_id.split("+")
    mods: set[str] = set()
    key_parts: list[str] = []
    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS:
            mods.add(lower)
        else:
            key_parts.append(part)
    key = "+".join(key_parts)
    if len(key) == 1:
        key = key.lower()
    return "+".join([name for name in _MODIFIER_ORDER if name in mods] + [key])


def matches_key(data: str | KeyPress, key_id: KeyId) -> bool:
    """Check whether raw input (or an already parsed key) is *key_id*."""
    parsed = data if isinstance(data, KeyPress) else parse_key(data)
    if parsed is None:
        return False
    return parsed.id == normalize_key_id(key_id)


def is_edit_trigger(key: KeyPress) -> bool:
    """Whether typing *key* on an idle cell should start a clearing edit.

    Digits, letters, the Latin-1 supplement range, keypad digits and the
    equation symbols qualify. Chords with ctrl or alt never do.
    """
    if key.ctrl or key.alt or len(key.text) != 1:
        return False
    ch = key.text
    cp = ord(ch)
    return (
        ("0" <= ch <= "9")
        or (ch.isascii() and ch.isalpha())
        or 0xA0 <= cp <= 0xFF
        or ch in EQUATION_CHARS
    )
