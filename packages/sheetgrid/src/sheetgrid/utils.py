"""Terminal text helpers: grapheme segmentation and visible-width fitting."""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences and OSC 8 hyperlinks do not occupy columns
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]|\x1b\]8;;[^\x07]*\x07")

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    if not g:
        return 0
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or 0x7F <= cp <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation, ZWJ sequences, flags and skin tones are double width
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2
    if ord(g[0]) >= 0x1F000:
        return 2
    if unicodedata.category(g[0]) in ("Mn", "Mc", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies, ignoring ANSI codes."""
    if not text:
        return 0
    stripped = strip_ansi(text).replace("\t", "   ")
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = total
    return total


def _take_columns(text: str, max_cols: int) -> str:
    """Longest prefix of *text* fitting in *max_cols*, cut on grapheme boundaries.

    ANSI codes are kept so styles opened before the cut are still closed by
    whatever the caller appends.
    """
    out: list[str] = []
    cols = 0
    pos = 0
    for match in _ANSI_RE.finditer(text):
        cols, done = _take_plain(text[pos : match.start()], max_cols, cols, out)
        if done:
            return "".join(out)
        out.append(match.group(0))
        pos = match.end()
    _take_plain(text[pos:], max_cols, cols, out)
    return "".join(out)


def _take_plain(chunk: str, max_cols: int, cols: int, out: list[str]) -> tuple[int, bool]:
    for g in grapheme.graphemes(chunk):
        w = _grapheme_width(g)
        if cols + w > max_cols:
            return cols, True
        out.append(g)
        cols += w
    return cols, False


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Fit *text* into *max_width* columns.

    Overlong text is cut and *ellipsis* appended (the ellipsis counts towards
    the width). With *pad* the result is right-padded to exactly
    *max_width* columns.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        return text + " " * (max_width - text_width) if pad else text

    target = max_width - visible_width(ellipsis)
    if target <= 0:
        return _take_columns(ellipsis, max_width)

    result = _take_columns(text, target) + ellipsis
    if pad:
        result += " " * max(0, max_width - visible_width(result))
    return result


def is_whitespace_char(char: str) -> bool:
    return char in (" ", "\t", "\n", "\r", "\f", "\v")
