"""ANSI-aware text measurement and label shaping utilities.

Panels consume these as pure functions: measure a label's display width, clip
it to a panel, or wrap it into continuation rows.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_ANSI_SPLIT_RE = re.compile(f"({ANSI_ESCAPE_RE.pattern})")
CONTINUATION_INDENT = "  "


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    """Remove escape sequences from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return terminal column width for ANSI-styled text."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut a styled label down to ``max_cols`` columns.

    Escape sequences before the cut are kept and take no columns; a wide
    character that would straddle the edge is dropped.
    """
    if max_cols <= 0 or not text:
        return ""

    pieces: list[str] = []
    col = 0
    for idx, part in enumerate(_ANSI_SPLIT_RE.split(text)):
        if col >= max_cols:
            break
        if idx % 2:
            pieces.append(part)
            continue
        for ch in part:
            width = char_display_width(ch)
            if col >= max_cols or col + width > max_cols:
                return "".join(pieces)
            pieces.append(ch)
            col += width
    return "".join(pieces)


def _take_columns(chars: list[str], start: int, max_cols: int) -> int:
    """Return the end index of the longest run from ``start`` fitting ``max_cols``."""
    col = 0
    idx = start
    while idx < len(chars):
        w = char_display_width(chars[idx])
        if col + w > max_cols and idx > start:
            break
        col += w
        idx += 1
    return idx


def wrap_label(label: str, max_cols: int) -> list[str]:
    """Wrap a plain label into rows of at most ``max_cols`` columns.

    Continuation rows carry a two-space indent. When the width leaves no room
    for indented continuation rows, the label is truncated to one row instead.
    """
    if max_cols <= 0:
        return [label]
    if display_width(label) <= max_cols:
        return [label]

    continuation_cols = max_cols - len(CONTINUATION_INDENT)
    if continuation_cols < 1:
        return [clip_ansi_line(label, max_cols)]

    chars = list(strip_ansi(label))
    end = _take_columns(chars, 0, max_cols)
    rows = ["".join(chars[:end])]
    while end < len(chars):
        next_end = _take_columns(chars, end, continuation_cols)
        rows.append(CONTINUATION_INDENT + "".join(chars[end:next_end]))
        end = next_end
    return rows


def measure_height(label: str, max_cols: int) -> int:
    """Return how many screen rows ``label`` occupies once wrapped."""
    return len(wrap_label(label, max_cols))
