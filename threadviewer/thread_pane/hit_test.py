"""Screen-line to entry-index resolution for panel clicks.

``locate`` is the inverse of :func:`clamp_and_window`'s slice when every entry
takes one row. ``RowMap`` covers the case where labels wrap onto continuation
rows, which all resolve to the entry they continue.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..thread_model import Entry, is_selectable


def locate(
    screen_line: int,
    header_line_count: int,
    active: Sequence[int],
    offset: int,
) -> int | None:
    """Map a panel-relative ``screen_line`` to an index into the unfiltered entries.

    Lines inside the header never resolve, nor do lines past the list end.
    """
    if screen_line < header_line_count:
        return None
    position = (screen_line - header_line_count) + offset
    if not 0 <= position < len(active):
        return None
    return active[position]


def locate_selectable(
    screen_line: int,
    header_line_count: int,
    entries: Sequence[Entry],
    active: Sequence[int],
    offset: int,
) -> int | None:
    """Like :func:`locate`, but separator and section-header rows resolve to ``None``."""
    index = locate(screen_line, header_line_count, active, offset)
    if index is None or not 0 <= index < len(entries):
        return None
    if not is_selectable(entries[index]):
        return None
    return index


@dataclass(frozen=True)
class RowMap:
    """Entry index for each rendered content row, top to bottom."""

    rows: tuple[int, ...]

    def entry_at(self, content_row: int) -> int | None:
        if not 0 <= content_row < len(self.rows):
            return None
        return self.rows[content_row]


def build_row_map(visible: Sequence[int], row_heights: Sequence[int]) -> RowMap:
    """Expand ``visible`` entry indices by how many rows each one renders to."""
    rows: list[int] = []
    for index, height in zip(visible, row_heights):
        rows.extend([index] * max(1, height))
    return RowMap(rows=tuple(rows))


def locate_wrapped(
    screen_line: int,
    header_line_count: int,
    entries: Sequence[Entry],
    row_map: RowMap,
) -> int | None:
    """Resolve a click through a row map built for the current visible window.

    Each map row stands for one screen line, so this is :func:`locate_selectable`
    over the map with no offset.
    """
    return locate_selectable(screen_line, header_line_count, entries, row_map.rows, 0)
