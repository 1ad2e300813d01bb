"""Virtual-scroll window math shared by the thread and channel panels.

Offsets count visible entries, not text lines: wrapped labels are accounted
for one layer up, by the renderers' row maps.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ScrollWindow:
    """Result of one window computation: clamped offset and visible indices."""

    offset: int
    visible: list[int]


@dataclass
class ScrollState:
    """Per-panel selection index (into the unfiltered entries) and scroll offset."""

    selected: int = 0
    offset: int = 0

    def reset(self) -> None:
        self.selected = 0
        self.offset = 0


def max_offset(total: int, viewport_height: int) -> int:
    return max(0, total - max(1, viewport_height))


def clamp_offset(offset: int, total: int, viewport_height: int) -> int:
    """Clamp ``offset`` into ``[0, max(0, total - viewport_height)]``."""
    return max(0, min(offset, max_offset(total, viewport_height)))


def clamp_and_window(
    active: Sequence[int],
    selected: int,
    viewport_height: int,
    offset: int,
    has_focus: bool,
) -> ScrollWindow:
    """Compute the visible slice of ``active`` and keep the selection in view.

    With focus, the offset first moves just enough to show ``selected``: down
    so it is the last visible row, or up so it is the first. The general clamp
    applies afterwards. Feeding the returned offset back in is a no-op.
    """
    height = max(1, viewport_height)
    total = len(active)
    offset = clamp_offset(offset, total, height)

    if has_focus:
        try:
            position = list(active).index(selected)
        except ValueError:
            position = -1
        if position >= 0:
            if position >= offset + height:
                offset = position - height + 1
            if position < offset:
                offset = position

    offset = clamp_offset(offset, total, height)
    return ScrollWindow(offset=offset, visible=list(active[offset : offset + height]))


def scroll_by(offset: int, delta: int, total: int, viewport_height: int) -> int:
    """Return ``offset`` moved by ``delta`` entries, clamped to the list."""
    return clamp_offset(offset + delta, total, viewport_height)
