"""Thread-panel width helpers."""

from __future__ import annotations

from collections.abc import Iterable

from ..ansi import display_width

THREAD_PANEL_MIN_LABEL_WIDTH = 26
THREAD_PANEL_WIDTH_PADDING = 4


def compute_thread_panel_width(labels: Iterable[str], max_width: int = 50) -> int:
    """Size the thread panel to its longest label plus padding, capped at ``max_width``.

    The floor keeps the idle ``<space> to filter`` hint readable even when all
    thread names are short.
    """
    longest = THREAD_PANEL_MIN_LABEL_WIDTH
    for label in labels:
        longest = max(longest, display_width(label))
    return min(longest + THREAD_PANEL_WIDTH_PADDING, max(1, max_width))


def channel_panel_width(labels: Iterable[str], max_width: int = 30) -> int:
    """Size the channel panel to its longest ``#name`` label."""
    longest = len(" Channels (filter) ")
    for label in labels:
        longest = max(longest, display_width(label) + 2)
    return min(longest, max(1, max_width))
