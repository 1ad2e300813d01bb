"""Thread panel: drill stack, filtering, scrolling, hit testing, and rendering."""

from __future__ import annotations

from .controller import (
    HEADER_LINE_COUNT,
    Drilled,
    NavigationContext,
    NavigationMode,
    OpenTarget,
    ThreadNavigator,
    TopLevel,
    ViewingCollection,
)
from .drill import DrillStack
from .filter import ChannelFilter, EntryFilter, FilterState, ThreadFilter, normalize_filter_term
from .hit_test import RowMap, build_row_map, locate, locate_selectable, locate_wrapped
from .rendering import RenderedPanel, ThreadPaneRenderer
from .scroll import ScrollState, ScrollWindow, clamp_and_window, clamp_offset, scroll_by

__all__ = [
    "HEADER_LINE_COUNT",
    "ChannelFilter",
    "DrillStack",
    "Drilled",
    "EntryFilter",
    "FilterState",
    "NavigationContext",
    "NavigationMode",
    "OpenTarget",
    "RenderedPanel",
    "RowMap",
    "ScrollState",
    "ScrollWindow",
    "ThreadFilter",
    "ThreadNavigator",
    "ThreadPaneRenderer",
    "TopLevel",
    "ViewingCollection",
    "build_row_map",
    "clamp_and_window",
    "clamp_offset",
    "locate",
    "locate_selectable",
    "locate_wrapped",
    "normalize_filter_term",
    "scroll_by",
]
