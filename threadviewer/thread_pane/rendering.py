"""Thread-panel rendering into styled text rows."""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import clip_ansi_line, wrap_label
from ..thread_model import (
    Entry,
    MainEntry,
    SectionHeaderEntry,
    SeparatorEntry,
    ThreadEntry,
)
from ..ui_theme import DEFAULT_THEME, UITheme, depth_color
from .controller import ThreadNavigator
from .hit_test import RowMap

SEARCH_RESULTS_HEADING = " Search results:"
EMPTY_PLACEHOLDER = " (none)"
NO_MATCHES_PLACEHOLDER = " (no matches)"


@dataclass(frozen=True)
class RenderedPanel:
    """Rendered rows plus the entry index behind each content row."""

    rows: list[str]
    row_map: RowMap


class ThreadPaneRenderer:
    """Render the thread panel for one navigator snapshot.

    Content rows follow the navigator's row map exactly, so a click on any
    rendered row resolves through the same map.
    """

    def __init__(self, navigator: ThreadNavigator, theme: UITheme = DEFAULT_THEME, width: int = 0) -> None:
        self.navigator = navigator
        self.theme = theme
        self.width = width

    def _style(self, code: str, text: str) -> str:
        if not code or not text:
            return text
        return f"{code}{text}{self.theme.reset}"

    def _clip(self, text: str) -> str:
        if self.width <= 0:
            return text
        return clip_ansi_line(text, self.width)

    def render_header(self) -> list[str]:
        nav = self.navigator
        header = nav.header_text()
        if nav.filter.active or (nav.drill.depth() > 0 and header.startswith(" ❮")):
            code = depth_color(self.theme, nav.drill.depth())
        else:
            code = self.theme.filter_hint
        return [self._style(code, self._clip(header)), ""]

    def _entry_code(self, entry: Entry, index: int, subscribed: frozenset[str]) -> str:
        nav = self.navigator
        theme = self.theme
        if index == nav.selected and nav.context.has_focus:
            return theme.thread_selected
        if nav.context.current.matches(entry):
            return theme.thread_current
        if isinstance(entry, MainEntry):
            return theme.thread_main
        if isinstance(entry, ThreadEntry) and entry.collapsed and entry.thread.guid not in subscribed:
            return theme.thread_collapsed
        return theme.thread_item

    def render(self) -> RenderedPanel:
        nav = self.navigator
        rows = self.render_header()
        entries = nav.entries()
        row_map = nav.row_map()
        ctx = nav.label_context()

        if not entries:
            rows.append(self._style(self.theme.thread_item, EMPTY_PLACEHOLDER))
            return RenderedPanel(rows=rows, row_map=row_map)
        if not row_map.rows:
            rows.append(self._style(self.theme.thread_item, NO_MATCHES_PLACEHOLDER))
            return RenderedPanel(rows=rows, row_map=row_map)

        previous: int | None = None
        for index in row_map.rows:
            if index == previous:
                continue
            previous = index
            entry = entries[index]
            if isinstance(entry, SeparatorEntry):
                rows.append(self._style(self.theme.thread_item, SEARCH_RESULTS_HEADING))
                continue
            if isinstance(entry, SectionHeaderEntry):
                rows.append(self._style(self.theme.thread_section, self._clip(nav.label_for(entry, ctx))))
                continue
            code = self._entry_code(entry, index, ctx.subscribed)
            label = nav.label_for(entry, ctx)
            for line in wrap_label(label, nav.wrap_width):
                rows.append(self._style(code, self._clip(line)))

        return RenderedPanel(rows=rows[: nav.header_line_count() + len(row_map.rows)], row_map=row_map)
