"""Channel-panel rendering into styled text rows."""

from __future__ import annotations

from ..ansi import clip_ansi_line
from ..thread_model import format_channel_label
from ..thread_pane.hit_test import build_row_map
from ..thread_pane.rendering import EMPTY_PLACEHOLDER, NO_MATCHES_PLACEHOLDER, RenderedPanel
from ..ui_theme import DEFAULT_THEME, UITheme
from .controller import ChannelList


class ChannelPaneRenderer:
    """Render the channel panel: header, blank line, one row per visible channel."""

    def __init__(self, channel_list: ChannelList, theme: UITheme = DEFAULT_THEME, width: int = 0) -> None:
        self.channel_list = channel_list
        self.theme = theme
        self.width = width

    def _style(self, code: str, text: str) -> str:
        if not code or not text:
            return text
        return f"{code}{text}{self.theme.reset}"

    def _clip(self, text: str) -> str:
        if self.width <= 1:
            return text
        return clip_ansi_line(text, self.width - 1)

    def render(self) -> RenderedPanel:
        channels = self.channel_list
        theme = self.theme
        rows = [self._style(theme.channel_header, channels.header_text()), ""]
        window = channels.visible_window()
        row_map = build_row_map(window.visible, [1] * len(window.visible))

        if not channels.channels:
            rows.append(self._style(theme.channel_item, EMPTY_PLACEHOLDER))
            return RenderedPanel(rows=rows, row_map=row_map)
        if not window.visible:
            rows.append(self._style(theme.channel_item, NO_MATCHES_PLACEHOLDER))
            return RenderedPanel(rows=rows, row_map=row_map)

        for index in window.visible:
            channel = channels.channels[index]
            code = theme.channel_item
            if channels.is_current(channel):
                code = theme.channel_active
            if index == channels.selected and channels.has_focus:
                code = theme.channel_selected
            rows.append(self._style(code, " " + self._clip(format_channel_label(channel))))
        return RenderedPanel(rows=rows, row_map=row_map)
