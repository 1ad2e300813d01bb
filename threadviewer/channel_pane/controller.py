"""Channel-list controller: sorted channels, filter, scroll, and switching."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ..thread_model import ChannelRecord
from ..thread_pane.filter import ChannelFilter
from ..thread_pane.hit_test import locate
from ..thread_pane.scroll import ScrollState, ScrollWindow, clamp_offset, scroll_by

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 2
WHEEL_STEP = 3


def channel_sort_key(channel: ChannelRecord) -> str:
    return (channel.name or channel.id).lower()


def same_path(left: str, right: str) -> bool:
    """Compare two filesystem paths after making them absolute."""
    if not left or not right:
        return left == right
    try:
        return Path(left).expanduser().resolve() == Path(right).expanduser().resolve()
    except (OSError, RuntimeError):
        return left == right


class ChannelList:
    """Stateful controller behind the channel panel.

    The scroll offset is only clamped, never moved to follow the selection.
    """

    def __init__(
        self,
        channels: Sequence[ChannelRecord],
        *,
        current_path: str = "",
        viewport_rows: int = 20,
        on_switch: Callable[[ChannelRecord], None] | None = None,
    ) -> None:
        self.channels: list[ChannelRecord] = sorted(channels, key=channel_sort_key)
        self.current_path = current_path
        self.viewport_rows = max(1, viewport_rows)
        self.on_switch = on_switch
        self.filter = ChannelFilter()
        self.scroll = ScrollState()
        self.has_focus = False
        self.status = ""
        self.scroll.selected = self.current_index() or 0

    @property
    def selected(self) -> int:
        return self.scroll.selected

    @selected.setter
    def selected(self, value: int) -> None:
        self.scroll.selected = value

    def current_index(self) -> int | None:
        for idx, channel in enumerate(self.channels):
            if same_path(channel.path, self.current_path):
                return idx
        return None

    def current_channel(self) -> ChannelRecord | None:
        idx = self.current_index()
        return self.channels[idx] if idx is not None else None

    def is_current(self, channel: ChannelRecord) -> bool:
        return same_path(channel.path, self.current_path)

    def set_channels(self, channels: Sequence[ChannelRecord]) -> None:
        """Replace the channel list, keeping the selected channel when it survives."""
        previous = self.selected_channel()
        self.channels = sorted(channels, key=channel_sort_key)
        self.selected = 0
        if previous is not None:
            for idx, channel in enumerate(self.channels):
                if channel.id == previous.id:
                    self.selected = idx
                    break
        if self.filter.active:
            self.filter.recompute(self.channels)

    def selected_channel(self) -> ChannelRecord | None:
        if 0 <= self.selected < len(self.channels):
            return self.channels[self.selected]
        return None

    def active_indices(self) -> list[int]:
        return self.filter.active_indices(self.channels)

    def visible_window(self) -> ScrollWindow:
        active = self.active_indices()
        self.scroll.offset = clamp_offset(self.scroll.offset, len(active), self.viewport_rows)
        offset = self.scroll.offset
        return ScrollWindow(offset=offset, visible=active[offset : offset + self.viewport_rows])

    def header_text(self) -> str:
        if not self.filter.active:
            return " Channels "
        if not self.filter.text:
            return " Channels (filter) "
        return f" Channels (filter: {self.filter.text}) "

    def header_line_count(self) -> int:
        return HEADER_LINE_COUNT

    # filter
    def _apply_filter_change(self, text_changed: bool = True) -> None:
        self.filter.recompute(self.channels)
        self.selected = self.filter.snap_selection(self.selected, text_changed=text_changed)

    def start_filter(self) -> bool:
        if self.filter.active:
            self._apply_filter_change(text_changed=False)
            return True
        self.filter.activate()
        self._apply_filter_change()
        return True

    def type_text(self, text: str) -> bool:
        if not self.filter.active:
            return False
        self.filter.append(text)
        self._apply_filter_change()
        return True

    def backspace(self) -> bool:
        if not self.filter.active:
            return False
        self.filter.backspace()
        self._apply_filter_change()
        return True

    def reset_filter(self) -> None:
        self.filter.deactivate()
        self.scroll.offset = 0

    # navigation
    def move_selection(self, delta: int) -> bool:
        if not self.channels:
            return False
        if self.filter.active:
            matches = self.filter.matches or []
            if not matches:
                return False
            if self.selected not in matches:
                self.selected = matches[0]
                return True
            position = matches.index(self.selected)
            self.selected = matches[(position + delta) % len(matches)]
            return True
        self.selected = (self.selected + delta) % len(self.channels)
        return True

    def select(self) -> bool:
        """Switch to the selected channel unless it is already current."""
        channel = self.selected_channel()
        if channel is None:
            return False
        if not self.is_current(channel):
            if self.on_switch is not None:
                try:
                    self.on_switch(channel)
                except Exception as exc:
                    logger.warning("switching to channel %s failed", channel.id, exc_info=True)
                    self.status = str(exc)
                    return True
            self.current_path = channel.path
            self.status = f"Switched to #{channel.display_name}"
        self.reset_filter()
        return True

    # input
    def on_key(self, key: str) -> bool:
        if key == "ESC":
            if self.filter.active:
                self.reset_filter()
                return True
            return False

        if not self.has_focus:
            return False

        if not self.filter.active and key in {" ", "#"}:
            return self.start_filter()

        if self.filter.active:
            if key == "BACKSPACE":
                return self.backspace()
            if key == "ENTER" and not self.filter.matches:
                return True
            if key == " ":
                return True
            if len(key) == 1 and key.isprintable():
                return self.type_text(key)

        if key in {"j", "DOWN"}:
            self.move_selection(1)
            return True
        if key in {"k", "UP"}:
            self.move_selection(-1)
            return True
        if key == "ENTER":
            return self.select()
        return False

    def on_click(self, screen_line: int) -> bool:
        self.has_focus = True
        window = self.visible_window()
        index = locate(screen_line, HEADER_LINE_COUNT, self.active_indices(), window.offset)
        if index is None:
            return True
        self.selected = index
        self.select()
        return True

    def on_scroll(self, direction: int) -> bool:
        if direction == 0:
            return False
        total = len(self.active_indices())
        new_offset = scroll_by(self.scroll.offset, direction * WHEEL_STEP, total, self.viewport_rows)
        if new_offset == self.scroll.offset:
            return False
        self.scroll.offset = new_offset
        return True
