"""Navigation panes façade: focus, mouse routing, and channel-switch lifecycle."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .channel_pane import ChannelList
from .config import DEFAULT_DOUBLE_CLICK_SECONDS, DEFAULT_THREAD_PANEL_MAX_WIDTH
from .thread_model import ChannelRecord, channel_panel_width, compute_thread_panel_width, format_channel_label
from .thread_pane import ThreadNavigator

logger = logging.getLogger(__name__)

FOCUS_THREADS = "threads"
FOCUS_CHANNELS = "channels"
FOCUS_MAIN = "main"
FOCUS_ORDER = (FOCUS_THREADS, FOCUS_CHANNELS, FOCUS_MAIN)


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Return 1-based ``(col, row)`` from ``KIND:col:row`` mouse keys."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


class NavigationPanes:
    """Own the thread and channel panels and route input between them.

    The thread panel occupies the leftmost columns, the channel panel sits
    right of it, and everything further right belongs to the main view.
    """

    def __init__(
        self,
        navigator: ThreadNavigator,
        channels: ChannelList,
        *,
        thread_panel_max_width: int = DEFAULT_THREAD_PANEL_MAX_WIDTH,
        pinned_height: Callable[[], int] = lambda: 0,
        double_click_seconds: float = DEFAULT_DOUBLE_CLICK_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
        on_channel_switch: Callable[[ChannelRecord], None] | None = None,
    ) -> None:
        self.navigator = navigator
        self.channels = channels
        self.thread_panel_max_width = thread_panel_max_width
        self.pinned_height = pinned_height
        self.double_click_seconds = double_click_seconds
        self._monotonic = monotonic
        self._on_channel_switch = on_channel_switch
        self._last_click: tuple[str, int] | None = None
        self._last_click_at = 0.0
        self.focus = FOCUS_THREADS
        self.channels.on_switch = self._switch_channel
        self._apply_focus()

    # layout
    def thread_panel_width(self) -> int:
        nav = self.navigator
        ctx = nav.label_context()
        labels = [nav.label_for(entry, ctx) for entry in nav.entries()]
        return compute_thread_panel_width(labels, self.thread_panel_max_width)

    def channel_panel_width(self) -> int:
        return channel_panel_width(format_channel_label(channel) for channel in self.channels.channels)

    # focus
    def _apply_focus(self) -> None:
        self.navigator.set_focus(self.focus == FOCUS_THREADS)
        self.channels.has_focus = self.focus == FOCUS_CHANNELS

    def set_focus(self, focus: str) -> None:
        if focus not in FOCUS_ORDER:
            raise ValueError(f"unknown focus target: {focus!r}")
        self.focus = focus
        self._apply_focus()

    def cycle_focus(self) -> None:
        position = FOCUS_ORDER.index(self.focus)
        self.set_focus(FOCUS_ORDER[(position + 1) % len(FOCUS_ORDER)])

    def _switch_channel(self, channel: ChannelRecord) -> None:
        if self._on_channel_switch is not None:
            self._on_channel_switch(channel)
        logger.debug("switched to channel %s; resetting thread navigation", channel.id)
        self.navigator.reset()
        self.set_focus(FOCUS_MAIN)

    # input
    def _is_double_click(self, panel: str, line: int) -> bool:
        now = self._monotonic()
        is_double = (
            self._last_click == (panel, line)
            and now - self._last_click_at <= self.double_click_seconds
        )
        if is_double:
            self._last_click = None
            self._last_click_at = 0.0
        else:
            self._last_click = (panel, line)
            self._last_click_at = now
        return is_double

    def _panel_at(self, col: int) -> str:
        thread_width = self.thread_panel_width()
        if col <= thread_width:
            return FOCUS_THREADS
        if col <= thread_width + self.channel_panel_width():
            return FOCUS_CHANNELS
        return FOCUS_MAIN

    def handle_mouse(self, key: str) -> bool:
        is_click = key.startswith("MOUSE_LEFT_DOWN:")
        is_wheel_up = key.startswith("MOUSE_WHEEL_UP:")
        is_wheel_down = key.startswith("MOUSE_WHEEL_DOWN:")
        if not (is_click or is_wheel_up or is_wheel_down):
            return False
        col, row = parse_mouse_col_row(key)
        if col is None or row is None:
            return True

        panel = self._panel_at(col)
        if panel == FOCUS_MAIN:
            if is_click:
                self.set_focus(FOCUS_MAIN)
            return False

        line = row - 1 - self.pinned_height()
        if is_wheel_up or is_wheel_down:
            direction = -1 if is_wheel_up else 1
            if panel == FOCUS_THREADS:
                return self.navigator.on_scroll(direction)
            return self.channels.on_scroll(direction)

        self.set_focus(panel)
        if line < 0:
            return True
        if panel == FOCUS_THREADS:
            return self.navigator.on_click(line, is_double=self._is_double_click(panel, line))
        return self.channels.on_click(line)

    def on_key(self, key: str) -> bool:
        if key.startswith("MOUSE_"):
            return self.handle_mouse(key)
        if key == "TAB":
            self.cycle_focus()
            return True

        if self.focus == FOCUS_THREADS:
            if self.navigator.on_key(key):
                return True
        elif self.focus == FOCUS_CHANNELS:
            if self.channels.on_key(key):
                return True
        else:
            return False

        if key == "ESC":
            self.set_focus(FOCUS_MAIN)
            return True
        return False
