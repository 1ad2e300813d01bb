"""Channel panel: sorted channel list with filter, scroll, and switching."""

from __future__ import annotations

from .controller import ChannelList, channel_sort_key, same_path
from .rendering import ChannelPaneRenderer

__all__ = ["ChannelList", "ChannelPaneRenderer", "channel_sort_key", "same_path"]
