"""Thread records, entry construction, labels, and selection helpers.

Defines the ``Entry`` sum type and the builder that lays out one level of the
thread hierarchy for the thread panel.
"""

from __future__ import annotations

from .build import (
    META_THREAD_NAME,
    ROLE_THREAD_PREFIX,
    SEARCH_SEPARATOR_LABEL,
    ThreadIndex,
    ThreadPathLoopError,
    ancestor_path,
    build_muted_collection_entries,
    build_thread_entries,
    index_threads,
    is_meta_thread,
    max_subtree_depth,
    thread_path,
)
from .labels import LabelContext, format_channel_label, format_entry_label
from .layout import channel_panel_width, compute_thread_panel_width
from .navigation import (
    clamp_selection,
    find_collection_entry_index,
    find_thread_entry_index,
    selectable_indices,
    step_selection,
)
from .types import (
    ChannelRecord,
    Entry,
    MainEntry,
    MessageCollection,
    MessageCollectionEntry,
    SectionHeaderEntry,
    SeparatorEntry,
    Thread,
    ThreadCollection,
    ThreadCollectionEntry,
    ThreadEntry,
    entry_filter_label,
    entry_thread_guid,
    is_selectable,
)

__all__ = [
    "META_THREAD_NAME",
    "ROLE_THREAD_PREFIX",
    "SEARCH_SEPARATOR_LABEL",
    "ChannelRecord",
    "Entry",
    "LabelContext",
    "MainEntry",
    "MessageCollection",
    "MessageCollectionEntry",
    "SectionHeaderEntry",
    "SeparatorEntry",
    "Thread",
    "ThreadCollection",
    "ThreadCollectionEntry",
    "ThreadEntry",
    "ThreadIndex",
    "ThreadPathLoopError",
    "ancestor_path",
    "build_muted_collection_entries",
    "build_thread_entries",
    "channel_panel_width",
    "clamp_selection",
    "compute_thread_panel_width",
    "entry_filter_label",
    "entry_thread_guid",
    "find_collection_entry_index",
    "find_thread_entry_index",
    "format_channel_label",
    "format_entry_label",
    "index_threads",
    "is_meta_thread",
    "is_selectable",
    "max_subtree_depth",
    "selectable_indices",
    "step_selection",
    "thread_path",
]
