"""Plain-text label formatting for thread-panel and channel-panel rows.

Every selectable thread-panel label starts with a three-column indicator gutter
(`` ✦ ``, `` ❮ ``, an avatar, `` ★ ``, or blanks) so names line up.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .types import (
    ChannelRecord,
    Entry,
    MainEntry,
    MessageCollection,
    MessageCollectionEntry,
    SectionHeaderEntry,
    SeparatorEntry,
    ThreadCollection,
    ThreadCollectionEntry,
    ThreadEntry,
)

GUTTER_BLANK = "   "
BACK_LINK_GUTTER = " ❮ "
MENTION_GUTTER = " ✦ "
FAVE_GUTTER = " ★ "
DRILL_MARKER = " ❯"
DEPTH_CHEVRON = "❯"
INDENT_UNIT = "  "


@dataclass(frozen=True)
class LabelContext:
    """Everything label formatting reads besides the entry itself."""

    drill_depth: int = 0
    main_label: str = "#main"
    main_unread_count: int = 0
    subscribed: frozenset[str] = frozenset()
    unread_counts: Mapping[str, int] = field(default_factory=dict)
    nicknames: Mapping[str, str] = field(default_factory=dict)
    question_counts: Mapping[MessageCollection, int] = field(default_factory=dict)
    muted_count: int = 0
    viewing_muted: bool = False
    unread_mentions: frozenset[str] = frozenset()


def _with_count(label: str, count: int) -> str:
    if count > 0:
        return f"{label} ({count})"
    return label


def _thread_gutter(entry: ThreadEntry, ctx: LabelContext) -> str:
    """Pick the leading indicator: mention, then avatar, then favorite star."""
    if entry.thread.guid in ctx.unread_mentions:
        return MENTION_GUTTER
    if entry.avatar:
        return f" {entry.avatar} "
    if entry.faved:
        return FAVE_GUTTER
    return GUTTER_BLANK


def _format_thread_label(entry: ThreadEntry, ctx: LabelContext) -> str:
    if entry.is_back_link:
        return BACK_LINK_GUTTER + entry.label

    guid = entry.thread.guid
    unread = ctx.unread_counts.get(guid, 0)
    if entry.collapsed and guid not in ctx.subscribed:
        label = entry.label
        if entry.indent > 0:
            label += " " + DEPTH_CHEVRON * entry.indent
        return GUTTER_BLANK + _with_count(label, unread)

    display_name = entry.label
    if ctx.drill_depth == 0:
        display_name = ctx.nicknames.get(guid) or display_name

    label = _thread_gutter(entry, ctx) + INDENT_UNIT * entry.indent + display_name
    if entry.has_children:
        label += DRILL_MARKER
    if guid in ctx.subscribed:
        label = _with_count(label, unread)
    return label


def format_entry_label(entry: Entry, ctx: LabelContext | None = None) -> str:
    """Render one entry as its plain display label."""
    ctx = ctx or LabelContext()
    if isinstance(entry, MainEntry):
        return GUTTER_BLANK + _with_count(ctx.main_label or entry.label, ctx.main_unread_count)
    if isinstance(entry, ThreadEntry):
        return _format_thread_label(entry, ctx)
    if isinstance(entry, MessageCollectionEntry):
        return GUTTER_BLANK + _with_count(entry.label, ctx.question_counts.get(entry.collection, 0))
    if isinstance(entry, ThreadCollectionEntry):
        if entry.collection is ThreadCollection.MUTED:
            labelled = _with_count(entry.label, ctx.muted_count)
            if ctx.viewing_muted:
                return BACK_LINK_GUTTER + labelled
            return GUTTER_BLANK + labelled
        return GUTTER_BLANK + entry.label
    if isinstance(entry, SectionHeaderEntry):
        return f" ─ {entry.label} ─"
    if isinstance(entry, SeparatorEntry):
        return ""
    raise TypeError(f"unknown entry type: {type(entry).__name__}")


def format_channel_label(channel: ChannelRecord) -> str:
    return "#" + channel.display_name
