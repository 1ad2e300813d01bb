"""Thread records and the navigation-entry sum type shared by both panels."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Thread:
    """One thread record as returned by the storage layer."""

    guid: str
    name: str
    parent_thread: str | None = None
    created_at: int = 0
    last_activity_at: int | None = None

    @property
    def is_root(self) -> bool:
        return not self.parent_thread

    def activity_timestamp(self) -> int:
        """Return last activity, falling back to creation time."""
        if self.last_activity_at is not None:
            return self.last_activity_at
        return self.created_at


@dataclass(frozen=True)
class ChannelRecord:
    """One channel the user can switch to."""

    id: str
    name: str
    path: str

    @property
    def display_name(self) -> str:
        return self.name or self.id


class MessageCollection(str, Enum):
    OPEN_QUESTIONS = "open-qs"
    STALE_QUESTIONS = "stale-qs"


class ThreadCollection(str, Enum):
    MUTED = "muted"


@dataclass(frozen=True)
class MainEntry:
    """Pseudo-root "home" row shown at the top of the undrilled panel."""

    label: str = "#main"


@dataclass(frozen=True)
class ThreadEntry:
    """A thread row plus the display metadata the layout pass decided on.

    ``collapsed`` marks "other threads" rows, whose ``indent`` carries the depth
    of the subtree hidden beneath them rather than a tree depth.
    """

    thread: Thread
    label: str
    indent: int = 0
    has_children: bool = False
    collapsed: bool = False
    faved: bool = False
    avatar: str = ""
    is_back_link: bool = False


@dataclass(frozen=True)
class SeparatorEntry:
    label: str = ""


@dataclass(frozen=True)
class SectionHeaderEntry:
    label: str


@dataclass(frozen=True)
class MessageCollectionEntry:
    collection: MessageCollection
    label: str


@dataclass(frozen=True)
class ThreadCollectionEntry:
    collection: ThreadCollection
    label: str


Entry = Union[
    MainEntry,
    ThreadEntry,
    SeparatorEntry,
    SectionHeaderEntry,
    MessageCollectionEntry,
    ThreadCollectionEntry,
]


SELECTABLE_ENTRY_TYPES = (MainEntry, ThreadEntry, MessageCollectionEntry, ThreadCollectionEntry)
NON_SELECTABLE_ENTRY_TYPES = (SeparatorEntry, SectionHeaderEntry)


def is_selectable(entry: Entry) -> bool:
    """Return whether a cursor or click may land on ``entry``."""
    if isinstance(entry, NON_SELECTABLE_ENTRY_TYPES):
        return False
    if isinstance(entry, SELECTABLE_ENTRY_TYPES):
        return True
    raise TypeError(f"unknown entry type: {type(entry).__name__}")


def entry_filter_label(entry: Entry) -> str:
    """Return the text the incremental filter matches against."""
    if isinstance(entry, SELECTABLE_ENTRY_TYPES + NON_SELECTABLE_ENTRY_TYPES):
        return entry.label
    raise TypeError(f"unknown entry type: {type(entry).__name__}")


def entry_thread_guid(entry: Entry) -> str | None:
    """Return the wrapped thread id for thread rows, else ``None``."""
    if isinstance(entry, ThreadEntry):
        return entry.thread.guid
    return None
