"""Incremental filter state and matching for the thread and channel panels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ..thread_model import (
    ChannelRecord,
    Entry,
    SectionHeaderEntry,
    SeparatorEntry,
    Thread,
    entry_filter_label,
)

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")


@dataclass
class FilterState:
    """Mutable per-panel filter state.

    ``matches`` is ``None`` whenever the filter is inactive and holds indices
    into the panel's unfiltered items otherwise.
    """

    active: bool = False
    text: str = ""
    matches: list[int] | None = None
    search_results: list[Thread] = field(default_factory=list)
    last_query: str | None = None


def normalize_filter_term(text: str) -> str:
    return text.strip().lower()


class EntryFilter(Generic[ItemT]):
    """Case-insensitive substring filter over one panel's items.

    Subclasses decide which items can match at all (:meth:`is_candidate`) and
    what text an item matches on (:meth:`item_text`).
    """

    def __init__(self) -> None:
        self.state = FilterState()

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def matches(self) -> list[int] | None:
        return self.state.matches

    def term(self) -> str:
        return normalize_filter_term(self.state.text)

    def activate(self) -> None:
        self.state.active = True
        self.state.text = ""
        self.state.matches = None

    def deactivate(self) -> None:
        self.state.active = False
        self.state.text = ""
        self.state.matches = None

    def set_text(self, text: str) -> None:
        self.state.text = text

    def append(self, text: str) -> None:
        self.state.text += text

    def backspace(self) -> bool:
        """Drop the last character; return whether anything was removed."""
        if not self.state.text:
            return False
        self.state.text = self.state.text[:-1]
        return True

    def is_candidate(self, item: ItemT) -> bool:
        return True

    def item_text(self, item: ItemT) -> str:
        raise NotImplementedError

    def item_matches(self, item: ItemT, term: str) -> bool:
        return term in self.item_text(item).lower()

    def recompute(self, items: Sequence[ItemT]) -> list[int] | None:
        """Recompute ``matches`` for ``items``; an empty term matches every candidate."""
        if not self.state.active:
            self.state.matches = None
            return None
        term = self.term()
        self.state.matches = [
            idx
            for idx, item in enumerate(items)
            if self.is_candidate(item) and (not term or self.item_matches(item, term))
        ]
        return self.state.matches

    def active_indices(self, items: Sequence[ItemT]) -> list[int]:
        """Return the indices currently shown: matches when filtering, else all."""
        if self.state.active and self.state.matches is not None:
            return [idx for idx in self.state.matches if idx < len(items)]
        return list(range(len(items)))

    def snap_selection(self, current: int, *, text_changed: bool = True) -> int:
        """Return the selection to use after a recompute.

        A text change snaps to the first match. A recompute with unchanged
        text keeps ``current`` while it is still a match. Without matches the
        selection is left alone.
        """
        matches = self.state.matches
        if not matches:
            return current
        if not text_changed and current in matches:
            return current
        return matches[0]


class ThreadFilter(EntryFilter[Entry]):
    """Thread-panel filter with a supplementary search over non-local threads."""

    def is_candidate(self, item: Entry) -> bool:
        return not isinstance(item, (SeparatorEntry, SectionHeaderEntry))

    def item_text(self, item: Entry) -> str:
        return entry_filter_label(item)

    def deactivate(self) -> None:
        super().deactivate()
        self.state.search_results = []
        self.state.last_query = None

    def refresh_search(
        self,
        search: Callable[[str], Iterable[Thread]],
        local_ids: Iterable[str],
    ) -> bool:
        """Run the supplementary search when the trimmed filter text changed.

        Results already present locally are dropped. A failing ``search`` is
        logged and treated as no results. Returns whether a query was issued.
        """
        if not self.state.active:
            self.state.search_results = []
            self.state.last_query = None
            return False

        term = self.term()
        if not term:
            self.state.search_results = []
            self.state.last_query = None
            return False
        if term == self.state.last_query:
            return False

        self.state.last_query = term
        local = set(local_ids)
        try:
            found = list(search(term))
        except Exception:
            logger.warning("thread search for %r failed", term, exc_info=True)
            self.state.search_results = []
            return True

        results: list[Thread] = []
        seen: set[str] = set()
        for thread in found:
            if thread.guid in local or thread.guid in seen:
                continue
            seen.add(thread.guid)
            results.append(thread)
        self.state.search_results = results
        return True


class ChannelFilter(EntryFilter[ChannelRecord]):
    """Channel-panel filter matching the display name or the channel id."""

    def item_text(self, item: ChannelRecord) -> str:
        return item.display_name

    def item_matches(self, item: ChannelRecord, term: str) -> bool:
        return term in item.display_name.lower() or term in item.id.lower()
