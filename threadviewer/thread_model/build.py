"""Entry-sequence construction for the thread panel.

Threads arrive as a flat collection linked by parent ids. Each build pass
indexes them into roots plus a parent-to-children map and then lays out one
level of the hierarchy: the true top level, or the direct children of the
thread on top of the drill stack.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from .types import (
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
)

logger = logging.getLogger(__name__)

META_THREAD_NAME = "meta"
ROLE_THREAD_PREFIX = "role-"
SEARCH_SEPARATOR_LABEL = "search"
MUTED_COLLECTION_LABEL = "muted"


class ThreadPathLoopError(ValueError):
    """Raised when a thread's ancestor chain revisits a thread."""


@dataclass(frozen=True)
class ThreadIndex:
    """Roots, parent-to-children map, and id lookup for one thread snapshot."""

    roots: list[Thread]
    children: dict[str, list[Thread]]
    by_guid: dict[str, Thread]

    def has_children(self, guid: str) -> bool:
        return bool(self.children.get(guid))


def index_threads(threads: Iterable[Thread]) -> ThreadIndex:
    """Partition ``threads`` into roots and a name-sorted children map.

    A thread whose parent id is empty, unknown, or its own id is treated as a
    root so dangling references never hide it.
    """
    ordered = list(threads)
    by_guid: dict[str, Thread] = {}
    for thread in ordered:
        by_guid.setdefault(thread.guid, thread)

    roots: list[Thread] = []
    children: dict[str, list[Thread]] = {}
    for thread in ordered:
        parent = thread.parent_thread
        if not parent:
            roots.append(thread)
            continue
        if parent == thread.guid or parent not in by_guid:
            logger.debug("thread %s has unresolvable parent %r; treating as root", thread.guid, parent)
            roots.append(thread)
            continue
        children.setdefault(parent, []).append(thread)

    for kids in children.values():
        kids.sort(key=lambda item: item.name)
    return ThreadIndex(roots=roots, children=children, by_guid=by_guid)


def max_subtree_depth(guid: str, children: Mapping[str, Sequence[Thread]]) -> int:
    """Return how many levels of descendants hang below ``guid``.

    A leaf has depth 0. Threads already on the current walk are skipped, so a
    corrupt cyclic parent chain terminates.
    """

    def walk(current: str, on_path: frozenset[str]) -> int:
        deepest = 0
        for child in children.get(current, ()):
            if child.guid in on_path:
                continue
            deepest = max(deepest, 1 + walk(child.guid, on_path | {child.guid}))
        return deepest

    return walk(guid, frozenset({guid}))


def ancestor_path(thread: Thread, by_guid: Mapping[str, Thread]) -> list[str]:
    """Return thread ids from the outermost known ancestor down to ``thread``.

    Stops at a dangling parent reference. Raises :class:`ThreadPathLoopError`
    when the chain revisits a thread.
    """
    path = [thread.guid]
    seen = {thread.guid}
    parent = thread.parent_thread
    while parent:
        if parent in seen:
            raise ThreadPathLoopError(f"thread path loop detected at {parent}")
        seen.add(parent)
        parent_thread = by_guid.get(parent)
        if parent_thread is None:
            break
        path.insert(0, parent_thread.guid)
        parent = parent_thread.parent_thread
    return path


def thread_path(thread: Thread, by_guid: Mapping[str, Thread]) -> str:
    """Return the slash-joined name path for ``thread`` (``meta/opus/notes``)."""
    return "/".join(by_guid[guid].name if guid in by_guid else thread.name for guid in ancestor_path(thread, by_guid))


def is_meta_thread(thread: Thread) -> bool:
    """Return whether ``thread`` is the distinguished top-level ``meta`` thread."""
    return thread.name == META_THREAD_NAME and thread.is_root


def _no_unread_mentions(_guid: str) -> bool:
    return False


def _thread_entry(
    thread: Thread,
    index: ThreadIndex,
    faved: set[str],
    *,
    collapsed: bool = False,
    avatar: str = "",
) -> ThreadEntry:
    return ThreadEntry(
        thread=thread,
        label=thread.name,
        indent=0,
        has_children=index.has_children(thread.guid),
        collapsed=collapsed,
        faved=thread.guid in faved,
        avatar=avatar,
    )


def _grouped_entries(
    scope_children: list[Thread],
    index: ThreadIndex,
    *,
    collapsed: set[str],
    faved: set[str],
    avatars: Mapping[str, str],
) -> list[Entry]:
    """Bucket the children of ``meta`` into topics, agents, and roles sections."""
    topics: list[Thread] = []
    agents: list[Thread] = []
    roles: list[Thread] = []
    for thread in scope_children:
        if thread.name.startswith(ROLE_THREAD_PREFIX):
            roles.append(thread)
        elif index.has_children(thread.guid):
            agents.append(thread)
        else:
            topics.append(thread)

    entries: list[Entry] = []
    sections = (("topics", topics, False), ("agents", agents, True), ("roles", roles, False))
    for header, members, with_avatar in sections:
        if not members:
            continue
        entries.append(SectionHeaderEntry(label=header))
        for thread in sorted(members, key=lambda item: item.name):
            entries.append(
                _thread_entry(
                    thread,
                    index,
                    faved,
                    collapsed=thread.guid in collapsed,
                    avatar=avatars.get(thread.name, "") if with_avatar else "",
                )
            )
    return entries


def build_thread_entries(
    threads: Sequence[Thread],
    drill_path: Sequence[str] = (),
    *,
    collapsed: set[str] | None = None,
    faved: set[str] | None = None,
    muted: set[str] | None = None,
    subscribed: set[str] | None = None,
    question_counts: Mapping[MessageCollection, int] | None = None,
    avatars: Mapping[str, str] | None = None,
    search_results: Sequence[Thread] = (),
    main_label: str = "#main",
    has_unread_mentions: Callable[[str], bool] = _no_unread_mentions,
    last_activity: Callable[[str], int | None] | None = None,
) -> list[Entry]:
    """Lay out one level of the thread hierarchy as an ordered entry list.

    At the top level the list opens with :class:`MainEntry`; when drilled in it
    opens with a back-link row for the drilled thread followed by that thread's
    direct children only. Children of the top-level ``meta`` thread use the
    grouped topics/agents/roles layout. Every other level uses the priority
    layout: meta, unread mentions, favorites, question collections, subscribed
    threads by recency, remaining threads collapsed by name, the muted
    collection, and finally supplementary search results.

    ``last_activity`` overrides a thread's own activity timestamp for the
    recency pass when it returns a value.

    A drill id that no longer resolves renders the top level; the stack itself
    is not modified here.
    """
    collapsed = collapsed or set()
    faved = faved or set()
    muted = muted or set()
    subscribed = subscribed or set()
    question_counts = question_counts or {}
    avatars = avatars or {}

    index = index_threads(threads)
    entries: list[Entry] = []
    roots = index.roots

    drilled: Thread | None = None
    if drill_path:
        drilled = index.by_guid.get(drill_path[-1])
        if drilled is None:
            logger.debug("drill scope %s no longer exists; rendering top level", drill_path[-1])

    if drilled is not None:
        entries.append(
            ThreadEntry(
                thread=drilled,
                label=drilled.name,
                indent=0,
                faved=drilled.guid in faved,
                is_back_link=True,
            )
        )
        roots = list(index.children.get(drilled.guid, ()))
        if is_meta_thread(drilled) and roots:
            entries.extend(
                _grouped_entries(roots, index, collapsed=collapsed, faved=faved, avatars=avatars)
            )
            return entries
    else:
        entries.append(MainEntry(label=main_label))

    at_top = drilled is None
    shown: set[str] = set()

    def emit(thread: Thread) -> None:
        entries.append(_thread_entry(thread, index, faved))
        shown.add(thread.guid)

    if at_top:
        for thread in roots:
            if is_meta_thread(thread):
                emit(thread)
                break

    for thread in [item for item in roots if item.guid not in shown and has_unread_mentions(item.guid)]:
        emit(thread)

    for thread in sorted(
        (item for item in roots if item.guid in faved and item.guid not in shown),
        key=lambda item: item.name,
    ):
        emit(thread)

    if at_top:
        for collection in (MessageCollection.OPEN_QUESTIONS, MessageCollection.STALE_QUESTIONS):
            if question_counts.get(collection, 0) > 0:
                entries.append(MessageCollectionEntry(collection=collection, label=collection.value))

    recent = [
        item
        for item in roots
        if item.guid in subscribed and item.guid not in shown and item.guid not in muted
    ]
    def recency(item: Thread) -> int:
        stamp = last_activity(item.guid) if last_activity is not None else None
        return item.activity_timestamp() if stamp is None else stamp

    # sorted() is stable, so equal timestamps keep input order.
    for thread in sorted(recent, key=recency, reverse=True):
        emit(thread)

    others = sorted(
        (item for item in roots if item.guid not in shown and item.guid not in muted),
        key=lambda item: item.name,
    )
    for thread in others:
        entries.append(
            ThreadEntry(
                thread=thread,
                label=thread.name,
                indent=max_subtree_depth(thread.guid, index.children),
                has_children=False,
                collapsed=True,
                faved=False,
            )
        )

    if muted and at_top:
        entries.append(ThreadCollectionEntry(collection=ThreadCollection.MUTED, label=MUTED_COLLECTION_LABEL))

    if search_results:
        entries.append(SeparatorEntry(label=SEARCH_SEPARATOR_LABEL))
        for thread in search_results:
            entries.append(ThreadEntry(thread=thread, label=thread.name, indent=0))

    return entries


def build_muted_collection_entries(threads: Sequence[Thread], muted: set[str]) -> list[Entry]:
    """Return the muted-collection view: its pointer row, then each muted thread."""
    entries: list[Entry] = [
        ThreadCollectionEntry(collection=ThreadCollection.MUTED, label=MUTED_COLLECTION_LABEL)
    ]
    for thread in threads:
        if thread.guid in muted:
            entries.append(ThreadEntry(thread=thread, label=thread.name, indent=0))
    return entries
