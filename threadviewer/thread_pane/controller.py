"""Thread-panel navigation controller.

Owns the per-channel navigation context (drill stack, filter, scroll and
selection, collection view) and turns key, click, and wheel input into
changes of that context. Entries are rebuilt from the thread source on every
call, so the live collection may change between any two events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from ..ansi import measure_height
from ..storage import ThreadSource
from ..thread_model import (
    Entry,
    LabelContext,
    MainEntry,
    MessageCollection,
    MessageCollectionEntry,
    SeparatorEntry,
    Thread,
    ThreadCollection,
    ThreadCollectionEntry,
    ThreadEntry,
    ThreadPathLoopError,
    ancestor_path,
    build_muted_collection_entries,
    build_thread_entries,
    clamp_selection,
    find_collection_entry_index,
    find_thread_entry_index,
    format_entry_label,
    index_threads,
    is_selectable,
    selectable_indices,
    step_selection,
    thread_path,
)
from .drill import DrillStack
from .filter import ThreadFilter
from .hit_test import RowMap, build_row_map, locate_wrapped
from .scroll import ScrollState, ScrollWindow, clamp_and_window, scroll_by

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 2
FILTER_HINT = "   <space> to filter"
NOTES_THREAD_NAME = "notes"
WHEEL_STEP = 3


@dataclass(frozen=True)
class TopLevel:
    pass


@dataclass(frozen=True)
class Drilled:
    depth: int


@dataclass(frozen=True)
class ViewingCollection:
    name: str


NavigationMode = TopLevel | Drilled | ViewingCollection


@dataclass(frozen=True)
class OpenTarget:
    """What the message view currently shows: main, one thread, or a question collection."""

    thread: Thread | None = None
    collection: MessageCollection | None = None

    @property
    def is_main(self) -> bool:
        return self.thread is None and self.collection is None

    def matches(self, entry: Entry) -> bool:
        if isinstance(entry, MainEntry):
            return self.is_main
        if isinstance(entry, ThreadEntry):
            return self.thread is not None and entry.thread.guid == self.thread.guid
        if isinstance(entry, MessageCollectionEntry):
            return self.collection is entry.collection
        return False


@dataclass
class NavigationContext:
    """Mutable thread-panel state scoped to the active channel."""

    drill: DrillStack = field(default_factory=DrillStack)
    filter: ThreadFilter = field(default_factory=ThreadFilter)
    scroll: ScrollState = field(default_factory=ScrollState)
    viewing_collection: ThreadCollection | None = None
    has_focus: bool = True
    follow_selection: bool = True
    current: OpenTarget = field(default_factory=OpenTarget)
    collapsed: set[str] = field(default_factory=set)


class ThreadNavigator:
    """Stateful controller behind the thread panel."""

    def __init__(
        self,
        source: ThreadSource,
        *,
        main_label: str = "#main",
        viewport_rows: int = 20,
        wrap_width: int = 0,
        on_open: Callable[[OpenTarget], None] | None = None,
        show_filter_hint: bool = True,
    ) -> None:
        self.source = source
        self.main_label = main_label
        self.viewport_rows = max(1, viewport_rows)
        self.wrap_width = wrap_width
        self.on_open = on_open
        self.show_filter_hint = show_filter_hint
        self.context = NavigationContext()
        self.status = ""

    # state accessors
    @property
    def drill(self) -> DrillStack:
        return self.context.drill

    @property
    def filter(self) -> ThreadFilter:
        return self.context.filter

    @property
    def scroll(self) -> ScrollState:
        return self.context.scroll

    @property
    def selected(self) -> int:
        return self.context.scroll.selected

    @selected.setter
    def selected(self, value: int) -> None:
        self.context.scroll.selected = value

    def set_focus(self, focused: bool) -> None:
        self.context.has_focus = focused

    def mode(self) -> NavigationMode:
        if self.context.viewing_collection is not None:
            return ViewingCollection(self.context.viewing_collection.value)
        if self.drill.depth() > 0:
            return Drilled(self.drill.depth())
        return TopLevel()

    def reset(self) -> None:
        """Forget drill, filter, scroll, and collection state (channel switch)."""
        self.context = NavigationContext(has_focus=self.context.has_focus)
        self.status = ""

    # entries
    def threads(self) -> list[Thread]:
        return self.source.get_threads()

    def _flag_set(self, threads: Sequence[Thread], lookup: Callable[[str], bool]) -> set[str]:
        return {thread.guid for thread in threads if lookup(thread.guid)}

    def entries(self) -> list[Entry]:
        """Return the full unfiltered entry sequence for the current mode."""
        threads = self.threads()
        muted = self._flag_set(threads, self.source.is_muted)
        if self.context.viewing_collection is ThreadCollection.MUTED:
            return build_muted_collection_entries(threads, muted)
        search_results = self.filter.state.search_results if self.filter.active else ()
        return build_thread_entries(
            threads,
            self.drill.ids,
            collapsed=self.context.collapsed,
            faved=self._flag_set(threads, self.source.is_favorited),
            muted=muted,
            subscribed=self._flag_set(threads, self.source.is_subscribed),
            question_counts=self.source.question_counts(),
            avatars=self.source.avatars(),
            search_results=search_results,
            main_label=self.main_label,
            last_activity=self.source.last_activity,
        )

    def active_indices(self, entries: Sequence[Entry] | None = None) -> list[int]:
        entries = self.entries() if entries is None else entries
        if self.filter.active:
            self.filter.recompute(entries)
        return self.filter.active_indices(entries)

    def selected_entry(self, entries: Sequence[Entry] | None = None) -> Entry | None:
        entries = self.entries() if entries is None else entries
        if 0 <= self.selected < len(entries):
            return entries[self.selected]
        return None

    def visible_window(self) -> ScrollWindow:
        """Clamp the scroll offset and return the entries that fit in the viewport.

        Fitting counts display rows: wrapped labels take several rows and the
        search heading restored by :meth:`display_indices` takes one. While
        following the selection, the offset advances until the selected
        entry's last row fits.
        """
        entries = self.entries()
        active = self.active_indices(entries)
        following = self.context.has_focus and self.context.follow_selection
        window = clamp_and_window(active, self.selected, self.viewport_rows, self.scroll.offset, following)
        offset = window.offset
        if following and self.selected in active:
            position = active.index(self.selected)
            while offset < position:
                if self._rows_through(entries, active[offset:], self.selected) <= self.viewport_rows:
                    break
                offset += 1
        self.scroll.offset = offset
        fitted = {idx for idx, _height in self._fit_rows(entries, active[offset:])}
        return ScrollWindow(offset=offset, visible=[idx for idx in active[offset:] if idx in fitted])

    def display_indices(self, entries: Sequence[Entry], visible: Sequence[int]) -> list[int]:
        """Return ``visible`` with the search separator restored ahead of search results.

        Filtering never matches separators, so the heading row above
        supplementary search results is re-inserted here for display.
        """
        separator = next(
            (idx for idx, entry in enumerate(entries) if isinstance(entry, SeparatorEntry)),
            None,
        )
        if separator is None or separator in visible:
            return list(visible)
        rows: list[int] = []
        inserted = False
        for idx in visible:
            if not inserted and idx > separator:
                rows.append(separator)
                inserted = True
            rows.append(idx)
        return rows

    def _rows_through(self, entries: Sequence[Entry], candidates: Sequence[int], target: int) -> int:
        """Count display rows from the first candidate down to the end of ``target``."""
        used = 0
        for idx in self.display_indices(entries, candidates):
            used += self.row_height(entries[idx])
            if idx == target:
                break
        return used

    def _fit_rows(self, entries: Sequence[Entry], candidates: Sequence[int]) -> list[tuple[int, int]]:
        """Return ``(index, height)`` for each display entry that starts inside the viewport."""
        fitted: list[tuple[int, int]] = []
        used = 0
        for idx in self.display_indices(entries, candidates):
            if used >= self.viewport_rows:
                break
            height = self.row_height(entries[idx])
            fitted.append((idx, height))
            used += height
        return fitted

    def row_map(self) -> RowMap:
        """Map each drawn content row to its entry; the last entry may be cut short."""
        entries = self.entries()
        window = self.visible_window()
        fitted = self._fit_rows(entries, window.visible)
        row_map = build_row_map([idx for idx, _height in fitted], [height for _idx, height in fitted])
        return RowMap(rows=row_map.rows[: self.viewport_rows])

    def row_height(self, entry: Entry) -> int:
        if self.wrap_width <= 0 or not is_selectable(entry):
            return 1
        return measure_height(self.label_for(entry), self.wrap_width)

    # labels and header
    def label_context(self) -> LabelContext:
        threads = self.threads()
        question_counts = self.source.question_counts()
        return LabelContext(
            drill_depth=self.drill.depth(),
            main_label=self.main_label,
            main_unread_count=self.source.main_unread_count(),
            subscribed=frozenset(self._flag_set(threads, self.source.is_subscribed)),
            unread_counts={thread.guid: self.source.unread_count(thread.guid) for thread in threads},
            nicknames=self.source.nicknames(),
            question_counts=question_counts,
            muted_count=len(self._flag_set(threads, self.source.is_muted)),
            viewing_muted=self.context.viewing_collection is ThreadCollection.MUTED,
        )

    def label_for(self, entry: Entry, ctx: LabelContext | None = None) -> str:
        return format_entry_label(entry, ctx or self.label_context())

    def header_line_count(self) -> int:
        return HEADER_LINE_COUNT

    def drill_path_text(self) -> str:
        """Return the slash-joined path of the drilled thread, or ``""``."""
        threads = self.threads()
        scope = self.drill.current_scope(threads)
        if scope is None:
            return ""
        by_guid = index_threads(threads).by_guid
        try:
            return thread_path(scope, by_guid)
        except ThreadPathLoopError:
            logger.debug("thread path loop at %s; showing name only", scope.guid)
            return scope.name

    def header_text(self) -> str:
        if self.filter.active:
            if not self.filter.text:
                return " filter: "
            return f" filter: {self.filter.text} "
        depth = self.drill.depth()
        if depth > 0:
            path = self.drill_path_text()
            if path:
                return f" {'❮' * depth} {path}/ "
        return FILTER_HINT if self.show_filter_hint else ""

    # selection
    def move_selection(self, delta: int) -> bool:
        entries = self.entries()
        selectable = set(selectable_indices(entries))
        indices = [idx for idx in self.active_indices(entries) if idx in selectable]
        target = step_selection(indices, self.selected, delta)
        self.context.follow_selection = True
        if target is None:
            return False
        changed = target != self.selected
        self.selected = target
        return changed

    def _open(self, target: OpenTarget) -> None:
        self.context.current = target
        if self.on_open is not None:
            self.on_open(target)

    def _focus_thread(self, guid: str) -> None:
        entries = self.entries()
        idx = find_thread_entry_index(entries, guid)
        self.selected = idx if idx is not None else clamp_selection(entries, self.selected)

    def _enter_collection(self, collection: ThreadCollection) -> None:
        if self.drill.depth() > 0:
            self.drill.clear()
        self.context.viewing_collection = collection
        self.scroll.reset()

    def _exit_collection(self) -> None:
        self.context.viewing_collection = None
        self.scroll.reset()

    def select(self) -> bool:
        """Act on the selected entry without drilling into it."""
        entries = self.entries()
        entry = self.selected_entry(entries)
        if entry is None:
            return False

        if isinstance(entry, MainEntry):
            self._open(OpenTarget())
            return True

        if isinstance(entry, ThreadEntry):
            thread = entry.thread
            filtering = self.filter.active
            if filtering and thread.parent_thread:
                self._drill_to_parent(thread)
            self._open(OpenTarget(thread=thread))
            if filtering:
                self.reset_filter()
                self._focus_thread(thread.guid)
            return True

        if isinstance(entry, MessageCollectionEntry):
            self._open(OpenTarget(collection=entry.collection))
            return True

        if isinstance(entry, ThreadCollectionEntry):
            if entry.collection is not ThreadCollection.MUTED:
                return False
            if self.context.viewing_collection is ThreadCollection.MUTED:
                self._exit_collection()
            else:
                self._enter_collection(ThreadCollection.MUTED)
            return True

        return False

    def _drill_to_parent(self, thread: Thread) -> None:
        by_guid = index_threads(self.threads()).by_guid
        parent = by_guid.get(thread.parent_thread or "")
        if parent is None:
            logger.debug("parent %r of %s is not loaded; keeping drill stack", thread.parent_thread, thread.guid)
            return
        try:
            path = ancestor_path(parent, by_guid)
        except ThreadPathLoopError:
            logger.debug("thread path loop above %s; keeping drill stack", thread.guid)
            return
        self.context.viewing_collection = None
        self.drill.replace(path)
        self.scroll.offset = 0

    def drill_in(self) -> bool:
        entries = self.entries()
        entry = self.selected_entry(entries)
        if not isinstance(entry, ThreadEntry):
            return False

        threads = self.threads()
        scope = self.drill.current_scope(threads)
        if scope is not None and entry.thread.guid == scope.guid:
            return self.select()

        index = index_threads(threads)
        children = index.children.get(entry.thread.guid, [])
        if not children:
            return self.select()

        if self.context.viewing_collection is not None:
            self._exit_collection()
        self.drill.push(entry.thread, True)
        self.scroll.reset()
        self.context.follow_selection = True

        if scope is not None and scope.name == "meta":
            notes = next((child for child in children if child.name == NOTES_THREAD_NAME), None)
            if notes is not None:
                idx = find_thread_entry_index(self.entries(), notes.guid)
                if idx is not None:
                    self.selected = idx
                    self.select()
        return True

    def drill_out(self) -> bool:
        if self.context.viewing_collection is not None:
            collection = self.context.viewing_collection
            self._exit_collection()
            idx = find_collection_entry_index(self.entries(), collection)
            self.selected = idx if idx is not None else 0
            return True
        if self.drill.depth() == 0:
            return False
        returning_from = self.drill.pop()
        self.scroll.offset = 0
        self.context.follow_selection = True
        if returning_from:
            self._focus_thread(returning_from)
        return True

    def toggle_fave(self) -> bool:
        entry = self.selected_entry()
        if not isinstance(entry, ThreadEntry):
            return False
        thread = entry.thread
        faved = self.source.is_favorited(thread.guid)
        try:
            self.source.set_favorited(thread.guid, not faved)
        except Exception as exc:
            logger.warning("failed to update favorite for %s", thread.guid, exc_info=True)
            self.status = f"Error {'unfaving' if faved else 'faving'}: {exc}"
            return True
        self.status = f"{'Unfaved' if faved else 'Faved'} {thread.name}"
        return True

    # filter
    def _apply_filter_change(self, text_changed: bool = True) -> None:
        threads = self.threads()
        self.filter.refresh_search(self.source.search_threads, (thread.guid for thread in threads))
        self.filter.recompute(self.entries())
        self.selected = self.filter.snap_selection(self.selected, text_changed=text_changed)
        self.context.follow_selection = True

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

    def set_filter_text(self, text: str) -> None:
        """Activate the filter if needed and replace its text in one step."""
        if not self.filter.active:
            self.filter.activate()
        self.filter.set_text(text)
        self._apply_filter_change()

    def backspace(self) -> bool:
        if not self.filter.active:
            return False
        self.filter.backspace()
        self._apply_filter_change()
        return True

    def reset_filter(self) -> None:
        self.filter.deactivate()
        self.scroll.offset = 0
        self.selected = clamp_selection(self.entries(), self.selected)

    # input
    def on_key(self, key: str) -> bool:
        if key == "ESC":
            if self.filter.active:
                self.reset_filter()
                return True
            if self.context.viewing_collection is not None:
                self._exit_collection()
                return True
            if self.drill.depth() > 0:
                return self.drill_out()
            return False

        if not self.context.has_focus:
            return False

        if not self.filter.active and key == " ":
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
        if key in {"h", "LEFT"}:
            self.drill_out()
            return True
        if key in {"l", "RIGHT"}:
            self.drill_in()
            return True
        if key == "ENTER":
            self.select()
            if self.filter.active:
                self.reset_filter()
            return True
        if key in {"f", "CTRL_F"}:
            self.toggle_fave()
            return True
        return False

    def on_click(self, screen_line: int, is_double: bool = False) -> bool:
        """Handle a click at ``screen_line`` relative to the panel top.

        Clicking a new entry selects it; clicking the selected entry again
        (or double-clicking) drills into it, or opens it when it is not the
        entry already shown. The header line drills out while drilled in.
        """
        self.context.has_focus = True
        entries = self.entries()
        index = locate_wrapped(screen_line, self.header_line_count(), entries, self.row_map())
        if index is None:
            if screen_line == 0 and self.drill.depth() > 0 and not self.filter.active:
                self.drill_out()
            return True

        self.context.follow_selection = True
        if index != self.selected and not is_double:
            self.selected = index
            return True

        self.selected = index
        if self.context.current.matches(entries[index]) or is_double:
            self.drill_in()
        else:
            self.select()
        return True

    def on_scroll(self, direction: int) -> bool:
        """Scroll the list by wheel notches without moving the selection."""
        if direction == 0:
            return False
        total = len(self.active_indices())
        new_offset = scroll_by(self.scroll.offset, direction * WHEEL_STEP, total, self.viewport_rows)
        self.context.follow_selection = False
        if new_offset == self.scroll.offset:
            return False
        self.scroll.offset = new_offset
        return True
