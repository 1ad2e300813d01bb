"""Entry-index navigation helpers shared by keyboard and pointer handling."""

from __future__ import annotations

from collections.abc import Sequence

from .types import Entry, ThreadCollection, ThreadCollectionEntry, ThreadEntry, is_selectable


def selectable_indices(entries: Sequence[Entry]) -> list[int]:
    """Return indices of entries a cursor may land on, in order."""
    return [idx for idx, entry in enumerate(entries) if is_selectable(entry)]


def step_selection(indices: Sequence[int], selected: int, delta: int) -> int | None:
    """Move ``delta`` rows through ``indices`` starting from ``selected``.

    Movement wraps around both ends. A selection that is not in ``indices``
    counts as sitting on the first row. Returns ``None`` for an empty list.
    """
    if not indices:
        return None
    try:
        current = list(indices).index(selected)
    except ValueError:
        current = 0
    return indices[(current + delta) % len(indices)]


def find_thread_entry_index(entries: Sequence[Entry], guid: str) -> int | None:
    """Return the index of the first thread row wrapping ``guid``."""
    for idx, entry in enumerate(entries):
        if isinstance(entry, ThreadEntry) and entry.thread.guid == guid:
            return idx
    return None


def find_collection_entry_index(entries: Sequence[Entry], collection: ThreadCollection) -> int | None:
    for idx, entry in enumerate(entries):
        if isinstance(entry, ThreadCollectionEntry) and entry.collection is collection:
            return idx
    return None


def clamp_selection(entries: Sequence[Entry], selected: int) -> int:
    """Clamp ``selected`` into range and move it onto a selectable entry.

    Prefers the nearest selectable entry at or after ``selected``, then the
    nearest one before it. Returns 0 when nothing is selectable.
    """
    if not entries:
        return 0
    selected = max(0, min(selected, len(entries) - 1))
    for idx in range(selected, len(entries)):
        if is_selectable(entries[idx]):
            return idx
    for idx in range(selected - 1, -1, -1):
        if is_selectable(entries[idx]):
            return idx
    return 0
