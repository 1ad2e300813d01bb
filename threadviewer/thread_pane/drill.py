"""Drill stack: the chain of thread ids the thread panel is zoomed into."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..thread_model import Thread


class DrillStack:
    """Ordered thread ids from the outermost drilled thread to the current one.

    Only ids are stored. The current scope is looked up against the live thread
    collection on every call, so a thread removed between refreshes resolves
    to ``None`` while its id stays on the stack until popped.
    """

    def __init__(self, path: Iterable[str] = ()) -> None:
        self._path: list[str] = [guid for guid in path if guid]

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._path)

    def depth(self) -> int:
        return len(self._path)

    def top(self) -> str | None:
        return self._path[-1] if self._path else None

    def push(self, thread: Thread, has_children: bool) -> bool:
        """Push ``thread`` when it has children; leaves are rejected."""
        if not has_children:
            return False
        self._path.append(thread.guid)
        return True

    def pop(self) -> str:
        """Remove and return the top id, or ``""`` when already at top level."""
        if not self._path:
            return ""
        return self._path.pop()

    def replace(self, path: Sequence[str]) -> None:
        self._path = [guid for guid in path if guid]

    def clear(self) -> None:
        self._path.clear()

    def current_scope(self, threads: Iterable[Thread]) -> Thread | None:
        """Resolve the top id against ``threads``; ``None`` when unresolvable."""
        guid = self.top()
        if guid is None:
            return None
        for thread in threads:
            if thread.guid == guid:
                return thread
        return None

    def __len__(self) -> int:
        return len(self._path)

    def __repr__(self) -> str:
        return f"DrillStack({self._path!r})"
