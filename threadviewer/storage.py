"""Data-access seam for thread and channel records.

Panels only read through :class:`ThreadSource`. ``SnapshotThreadSource`` is an
in-memory implementation built from a JSON snapshot, used by the CLI and
tests; a database-backed source only needs to satisfy the same protocol.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .thread_model import ChannelRecord, MessageCollection, Thread

logger = logging.getLogger(__name__)


class ThreadSource(Protocol):
    """Read-only lookups the navigation panels consume."""

    def get_threads(self) -> list[Thread]: ...

    def search_threads(self, text: str) -> list[Thread]: ...

    def is_favorited(self, guid: str) -> bool: ...

    def is_subscribed(self, guid: str) -> bool: ...

    def is_muted(self, guid: str) -> bool: ...

    def unread_count(self, guid: str) -> int: ...

    def last_activity(self, guid: str) -> int | None: ...

    def question_counts(self) -> Mapping[MessageCollection, int]: ...

    def avatars(self) -> Mapping[str, str]: ...

    def nicknames(self) -> Mapping[str, str]: ...

    def main_unread_count(self) -> int: ...

    def set_favorited(self, guid: str, faved: bool) -> None: ...


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be decoded."""


@dataclass
class SnapshotThreadSource:
    """In-memory thread source.

    ``threads`` are the locally subscribed-to records returned by
    :meth:`get_threads`; ``directory`` holds additional records only reachable
    through :meth:`search_threads`.
    """

    threads: list[Thread] = field(default_factory=list)
    directory: list[Thread] = field(default_factory=list)
    faved: set[str] = field(default_factory=set)
    subscribed: set[str] = field(default_factory=set)
    muted: set[str] = field(default_factory=set)
    unread: dict[str, int] = field(default_factory=dict)
    nickname_map: dict[str, str] = field(default_factory=dict)
    avatar_map: dict[str, str] = field(default_factory=dict)
    questions: dict[MessageCollection, int] = field(default_factory=dict)
    room_unread: int = 0
    channels: list[ChannelRecord] = field(default_factory=list)
    current_path: str = ""

    def get_threads(self) -> list[Thread]:
        return list(self.threads)

    def search_threads(self, text: str) -> list[Thread]:
        """Return every known thread whose name contains ``text`` (case-insensitive)."""
        term = text.strip().lower()
        if not term:
            return []
        seen: set[str] = set()
        results: list[Thread] = []
        for thread in [*self.threads, *self.directory]:
            if thread.guid in seen:
                continue
            seen.add(thread.guid)
            if term in thread.name.lower():
                results.append(thread)
        return results

    def is_favorited(self, guid: str) -> bool:
        return guid in self.faved

    def is_subscribed(self, guid: str) -> bool:
        return guid in self.subscribed

    def is_muted(self, guid: str) -> bool:
        return guid in self.muted

    def unread_count(self, guid: str) -> int:
        return self.unread.get(guid, 0)

    def last_activity(self, guid: str) -> int | None:
        for thread in self.threads:
            if thread.guid == guid:
                return thread.last_activity_at
        return None

    def question_counts(self) -> Mapping[MessageCollection, int]:
        return dict(self.questions)

    def avatars(self) -> Mapping[str, str]:
        return dict(self.avatar_map)

    def nicknames(self) -> Mapping[str, str]:
        return dict(self.nickname_map)

    def main_unread_count(self) -> int:
        return self.room_unread

    def set_favorited(self, guid: str, faved: bool) -> None:
        if faved:
            self.faved.add(guid)
        else:
            self.faved.discard(guid)


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _thread_from_dict(raw: object) -> Thread | None:
    """Decode one thread record; malformed records are skipped."""
    if not isinstance(raw, dict):
        return None
    guid = raw.get("guid")
    name = raw.get("name")
    if not isinstance(guid, str) or not guid or not isinstance(name, str):
        return None
    parent = raw.get("parent_thread")
    return Thread(
        guid=guid,
        name=name,
        parent_thread=parent if isinstance(parent, str) else None,
        created_at=_optional_int(raw.get("created_at")) or 0,
        last_activity_at=_optional_int(raw.get("last_activity_at")),
    )


def _string_set(value: object) -> set[str]:
    if not isinstance(value, list):
        return set()
    return {item for item in value if isinstance(item, str)}


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {key: item for key, item in value.items() if isinstance(key, str) and isinstance(item, str)}


def _count_map(value: object) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    counts: dict[str, int] = {}
    for key, item in value.items():
        count = _optional_int(item)
        if isinstance(key, str) and count is not None:
            counts[key] = max(0, count)
    return counts


def snapshot_from_dict(data: Mapping[str, object]) -> SnapshotThreadSource:
    """Build a source from a decoded snapshot document.

    Unknown keys are ignored and malformed records are dropped with a debug
    log entry rather than failing the whole snapshot.
    """
    threads: list[Thread] = []
    for raw in data.get("threads") or []:
        thread = _thread_from_dict(raw)
        if thread is None:
            logger.debug("skipping malformed thread record: %r", raw)
            continue
        threads.append(thread)

    directory = [
        thread
        for thread in (_thread_from_dict(raw) for raw in data.get("directory") or [])
        if thread is not None
    ]

    questions: dict[MessageCollection, int] = {}
    for key, count in _count_map(data.get("question_counts")).items():
        try:
            questions[MessageCollection(key)] = count
        except ValueError:
            logger.debug("ignoring unknown question collection %r", key)

    channels: list[ChannelRecord] = []
    for raw in data.get("channels") or []:
        if not isinstance(raw, dict):
            continue
        channel_id = raw.get("id")
        if not isinstance(channel_id, str) or not channel_id:
            continue
        name = raw.get("name")
        path = raw.get("path")
        channels.append(
            ChannelRecord(
                id=channel_id,
                name=name if isinstance(name, str) else "",
                path=path if isinstance(path, str) else "",
            )
        )

    subscribed = _string_set(data.get("subscribed")) if "subscribed" in data else {t.guid for t in threads}
    room_unread = _optional_int(data.get("main_unread_count")) or 0
    current_path = data.get("current_path")
    return SnapshotThreadSource(
        threads=threads,
        directory=directory,
        faved=_string_set(data.get("faved")),
        subscribed=subscribed,
        muted=_string_set(data.get("muted")),
        unread=_count_map(data.get("unread_counts")),
        nickname_map=_string_map(data.get("nicknames")),
        avatar_map=_string_map(data.get("avatars")),
        questions=questions,
        room_unread=max(0, room_unread),
        channels=channels,
        current_path=current_path if isinstance(current_path, str) else "",
    )


def load_snapshot(path: Path) -> SnapshotThreadSource:
    """Read a JSON snapshot file into a :class:`SnapshotThreadSource`."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"cannot read snapshot {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError(f"snapshot {path} must contain a JSON object")
    return snapshot_from_dict(data)
