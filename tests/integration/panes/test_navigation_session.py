"""End-to-end key and mouse session through the panes façade.

Drives ``NavigationPanes`` the way a terminal loop would and checks both
controller state and rendered panel rows after each step.
"""

from __future__ import annotations

import unittest
from unittest import mock

from threadviewer.channel_pane import ChannelList
from threadviewer.pane import FOCUS_MAIN, NavigationPanes
from threadviewer.storage import SnapshotThreadSource
from threadviewer.thread_model import ChannelRecord, Thread
from threadviewer.thread_pane import OpenTarget, ThreadNavigator, ThreadPaneRenderer, TopLevel, ViewingCollection
from threadviewer.ui_theme import MONO_THEME

THREAD_COL = 5


def _source() -> SnapshotThreadSource:
    return SnapshotThreadSource(
        threads=[
            Thread("t-meta", "meta"),
            Thread("t-design", "design", parent_thread="t-meta"),
            Thread("t-opus", "opus", parent_thread="t-meta"),
            Thread("t-notes", "notes", parent_thread="t-opus"),
            Thread("t-role", "role-reviewer", parent_thread="t-meta"),
            Thread("t-other", "other"),
            Thread("t-noisy", "noisy"),
        ],
        directory=[Thread("t-spec", "spec-review", parent_thread="t-opus")],
        muted={"t-noisy"},
    )


class NavigationSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.opened: list[OpenTarget] = []
        self.switched: list[ChannelRecord] = []
        navigator = ThreadNavigator(_source(), viewport_rows=12, on_open=self.opened.append)
        channels = ChannelList(
            [ChannelRecord("c-1", "alpha", "/a"), ChannelRecord("c-2", "beta", "/b")],
            current_path="/a",
        )
        self.panes = NavigationPanes(
            navigator,
            channels,
            monotonic=mock.Mock(side_effect=[0.0, 5.0]),
            on_channel_switch=self.switched.append,
        )
        self.navigator = navigator

    def _rows(self) -> list[str]:
        return ThreadPaneRenderer(self.navigator, MONO_THEME).render().rows

    def _press(self, *keys: str) -> None:
        for key in keys:
            self.panes.on_key(key)

    def test_session(self) -> None:
        self.assertEqual(self._rows()[2:], ["   #main", "   meta ❯", "   other", "   muted (1)"])

        # meta opens as grouped sections; the cursor skips section headers.
        self._press("j", "l")
        self.assertEqual(
            self._rows()[2:],
            [
                " ❮ meta",
                " ─ topics ─",
                "   design",
                " ─ agents ─",
                "   opus ❯",
                " ─ roles ─",
                "   role-reviewer",
            ],
        )
        self._press("j", "j")
        self.assertEqual(self.navigator.selected, 4)

        # Drilling from meta into an agent opens its notes thread.
        self._press("l")
        self.assertEqual(self.navigator.drill.ids, ("t-meta", "t-opus"))
        self.assertEqual(self.opened[-1].thread.name, "notes")
        self.assertEqual(self._rows()[0], " ❮❮ meta/opus/ ")

        self._press("h", "ESC")
        self.assertEqual(self.navigator.mode(), TopLevel())
        self.assertEqual(self.navigator.selected, 1)

        # A nested search result drills to its parent when chosen.
        self._press(" ", *"spec")
        self.assertIn(" Search results:", self._rows())
        self._press("ENTER")
        self.assertEqual(self.opened[-1].thread.guid, "t-spec")
        self.assertEqual(self.navigator.drill.ids, ("t-meta", "t-opus"))
        self.assertFalse(self.navigator.filter.active)

        self._press("ESC", "ESC")
        self.assertEqual(self.navigator.mode(), TopLevel())

        # Click the muted pointer twice: select, then open the collection.
        self._press(f"MOUSE_LEFT_DOWN:{THREAD_COL}:6", f"MOUSE_LEFT_DOWN:{THREAD_COL}:6")
        self.assertEqual(self.navigator.mode(), ViewingCollection("muted"))
        self.assertEqual(self._rows()[2:], [" ❮ muted (1)", "   noisy"])
        self._press("ESC")
        self.assertEqual(self.navigator.mode(), TopLevel())

        # Switching channels resets thread navigation and hands focus to main.
        self._press("j", "l")
        self.assertEqual(self.navigator.drill.depth(), 1)
        self._press("TAB", "j", "ENTER")
        self.assertEqual([channel.id for channel in self.switched], ["c-2"])
        self.assertEqual(self.panes.focus, FOCUS_MAIN)
        self.assertEqual(self.navigator.drill.depth(), 0)
        self.assertEqual(self.navigator.selected, 0)


if __name__ == "__main__":
    unittest.main()
