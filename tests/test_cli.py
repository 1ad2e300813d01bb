"""CLI behavior tests.

Runs ``threadviewer.cli.main`` against temporary snapshot files with the
config path redirected, and checks the printed panels.
"""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from threadviewer import cli, config
from threadviewer.storage import snapshot_from_dict

SNAPSHOT = {
    "threads": [
        {"guid": "t-meta", "name": "meta"},
        {"guid": "t-opus", "name": "opus", "parent_thread": "t-meta"},
        {"guid": "t-notes", "name": "notes", "parent_thread": "t-opus"},
        {"guid": "t-other", "name": "other"},
    ],
    "channels": [{"id": "c-1", "name": "fray", "path": "/work/fray"}],
    "current_path": "/work/fray",
}


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.snapshot = self.root / "snapshot.json"
        self.snapshot.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
        patcher = mock.patch("threadviewer.config.CONFIG_PATH", self.root / "config" / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *args: str) -> list[str]:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            cli.main([str(self.snapshot), "--rows", "5", *args])
        return stdout.getvalue().splitlines()

    def test_prints_thread_and_channel_panels_side_by_side(self) -> None:
        lines = self._run("--no-color")

        self.assertEqual(lines[0], "   <space> to filter".ljust(30) + "  Channels")
        self.assertEqual(lines[2], "   #main".ljust(30) + "  #fray")
        self.assertEqual(lines[3], "   meta ❯")
        self.assertEqual(lines[4], "   other")

    def test_drill_path_opens_nested_level(self) -> None:
        lines = self._run("--no-color", "--drill", "meta")

        self.assertTrue(lines[0].startswith(" ❮ meta/ "))
        self.assertTrue(lines[2].startswith(" ❮ meta "))
        self.assertIn(" ─ agents ─", lines)
        self.assertIn("   opus ❯", lines)

    def test_filter_text_limits_rows(self) -> None:
        output = "\n".join(self._run("--no-color", "--filter", "ot"))

        self.assertIn(" filter: ot ", output)
        self.assertIn("   other", output)
        self.assertNotIn("meta", output)

    def test_color_output_uses_escape_sequences_unless_disabled(self) -> None:
        self.assertTrue(any("\033[" in line for line in self._run()))
        self.assertFalse(any("\033[" in line for line in self._run("--no-color")))

    def test_unknown_drill_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self._run("--drill", "meta/missing")

        self.assertEqual(str(raised.exception), "Unknown thread path: meta/missing")

    def test_missing_snapshot_exits(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            cli.main([str(self.root / "absent.json")])

        self.assertIn("Path not found", str(raised.exception))

    def test_malformed_snapshot_exits(self) -> None:
        self.snapshot.write_text("[1, 2]", encoding="utf-8")

        with self.assertRaises(SystemExit) as raised:
            self._run()

        self.assertIn("must contain a JSON object", str(raised.exception))

    def test_rows_must_be_positive(self) -> None:
        with mock.patch("sys.stderr", new_callable=io.StringIO), self.assertRaises(SystemExit):
            cli.main([str(self.snapshot), "--rows", "0"])

    def test_known_theme_is_remembered_for_later_runs(self) -> None:
        self._run("--theme", "mono")

        self.assertEqual(config.load_theme_name(), "mono")
        self.assertFalse(any("\033[" in line for line in self._run()))

    def test_unknown_theme_is_not_remembered(self) -> None:
        self._run("--theme", "neon")

        self.assertIsNone(config.load_theme_name())

    def test_filter_hint_choice_is_remembered(self) -> None:
        self._run("--no-color", "--filter-hint", "hide")

        self.assertFalse(config.load_show_filter_hint())
        self.assertNotIn("<space> to filter", self._run("--no-color")[0])

        self._run("--no-color", "--filter-hint", "show")
        self.assertTrue(self._run("--no-color")[0].startswith("   <space> to filter"))


class ResolveDrillPathTests(unittest.TestCase):
    def test_resolves_names_level_by_level(self) -> None:
        source = snapshot_from_dict(SNAPSHOT)

        self.assertEqual(cli.resolve_drill_path(source, "meta/opus"), ["t-meta", "t-opus"])
        self.assertEqual(cli.resolve_drill_path(source, "/meta/"), ["t-meta"])


if __name__ == "__main__":
    unittest.main()
