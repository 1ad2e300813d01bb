from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from threadviewer import config


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "nested" / "threadviewer.json"
        patcher = mock.patch("threadviewer.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _write(self, text: str) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(text, encoding="utf-8")

    def test_missing_file_yields_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertIsNone(config.load_theme_name())
        self.assertEqual(config.load_thread_panel_max_width(), config.DEFAULT_THREAD_PANEL_MAX_WIDTH)
        self.assertEqual(config.load_double_click_seconds(), config.DEFAULT_DOUBLE_CLICK_SECONDS)
        self.assertTrue(config.load_show_filter_hint())

    def test_malformed_file_is_ignored_with_warning(self) -> None:
        self._write("{not json")

        with self.assertLogs("threadviewer.config", level="WARNING"):
            self.assertEqual(config.load_config(), {})

    def test_non_object_document_is_ignored(self) -> None:
        self._write("[1, 2, 3]")

        self.assertEqual(config.load_config(), {})

    def test_save_preserves_other_keys(self) -> None:
        config.save_theme_name("mono")
        config.save_show_filter_hint(False)

        saved = config.load_config()
        self.assertEqual(saved, {"theme": "mono", "show_filter_hint": False})
        self.assertEqual(config.load_theme_name(), "mono")
        self.assertFalse(config.load_show_filter_hint())

    def test_thread_panel_max_width_bounds(self) -> None:
        cases = [(80, 80), (26, 26), (120, 120), (25, 50), (121, 50), (True, 50), ("60", 50), (60.0, 50)]
        for value, expected in cases:
            with self.subTest(value=value):
                config.save_config({"thread_panel_max_width": value})
                self.assertEqual(config.load_thread_panel_max_width(), expected)

    def test_double_click_seconds_bounds(self) -> None:
        cases = [(0.5, 0.5), (2, 2.0), (0, 0.35), (-1, 0.35), (2.5, 0.35), (True, 0.35), ("0.5", 0.35)]
        for value, expected in cases:
            with self.subTest(value=value):
                config.save_config({"double_click_seconds": value})
                self.assertEqual(config.load_double_click_seconds(), expected)

    def test_filter_hint_accepts_only_booleans(self) -> None:
        config.save_config({"show_filter_hint": "no"})

        self.assertTrue(config.load_show_filter_hint())

    def test_blank_theme_name_is_unset(self) -> None:
        config.save_config({"theme": "   "})

        self.assertIsNone(config.load_theme_name())

    def test_unwritable_location_logs_and_continues(self) -> None:
        self._write("")
        blocked = self.config_path / "child.json"
        with mock.patch("threadviewer.config.CONFIG_PATH", blocked):
            with self.assertLogs("threadviewer.config", level="WARNING"):
                config.save_theme_name("mono")


if __name__ == "__main__":
    unittest.main()
