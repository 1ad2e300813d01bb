from __future__ import annotations

import unittest

from threadviewer.thread_model import (
    ChannelRecord,
    LabelContext,
    MainEntry,
    MessageCollection,
    MessageCollectionEntry,
    SectionHeaderEntry,
    SeparatorEntry,
    Thread,
    ThreadCollection,
    ThreadCollectionEntry,
    ThreadEntry,
    compute_thread_panel_width,
    format_channel_label,
    format_entry_label,
)
from threadviewer.thread_model.layout import channel_panel_width

DESIGN = Thread("d", "design")


class ThreadLabelTests(unittest.TestCase):
    def test_plain_thread_gets_blank_gutter(self) -> None:
        self.assertEqual(format_entry_label(ThreadEntry(DESIGN, "design")), "   design")

    def test_back_link_uses_back_gutter(self) -> None:
        entry = ThreadEntry(DESIGN, "design", is_back_link=True)

        self.assertEqual(format_entry_label(entry, LabelContext(drill_depth=1)), " ❮ design")

    def test_drillable_thread_gets_marker(self) -> None:
        entry = ThreadEntry(DESIGN, "design", has_children=True)

        self.assertEqual(format_entry_label(entry), "   design ❯")

    def test_gutter_priority_mention_then_avatar_then_star(self) -> None:
        entry = ThreadEntry(DESIGN, "design", faved=True, avatar="🦉")

        self.assertEqual(format_entry_label(entry, LabelContext(unread_mentions=frozenset({"d"}))), " ✦ design")
        self.assertEqual(format_entry_label(entry, LabelContext(unread_mentions=frozenset({"x"}))), " 🦉 design")
        self.assertEqual(format_entry_label(entry), " 🦉 design")
        self.assertEqual(format_entry_label(ThreadEntry(DESIGN, "design", faved=True)), " ★ design")

    def test_collapsed_unsubscribed_thread_shows_depth_chevrons(self) -> None:
        entry = ThreadEntry(DESIGN, "design", indent=2, collapsed=True)

        self.assertEqual(format_entry_label(entry), "   design ❯❯")

    def test_subscribed_thread_shows_unread_count(self) -> None:
        ctx = LabelContext(subscribed=frozenset({"d"}), unread_counts={"d": 3})

        self.assertEqual(format_entry_label(ThreadEntry(DESIGN, "design"), ctx), "   design (3)")

    def test_nickname_replaces_name_only_at_top_level(self) -> None:
        entry = ThreadEntry(DESIGN, "design")

        self.assertEqual(format_entry_label(entry, LabelContext(nicknames={"d": "ux"})), "   ux")
        self.assertEqual(
            format_entry_label(entry, LabelContext(drill_depth=1, nicknames={"d": "ux"})),
            "   design",
        )


class PseudoEntryLabelTests(unittest.TestCase):
    def test_main_entry_with_unread_count(self) -> None:
        ctx = LabelContext(main_label="#fray", main_unread_count=4)

        self.assertEqual(format_entry_label(MainEntry(), ctx), "   #fray (4)")

    def test_question_collection_count(self) -> None:
        entry = MessageCollectionEntry(MessageCollection.OPEN_QUESTIONS, "open-qs")
        ctx = LabelContext(question_counts={MessageCollection.OPEN_QUESTIONS: 2})

        self.assertEqual(format_entry_label(entry, ctx), "   open-qs (2)")

    def test_muted_pointer_switches_gutter_while_viewing(self) -> None:
        entry = ThreadCollectionEntry(ThreadCollection.MUTED, "muted")

        self.assertEqual(format_entry_label(entry, LabelContext(muted_count=2)), "   muted (2)")
        self.assertEqual(
            format_entry_label(entry, LabelContext(muted_count=2, viewing_muted=True)),
            " ❮ muted (2)",
        )

    def test_section_header_and_separator(self) -> None:
        self.assertEqual(format_entry_label(SectionHeaderEntry("agents")), " ─ agents ─")
        self.assertEqual(format_entry_label(SeparatorEntry("search")), "")

    def test_unknown_entry_type_raises(self) -> None:
        with self.assertRaises(TypeError):
            format_entry_label("not an entry")  # type: ignore[arg-type]


class ChannelLabelAndWidthTests(unittest.TestCase):
    def test_channel_label_falls_back_to_id(self) -> None:
        self.assertEqual(format_channel_label(ChannelRecord("c1", "fray", "/p")), "#fray")
        self.assertEqual(format_channel_label(ChannelRecord("c1", "", "/p")), "#c1")

    def test_thread_panel_width_has_floor_and_cap(self) -> None:
        self.assertEqual(compute_thread_panel_width(["short"]), 30)
        self.assertEqual(compute_thread_panel_width(["x" * 40]), 44)
        self.assertEqual(compute_thread_panel_width(["x" * 80], max_width=50), 50)

    def test_thread_panel_width_ignores_ansi(self) -> None:
        styled = "\033[1m" + "x" * 30 + "\033[0m"

        self.assertEqual(compute_thread_panel_width([styled]), 34)

    def test_channel_panel_width_is_capped(self) -> None:
        self.assertLessEqual(channel_panel_width(["#" + "c" * 60]), 30)


if __name__ == "__main__":
    unittest.main()
