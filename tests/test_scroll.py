from __future__ import annotations

import unittest

from threadviewer.thread_pane import ScrollState, clamp_and_window, scroll_by


class ClampAndWindowTests(unittest.TestCase):
    def test_selection_moving_past_bottom_scrolls_by_one(self) -> None:
        active = list(range(100))

        first = clamp_and_window(active, 9, 10, 0, True)
        second = clamp_and_window(active, 10, 10, first.offset, True)

        self.assertEqual(first.offset, 0)
        self.assertEqual(second.offset, 1)
        self.assertEqual(second.visible[-1], 10)

    def test_selection_above_window_becomes_first_row(self) -> None:
        window = clamp_and_window(list(range(50)), 5, 10, 20, True)

        self.assertEqual(window.offset, 5)
        self.assertEqual(window.visible[0], 5)

    def test_offset_is_clamped_to_list_bounds(self) -> None:
        self.assertEqual(clamp_and_window(list(range(12)), 0, 10, 40, False).offset, 2)
        self.assertEqual(clamp_and_window(list(range(5)), 0, 10, 3, False).offset, 0)
        self.assertEqual(clamp_and_window(list(range(5)), 0, 10, -3, False).offset, 0)

    def test_without_focus_selection_is_not_followed(self) -> None:
        window = clamp_and_window(list(range(100)), 50, 10, 0, False)

        self.assertEqual(window.offset, 0)
        self.assertEqual(window.visible, list(range(10)))

    def test_window_is_idempotent(self) -> None:
        cases = [
            (list(range(100)), 42, 10, 7, True),
            (list(range(3)), 2, 10, 5, True),
            ([4, 8, 15, 16, 23, 42], 23, 2, 0, True),
            (list(range(30)), 99, 7, 28, False),
            ([], 0, 5, 3, True),
        ]
        for active, selected, height, offset, focus in cases:
            with self.subTest(active=len(active), selected=selected, offset=offset):
                once = clamp_and_window(active, selected, height, offset, focus)
                twice = clamp_and_window(active, selected, height, once.offset, focus)
                self.assertEqual(once, twice)

    def test_visible_slice_uses_active_indices(self) -> None:
        window = clamp_and_window([1, 3, 5, 7], 7, 2, 0, True)

        self.assertEqual(window.visible, [5, 7])


class ScrollHelperTests(unittest.TestCase):
    def test_scroll_by_clamps(self) -> None:
        self.assertEqual(scroll_by(0, 3, 20, 10), 3)
        self.assertEqual(scroll_by(8, 5, 20, 10), 10)
        self.assertEqual(scroll_by(1, -3, 20, 10), 0)

    def test_scroll_state_reset(self) -> None:
        state = ScrollState(selected=4, offset=2)
        state.reset()

        self.assertEqual((state.selected, state.offset), (0, 0))


if __name__ == "__main__":
    unittest.main()
