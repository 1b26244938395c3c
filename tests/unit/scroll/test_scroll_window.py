"""Tests for incremental virtual-scroll window recomputation."""

from __future__ import annotations

import random
import unittest

from lazybrowse.scroll import ScrollWindow, clamp_offset, recompute, visible_slice


class ScrollWindowTests(unittest.TestCase):
    def test_initial_window_starts_at_top(self) -> None:
        window = recompute(ScrollWindow(), 0, 100, 10)

        self.assertEqual((window.start, window.end), (0, 10))
        self.assertFalse(window.more_above)
        self.assertTrue(window.more_below)

    def test_selection_below_window_scrolls_by_minimum(self) -> None:
        previous = ScrollWindow(start=0, end=10, total_items=100, viewport_height=10)
        window = recompute(previous, 10, 100, 10)
        self.assertEqual((window.start, window.end), (1, 11))

    def test_selection_above_window_moves_start_to_selection(self) -> None:
        previous = ScrollWindow(start=5, end=15, total_items=100, viewport_height=10)
        window = recompute(previous, 3, 100, 10)
        self.assertEqual((window.start, window.end), (3, 13))

    def test_selection_inside_window_keeps_start(self) -> None:
        previous = ScrollWindow(start=5, end=15, total_items=100, viewport_height=10)
        window = recompute(previous, 12, 100, 10)
        self.assertEqual(window.start, 5)

    def test_start_clamped_when_list_shrinks(self) -> None:
        previous = ScrollWindow(start=15, end=25, total_items=100, viewport_height=10)

        window = recompute(previous, 19, 20, 10)

        self.assertEqual((window.start, window.end), (10, 20))
        self.assertTrue(window.more_above)
        self.assertFalse(window.more_below)

    def test_viewport_larger_than_list(self) -> None:
        window = recompute(ScrollWindow(start=3), 2, 4, 10)
        self.assertEqual((window.start, window.end), (0, 4))
        self.assertFalse(window.more_above)
        self.assertFalse(window.more_below)

    def test_empty_list(self) -> None:
        window = recompute(ScrollWindow(start=7, end=9, total_items=9), 0, 0, 5)
        self.assertEqual((window.start, window.end, window.total_items), (0, 0, 0))
        self.assertEqual(len(window), 0)

    def test_invariant_holds_across_random_walks(self) -> None:
        rng = random.Random(1234)
        for total in (1, 2, 7, 50, 333):
            for height in (1, 3, 10, 40):
                window = ScrollWindow(viewport_height=height)
                selected = 0
                for _step in range(200):
                    selected = max(0, min(total - 1, selected + rng.choice((-height, -3, -1, 1, 2, height))))
                    window = recompute(window, selected, total, height)
                    with self.subTest(total=total, height=height, selected=selected):
                        self.assertTrue(0 <= window.start <= selected < window.end <= total)
                        self.assertLessEqual(window.end - window.start, height)

    def test_visible_slice_matches_window(self) -> None:
        items = list(range(30))
        window = recompute(ScrollWindow(), 25, len(items), 8)
        self.assertEqual(visible_slice(items, window), tuple(range(18, 26)))

    def test_clamp_offset_bounds(self) -> None:
        self.assertEqual(clamp_offset(-4, 20, 5), 0)
        self.assertEqual(clamp_offset(99, 20, 5), 15)
        self.assertEqual(clamp_offset(3, 2, 5), 0)


if __name__ == "__main__":
    unittest.main()
