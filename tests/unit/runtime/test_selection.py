"""Tests for list selection wraparound and scroll-window behavior."""

from __future__ import annotations

import unittest

from pori.runtime.selection import ListSelection


class ListSelectionTests(unittest.TestCase):
    def test_next_n_times_returns_to_start(self) -> None:
        for count in (1, 2, 5):
            for start in range(count):
                with self.subTest(count=count, start=start):
                    selection = ListSelection(count)
                    selection.index = start
                    for _ in range(count):
                        selection.select_next()
                    self.assertEqual(selection.index, start)

    def test_previous_wraps_from_first_to_last(self) -> None:
        selection = ListSelection(3)
        selection.index = 0
        selection.select_previous()
        self.assertEqual(selection.index, 2)

    def test_next_wraps_from_last_to_first(self) -> None:
        selection = ListSelection(3)
        selection.index = 2
        selection.select_next()
        self.assertEqual(selection.index, 0)

    def test_first_move_from_unselected_picks_an_edge(self) -> None:
        selection = ListSelection(4)
        selection.select_next()
        self.assertEqual(selection.index, 0)

        selection.reset(4)
        selection.select_previous()
        self.assertEqual(selection.index, 3)

    def test_moves_are_noops_on_empty_list(self) -> None:
        selection = ListSelection(0)
        selection.select_next()
        selection.select_previous()
        self.assertIsNone(selection.index)

    def test_reset_clears_index_and_updates_count(self) -> None:
        selection = ListSelection(3)
        selection.select_next()
        selection.reset(7)
        self.assertIsNone(selection.index)
        self.assertEqual(selection.count, 7)


class VisibleStartTests(unittest.TestCase):
    def test_scrolls_down_to_keep_selection_visible(self) -> None:
        selection = ListSelection(10)
        selection.index = 6
        self.assertEqual(selection.visible_start(0, 4), 3)

    def test_scrolls_up_to_selection(self) -> None:
        selection = ListSelection(10)
        selection.index = 1
        self.assertEqual(selection.visible_start(5, 4), 1)

    def test_clamps_start_when_list_is_short(self) -> None:
        selection = ListSelection(3)
        self.assertEqual(selection.visible_start(8, 4), 0)


if __name__ == "__main__":
    unittest.main()
