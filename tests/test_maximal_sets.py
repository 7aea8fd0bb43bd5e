"""Tests for reducing feasible combinations to the maximal ones."""

import unittest
import sys
from pathlib import Path

# Add repo root to path
sys.path.append(str(Path(__file__).parent.parent))

from maximal_sets import is_proper_subset, reduce_to_maximal, sorted_name_sets


class TestMaximalSets(unittest.TestCase):
    def test_proper_subset(self):
        self.assertTrue(is_proper_subset(0b001, 0b011))
        self.assertFalse(is_proper_subset(0b011, 0b011))
        self.assertFalse(is_proper_subset(0b100, 0b011))

    def test_subsets_are_dropped(self):
        # {a}, {b}, {a, b}, {c}
        result = reduce_to_maximal([0b001, 0b010, 0b011, 0b100])
        self.assertEqual(sorted(result), [0b011, 0b100])

    def test_disjoint_sets_of_equal_size_are_kept(self):
        result = reduce_to_maximal([0b0011, 0b1100, 0b0001, 0b1000])
        self.assertEqual(sorted(result), [0b0011, 0b1100])

    def test_chain_keeps_only_the_top(self):
        result = reduce_to_maximal([0b1, 0b11, 0b111, 0b1111])
        self.assertEqual(result, [0b1111])

    def test_duplicates_collapse(self):
        self.assertEqual(reduce_to_maximal([0b101, 0b101, 0b001]), [0b101])

    def test_empty_input(self):
        self.assertEqual(reduce_to_maximal([]), [])

    def test_result_is_an_antichain(self):
        masks = list(range(1, 64, 3)) + [0b110000, 0b001111]
        result = reduce_to_maximal(masks)
        for a in result:
            for b in result:
                self.assertFalse(is_proper_subset(a, b), f"{a:b} is inside {b:b}")
        # Every input is covered by some maximal set
        for mask in masks:
            self.assertTrue(any(mask & kept == mask for kept in result))

    def test_sorted_name_sets(self):
        names = ("cake", "cookies", "pancakes")
        result = sorted_name_sets([0b110, 0b001, 0b101], names)
        self.assertEqual(
            result, [["cake"], ["cake", "pancakes"], ["cookies", "pancakes"]]
        )


if __name__ == "__main__":
    unittest.main()
