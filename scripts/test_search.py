from __future__ import annotations
import contextlib
import io
import os
import random
import sys
import tempfile
import unittest
from unittest import mock

import numpy as np

from minrk.config import HashConfig
from minrk.errors import InvalidArgument
from minrk.search import SearchStats, contains, find, find_all, main


def naive_find_all(source: str, target: str) -> list[int]:
    return [i for i in range(len(source) - len(target) + 1) if source[i : i + len(target)] == target]


class TestFind(unittest.TestCase):
    def setUp(self):
        # (source, target, expected offset)
        self.scenarios = [
            ("abxabcabcaby", "abcaby", 6),
            ("aaaaa", "aa", 0),
            ("abc", "xyz", None),
            ("abc", "abcd", None),
            ("abc", "abc", 0),
            ("hello world", "world", 6),
            ("abc", "c", 2),
        ]

    def test_scenarios(self):
        for source, target, expected in self.scenarios:
            self.assertEqual(find(source, target), expected, (source, target))

    def test_empty_target(self):
        self.assertEqual(find("abc", ""), 0)
        self.assertEqual(find("", ""), 0)
        self.assertEqual(find_all("ab", ""), [0, 1, 2])

    def test_empty_source(self):
        self.assertIsNone(find("", "a"))

    def test_other_sequence_types(self):
        self.assertEqual(find(b"hello world", b"world"), 6)
        self.assertEqual(find([1, 2, 3, 2, 3], [2, 3]), 1)
        self.assertEqual(find(list("hello"), list("ll")), 2)
        self.assertIsNone(find([1, 2, 3], [3, 2]))

    def test_codes_past_int64(self):
        with self.assertRaises(InvalidArgument):
            find([2**63, 5], [5])
        with self.assertRaises(InvalidArgument):
            find(np.array([2**63, 1], dtype=np.uint64), np.array([1], dtype=np.uint64))

    def test_idempotent(self):
        source, target = "abxabcabcaby", "abcaby"
        self.assertEqual(find(source, target), find(source, target))
        self.assertEqual(find(source, target, return_stats=True), find(source, target, return_stats=True))

    def test_contains(self):
        self.assertTrue(contains("gattaca", "tac"))
        self.assertFalse(contains("gattaca", "cat"))


class TestCollisions(unittest.TestCase):
    def test_anagram_collision_is_rejected(self):
        # With a base of 1 the hash is the sum of the codes: "ba" and "ab" collide
        offset, stats = find("xbaab", "ab", HashConfig(prime=1), return_stats=True)
        self.assertEqual(offset, 3)
        self.assertEqual(stats, SearchStats(windows=4, candidates=2, collisions=1))

    def test_everything_collides(self):
        # mod=1 puts every window under the same hash
        offset, stats = find("abxabcabcaby", "abcaby", HashConfig(mod=1), return_stats=True)
        self.assertEqual(offset, 6)
        self.assertEqual(stats.windows, 7)
        self.assertEqual(stats.candidates, 7)
        self.assertEqual(stats.collisions, 6)

    def test_only_collisions(self):
        offset, stats = find("ba", "ab", HashConfig(prime=1), return_stats=True)
        self.assertIsNone(offset)
        self.assertEqual(stats.collisions, 1)

    def test_default_config_has_no_collisions_here(self):
        offset, stats = find("abxabcabcaby", "abcaby", return_stats=True)
        self.assertEqual(offset, 6)
        self.assertEqual(stats.candidates, 1)
        self.assertEqual(stats.collisions, 0)

    def test_stats_when_target_longer(self):
        offset, stats = find("abc", "abcd", return_stats=True)
        self.assertIsNone(offset)
        self.assertEqual(stats, SearchStats())


class TestAgainstNaive(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(1234)
        self.configs = [None, HashConfig(prime=3, mod=5), HashConfig(prime=1, mod=7)]

    def test_random(self):
        for _ in range(300):
            source = "".join(self.rng.choice("abc") for _ in range(self.rng.randrange(0, 30)))
            target = "".join(self.rng.choice("abc") for _ in range(self.rng.randrange(1, 5)))
            expected = naive_find_all(source, target)
            for config in self.configs:
                offset = find(source, target, config)
                self.assertEqual(offset, expected[0] if expected else None, (source, target, config))
                if offset is not None:
                    self.assertEqual(source[offset : offset + len(target)], target)
                self.assertEqual(find_all(source, target, config), expected)

    def test_find_all_overlapping(self):
        self.assertEqual(find_all("aaaaa", "aa"), [0, 1, 2, 3])
        self.assertEqual(find_all("abc", "xyz"), [])


class TestMain(unittest.TestCase):
    def run_main(self, *args: str) -> str:
        out = io.StringIO()
        with mock.patch.object(sys, "argv", ["minrk-search", *args]), contextlib.redirect_stdout(out):
            main()
        return out.getvalue()

    def test_usage(self):
        self.assertIn("Usage:", self.run_main())
        self.assertIn("Usage:", self.run_main("only-one"))

    def test_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            source_path = os.path.join(tmp, "source.fa")
            target_path = os.path.join(tmp, "target.txt")
            with open(source_path, "w", encoding="utf-8") as f:
                f.write(">chr1 test\nGATT\nACA\n")
            with open(target_path, "w", encoding="utf-8") as f:
                f.write("TTAC\n")

            output = self.run_main(source_path, target_path)
        self.assertIn("Source length: 7", output)
        self.assertIn("Target length: 4", output)
        self.assertIn("Offset: 2", output)
        self.assertIn("Collisions: 0", output)

    def test_files_not_found(self):
        with tempfile.TemporaryDirectory() as tmp:
            source_path = os.path.join(tmp, "source.txt")
            target_path = os.path.join(tmp, "target.txt")
            with open(source_path, "w", encoding="utf-8") as f:
                f.write("abc\n")
            with open(target_path, "w", encoding="utf-8") as f:
                f.write("xyz\n")

            output = self.run_main(source_path, target_path)
        self.assertIn("Offset: not found", output)


if __name__ == "__main__":
    unittest.main()
