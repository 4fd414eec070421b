"""Tests for the recent-groups list kept in the session."""

import unittest

from predictionbingo.auth.session import remember_group


class RememberGroupTestCase(unittest.TestCase):
    def test_newest_first(self) -> None:
        recent = remember_group([], {"id": "g1", "name": "One"})
        recent = remember_group(recent, {"id": "g2", "name": "Two"})
        self.assertEqual([item["id"] for item in recent], ["g2", "g1"])
        self.assertEqual(recent[0]["name"], "Two")
        self.assertIn("timestamp", recent[0])

    def test_revisit_moves_to_front_without_duplicating(self) -> None:
        recent = []
        for group_id in ("g1", "g2", "g3", "g1"):
            recent = remember_group(recent, {"id": group_id, "name": group_id})
        self.assertEqual([item["id"] for item in recent], ["g1", "g3", "g2"])

    def test_bounded(self) -> None:
        recent = []
        for i in range(8):
            recent = remember_group(recent, {"id": f"g{i}", "name": str(i)})
        self.assertEqual(len(recent), 5)
        self.assertEqual(recent[0]["id"], "g7")
        self.assertEqual(recent[-1]["id"], "g3")

    def test_input_not_mutated(self) -> None:
        recent = [{"id": "g1", "name": "One", "timestamp": "t"}]
        remember_group(recent, {"id": "g2", "name": "Two"})
        self.assertEqual(len(recent), 1)


if __name__ == "__main__":
    unittest.main()
