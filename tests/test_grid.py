"""Tests for bingo card generation and color assignment."""

from __future__ import annotations

import unittest

from predictionbingo.constants import COLOR_PALETTE, FREE_CELL_INDEX
from predictionbingo.services.grid import (
    CELL_FREE,
    CELL_PLACEHOLDER,
    CELL_PREDICTION,
    assign_colors,
    assign_palette_slots,
    generate_grid,
    preferred_slot,
)


def make_predictions(count: int, submitters: int = 1) -> list[dict]:
    return [
        {
            "id": f"p{i}",
            "content": f"Prediction {i}",
            "username": f"user{i % submitters}",
        }
        for i in range(count)
    ]


class GenerateGridTestCase(unittest.TestCase):
    def test_free_cell_in_center(self) -> None:
        for count in (0, 3, 24, 40):
            cells = generate_grid(make_predictions(count))
            self.assertEqual(len(cells), 25)
            self.assertEqual(cells[FREE_CELL_INDEX].kind, CELL_FREE)
            self.assertEqual(cells[FREE_CELL_INDEX].content, "FREE")
            self.assertTrue(cells[FREE_CELL_INDEX].completed)
            self.assertEqual(sum(1 for c in cells if c.kind == CELL_FREE), 1)

    def test_pads_with_placeholders(self) -> None:
        cells = generate_grid(make_predictions(5))
        placeholders = [c for c in cells if c.kind == CELL_PLACEHOLDER]
        self.assertEqual(len(placeholders), 19)
        for cell in placeholders:
            self.assertEqual(cell.content, "TBD")
            self.assertFalse(cell.completed)
            self.assertFalse(cell.is_markable)
            self.assertIsNone(cell.prediction_id)

    def test_empty_group_is_all_placeholders(self) -> None:
        cells = generate_grid([])
        self.assertEqual(sum(1 for c in cells if c.kind == CELL_PLACEHOLDER), 24)

    def test_surplus_predictions_are_sampled(self) -> None:
        predictions = make_predictions(30)
        cells = generate_grid(predictions, seed=7)
        picked = [c.prediction_id for c in cells if c.kind == CELL_PREDICTION]
        self.assertEqual(len(picked), 24)
        self.assertEqual(len(set(picked)), 24)
        self.assertTrue(set(picked) <= {p["id"] for p in predictions})
        self.assertFalse(any(c.kind == CELL_PLACEHOLDER for c in cells))

    def test_every_prediction_appears_once_when_few(self) -> None:
        predictions = make_predictions(10, submitters=3)
        cells = generate_grid(predictions)
        picked = sorted(c.prediction_id for c in cells if c.is_markable)
        self.assertEqual(picked, sorted(p["id"] for p in predictions))

    def test_same_seed_same_layout(self) -> None:
        predictions = make_predictions(12, submitters=4)
        first = [c.to_dict() for c in generate_grid(predictions, seed="group-1")]
        second = [c.to_dict() for c in generate_grid(predictions, seed="group-1")]
        self.assertEqual(first, second)

    def test_completed_flags(self) -> None:
        cells = generate_grid(make_predictions(4), completed_ids={"p1", "p3"})
        completed = {c.prediction_id for c in cells if c.is_markable and c.completed}
        self.assertEqual(completed, {"p1", "p3"})

    def test_colors_do_not_depend_on_layout(self) -> None:
        predictions = make_predictions(8, submitters=4)
        for seed in (1, 2, 3):
            cells = generate_grid(predictions, seed=seed)
            colors = {c.username: c.color for c in cells if c.is_markable}
            expected = assign_colors(["user0", "user1", "user2", "user3"])
            self.assertEqual(colors, expected)

    def test_cell_to_dict(self) -> None:
        cell = generate_grid(make_predictions(1), seed=0)
        data = [c.to_dict() for c in cell if c.kind == CELL_PREDICTION][0]
        self.assertEqual(data["prediction_id"], "p0")
        self.assertEqual(data["username"], "user0")
        self.assertIn(data["color"], COLOR_PALETTE)
        self.assertFalse(data["completed"])


class ColorAssignmentTestCase(unittest.TestCase):
    def test_preferred_slot_is_stable(self) -> None:
        self.assertEqual(preferred_slot("alice", 20), preferred_slot("alice", 20))
        self.assertEqual(preferred_slot("a", 20), ord("a") % 20)

    def test_preferred_slot_rejects_empty_palette(self) -> None:
        with self.assertRaises(ValueError):
            preferred_slot("alice", 0)

    def test_collision_probes_forward(self) -> None:
        # "ab" and "ba" have the same code point sum.
        slots = assign_palette_slots(["ab", "ba"], 20)
        self.assertEqual(slots["ab"], preferred_slot("ab", 20))
        self.assertEqual(slots["ba"], (slots["ab"] + 1) % 20)

    def test_distinct_colors_up_to_palette_size(self) -> None:
        users = [f"player{i}" for i in range(len(COLOR_PALETTE))]
        colors = assign_colors(users)
        self.assertEqual(len(set(colors.values())), len(COLOR_PALETTE))

    def test_exhausted_palette_shares_and_warns(self) -> None:
        users = [f"player{i}" for i in range(len(COLOR_PALETTE) + 1)]
        with self.assertLogs("predictionbingo.services.grid", level="WARNING") as cm:
            slots = assign_palette_slots(users, len(COLOR_PALETTE))
        extra = users[-1]
        self.assertEqual(slots[extra], preferred_slot(extra, len(COLOR_PALETTE)))
        self.assertIn(extra, cm.output[0])

    def test_first_seen_order_wins(self) -> None:
        slots = assign_palette_slots(["ba", "ab", "ba"], 20)
        self.assertEqual(slots["ba"], preferred_slot("ba", 20))
        self.assertEqual(len(slots), 2)


if __name__ == "__main__":
    unittest.main()
