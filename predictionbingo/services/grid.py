"""Bingo card generation.

A card is 25 cells laid out row by row with a FREE cell in the middle. The
other 24 cells are drawn at random from the group's predictions, padded
with inert "TBD" placeholders when fewer than 24 predictions exist.

Each submitter gets a color from the palette. The preferred slot comes from
the username alone, so a player keeps the same color from card to card.
When two submitters want the same slot the later one probes forward to the
next free slot. Once every slot is taken, further submitters fall back to
their preferred slot and share it.

Colors are handed out over the submitters of the card's predictions in
username order. The group dashboard uses the same order and then colors
members without predictions on the card, so a player's color is the same
in both places.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from predictionbingo.constants import (
    COLOR_PALETTE,
    FREE_CELL_INDEX,
    FREE_CONTENT,
    GRID_CELL_COUNT,
    PLACEHOLDER_CONTENT,
)
from predictionbingo.models import PredictionStatus

logger = logging.getLogger(__name__)

CELL_FREE = "free"
CELL_PREDICTION = "prediction"
CELL_PLACEHOLDER = "placeholder"

PICKED_CELLS = GRID_CELL_COUNT - 1


@dataclass
class GridCell:
    """One square of a bingo card."""

    kind: str
    content: str
    prediction_id: str | None = None
    username: str | None = None
    color: str | None = None
    completed: bool = False

    @property
    def is_markable(self) -> bool:
        return self.kind == CELL_PREDICTION

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def preferred_slot(username: str, palette_size: int) -> int:
    """Palette slot a username asks for before collisions are resolved.

    Uses the sum of code points rather than ``hash()`` so the slot is the
    same in every process.
    """
    if palette_size <= 0:
        raise ValueError("Palette must not be empty.")
    return sum(ord(char) for char in username) % palette_size


def assign_palette_slots(
    submitters: Iterable[str], palette_size: int
) -> dict[str, int]:
    """Map each submitter to a palette index, in first-seen order."""
    slots: dict[str, int] = {}
    taken: set[int] = set()
    for username in submitters:
        if username in slots:
            continue
        slot = preferred_slot(username, palette_size)
        if len(taken) >= palette_size:
            logger.warning(f"Color palette exhausted; {username} shares slot {slot}.")
            slots[username] = slot
            continue
        while slot in taken:
            slot = (slot + 1) % palette_size
        taken.add(slot)
        slots[username] = slot
    return slots


def assign_colors(
    submitters: Iterable[str], palette: Sequence[str] = COLOR_PALETTE
) -> dict[str, str]:
    """Map each submitter to a color name."""
    slots = assign_palette_slots(submitters, len(palette))
    return {username: palette[slot] for username, slot in slots.items()}


def card_predictions(predictions: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Predictions that go on the card, sorted by submitter and position."""
    playable = [
        p for p in predictions if p.get("status") != PredictionStatus.REJECTED.value
    ]
    playable.sort(key=lambda p: (p.get("username", ""), p.get("position", 0)))
    return playable


def submitters_in_order(predictions: Iterable[dict[str, Any]]) -> list[str]:
    """Distinct submitters in order of first appearance."""
    seen: dict[str, None] = {}
    for prediction in predictions:
        username = prediction.get("username")
        if username is not None:
            seen.setdefault(username, None)
    return list(seen)


def generate_grid(
    predictions: Sequence[dict[str, Any]],
    completed_ids: Iterable[str] | None = None,
    seed: Any = None,
    palette: Sequence[str] = COLOR_PALETTE,
) -> list[GridCell]:
    """Build a 25-cell card from prediction rows.

    Args:
        predictions: Rows with ``id``, ``content`` and ``username``.
        completed_ids: Ids of predictions marked as come true.
        seed: Optional shuffle seed. Without one every call lays the card
            out differently; colors and completion do not depend on it.
        palette: Ordered color names.

    Returns:
        The cells in row-major order with FREE at the center index.
    """
    completed = set(completed_ids or ())
    colors = assign_colors(submitters_in_order(predictions), palette)

    items: list[dict[str, Any] | None] = list(predictions)
    while len(items) < PICKED_CELLS:
        items.append(None)

    random.Random(seed).shuffle(items)
    picked = items[:PICKED_CELLS]

    cells = []
    for item in picked:
        if item is None:
            cells.append(GridCell(kind=CELL_PLACEHOLDER, content=PLACEHOLDER_CONTENT))
            continue
        username = item.get("username")
        cells.append(
            GridCell(
                kind=CELL_PREDICTION,
                content=item.get("content", ""),
                prediction_id=item.get("id"),
                username=username,
                color=colors.get(username),
                completed=item.get("id") in completed,
            )
        )

    free_cell = GridCell(kind=CELL_FREE, content=FREE_CONTENT, completed=True)
    cells.insert(FREE_CELL_INDEX, free_cell)
    return cells
