"""Service layer for the shared bingo card and its completion marks."""

from __future__ import annotations

import logging
from typing import Any, cast

from firebase_admin import firestore

from predictionbingo.constants import (
    COMPLETED_MARKS_COLLECTION,
    FREE_CONTENT,
    PLACEHOLDER_CONTENT,
    PREDICTIONS_COLLECTION,
)
from predictionbingo.errors import PhaseClosed, ValidationError
from predictionbingo.models import (
    CompletedMark,
    Group,
    GroupStatus,
    PredictionStatus,
    mark_id,
)
from predictionbingo.store import RecordStore

from .grid import card_predictions, generate_grid
from .group_service import GroupService
from .prediction_service import PredictionService

logger = logging.getLogger(__name__)

UNMARKABLE_IDS = {FREE_CONTENT.lower(), PLACEHOLDER_CONTENT.lower()}


def _require_active(store: RecordStore, group_id: str) -> Group:
    group = GroupService.get_group(store, group_id)
    if GroupService.get_status(group) != GroupStatus.ACTIVE:
        raise PhaseClosed("The bingo card is available once the group is active.")
    return group


class CompletionService:
    """Tracks which predictions came true.

    Marks are shared by the whole group: one member's toggle changes what
    every member sees. Two members toggling the same cell at nearly the
    same moment race in the store and either outcome can win.
    """

    @staticmethod
    def load_completion(store: RecordStore, group_id: str) -> set[str]:
        """Ids of the group's predictions currently marked as come true."""
        rows = store.select(COMPLETED_MARKS_COLLECTION, {"group_id": group_id})
        marks = cast("list[CompletedMark]", rows)
        return {mark["prediction_id"] for mark in marks}

    @staticmethod
    def toggle(
        store: RecordStore, group_id: str, prediction_id: str, acting_username: str
    ) -> dict[str, Any]:
        """Flip a prediction's completion mark and return the stored state."""
        if not prediction_id or prediction_id.lower() in UNMARKABLE_IDS:
            raise ValidationError("Only prediction squares can be marked.")

        _require_active(store, group_id)
        GroupService.require_member(store, group_id, acting_username)
        prediction = PredictionService.get_prediction(store, group_id, prediction_id)
        if prediction.get("status") == PredictionStatus.REJECTED.value:
            raise ValidationError("Rejected predictions are not on the card.")

        key = mark_id(group_id, prediction_id)
        if store.get(COMPLETED_MARKS_COLLECTION, key) is not None:
            store.delete_by_id(COMPLETED_MARKS_COLLECTION, key)
        else:
            store.insert(
                COMPLETED_MARKS_COLLECTION,
                [
                    {
                        "id": key,
                        "group_id": group_id,
                        "prediction_id": prediction_id,
                        "marked_by": acting_username,
                        "marked_at": firestore.SERVER_TIMESTAMP,
                    }
                ],
            )

        # Report what the store holds now, not what we expect it to hold.
        completed = store.get(COMPLETED_MARKS_COLLECTION, key) is not None
        logger.info(
            f"{acting_username} set prediction {prediction_id} completed={completed}."
        )
        return {"prediction_id": prediction_id, "completed": completed}


class BingoService:
    """Builds the bingo card a member sees."""

    @staticmethod
    def get_card(
        store: RecordStore, group_id: str, username: str, seed: Any = None
    ) -> dict[str, Any]:
        """Generate the card from the group's predictions and marks."""
        group = _require_active(store, group_id)
        GroupService.require_member(store, group_id, username)

        predictions = card_predictions(
            store.select(PREDICTIONS_COLLECTION, {"group_id": group_id})
        )
        completed_ids = CompletionService.load_completion(store, group_id)

        cells = generate_grid(predictions, completed_ids, seed=seed)
        return {
            "group": group,
            "cells": [cell.to_dict() for cell in cells],
            "completed_count": sum(
                1 for cell in cells if cell.is_markable and cell.completed
            ),
        }
