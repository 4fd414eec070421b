"""Service layer for prediction submission and review."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, cast

from firebase_admin import firestore

from predictionbingo.constants import (
    COMMENTS_COLLECTION,
    MAX_PREDICTION_LENGTH,
    MAX_PREDICTIONS_PER_USER,
    PREDICTIONS_COLLECTION,
)
from predictionbingo.errors import (
    NotFoundError,
    PhaseClosed,
    QuotaExceeded,
    ValidationError,
)
from predictionbingo.models import (
    Comment,
    Group,
    GroupStatus,
    Prediction,
    PredictionStatus,
)
from predictionbingo.store import RecordStore

from .group_service import GroupService

logger = logging.getLogger(__name__)


def clean_contents(contents: Sequence[str]) -> list[str]:
    """Validate a submitted prediction list and strip each entry.

    Runs before any store call.
    """
    if isinstance(contents, str) or not isinstance(contents, (list, tuple)):
        raise ValidationError("Predictions must be a list of strings.")
    if not contents:
        raise ValidationError("Please submit at least one prediction.")
    if len(contents) > MAX_PREDICTIONS_PER_USER:
        raise QuotaExceeded()

    cleaned = []
    for content in contents:
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Please fill in all prediction fields.")
        content = content.strip()
        if len(content) > MAX_PREDICTION_LENGTH:
            raise ValidationError(
                f"Predictions must be {MAX_PREDICTION_LENGTH} characters or less."
            )
        cleaned.append(content)
    return cleaned


class PredictionService:
    """Handles prediction sets, the automatic start of play and reviews."""

    @staticmethod
    def get_prediction(
        store: RecordStore, group_id: str, prediction_id: str
    ) -> Prediction:
        """Fetch a prediction belonging to the group or raise NotFoundError."""
        prediction = store.get(PREDICTIONS_COLLECTION, prediction_id)
        if prediction is None or prediction.get("group_id") != group_id:
            raise NotFoundError("Prediction not found.")
        return cast("Prediction", prediction)

    @staticmethod
    def get_user_predictions(
        store: RecordStore, group_id: str, username: str
    ) -> list[Prediction]:
        """Fetch one user's predictions in the order they were written."""
        rows = store.select(
            PREDICTIONS_COLLECTION, {"group_id": group_id, "username": username}
        )
        rows.sort(key=lambda p: p.get("position", 0))
        return cast("list[Prediction]", rows)

    @staticmethod
    def submit(
        store: RecordStore, group_id: str, username: str, contents: Sequence[str]
    ) -> dict[str, Any]:
        """Replace a user's predictions with ``contents``.

        Old predictions are deleted before the new ones are inserted; the
        set is never merged. When the submission means every member has
        now predicted something, the group moves straight to active.
        """
        cleaned = clean_contents(contents)

        group = GroupService.get_group(store, group_id)
        if GroupService.get_status(group) != GroupStatus.SUBMISSION:
            raise PhaseClosed("This group is no longer accepting predictions.")
        GroupService.require_member(store, group_id, username)

        existing = PredictionService.get_user_predictions(store, group_id, username)
        if len(cleaned) + len(existing) > MAX_PREDICTIONS_PER_USER:
            raise QuotaExceeded()

        if existing:
            store.delete(
                PREDICTIONS_COLLECTION, {"group_id": group_id, "username": username}
            )
        store.insert(
            PREDICTIONS_COLLECTION,
            [
                {
                    "group_id": group_id,
                    "username": username,
                    "content": content,
                    "position": position,
                    "created_at": firestore.SERVER_TIMESTAMP,
                }
                for position, content in enumerate(cleaned)
            ],
        )
        logger.info(f"{username} submitted {len(cleaned)} predictions to {group_id}.")

        auto_advanced = PredictionService._advance_if_complete(store, group_id)
        predictions = PredictionService.list_for_group(store, group_id, username)
        return {
            "group": GroupService.get_group(store, group_id),
            "predictions": predictions,
            "user_prediction_count": sum(p["is_current_user"] for p in predictions),
            "auto_advanced": auto_advanced,
        }

    @staticmethod
    def _advance_if_complete(store: RecordStore, group_id: str) -> bool:
        """Start play once every member has submitted."""
        members = GroupService.get_members(store, group_id)
        submitters = {
            p.get("username")
            for p in store.select(PREDICTIONS_COLLECTION, {"group_id": group_id})
        }
        if not members or any(m.get("username") not in submitters for m in members):
            return False

        logger.info(f"All members of {group_id} have submitted; starting play.")
        GroupService.advance_phase(store, group_id, GroupStatus.ACTIVE)
        return True

    @staticmethod
    def list_for_group(
        store: RecordStore, group_id: str, username: str
    ) -> list[Prediction]:
        """All predictions of a group, flagged with whether the caller wrote them."""
        GroupService.get_group(store, group_id)
        predictions = store.select(PREDICTIONS_COLLECTION, {"group_id": group_id})
        predictions.sort(key=lambda p: (p.get("username", ""), p.get("position", 0)))
        for prediction in predictions:
            prediction["is_current_user"] = prediction.get("username") == username
        return cast("list[Prediction]", predictions)

    @staticmethod
    def _require_review_phase(store: RecordStore, group_id: str) -> Group:
        group = GroupService.get_group(store, group_id)
        if GroupService.get_status(group) != GroupStatus.REVIEW:
            raise PhaseClosed("This group is not in the review phase.")
        return group

    @staticmethod
    def review(
        store: RecordStore,
        group_id: str,
        prediction_id: str,
        status: PredictionStatus | str,
        acting_username: str,
    ) -> Prediction:
        """Approve or reject a prediction. Organizer only."""
        try:
            status = PredictionStatus(status)
        except ValueError as e:
            raise ValidationError(f"Unknown review status: {status}.") from e
        if status == PredictionStatus.PENDING:
            raise ValidationError("A prediction can only be approved or rejected.")

        PredictionService._require_review_phase(store, group_id)
        GroupService.require_admin(store, group_id, acting_username)
        PredictionService.get_prediction(store, group_id, prediction_id)

        store.update_by_id(
            PREDICTIONS_COLLECTION, prediction_id, {"status": status.value}
        )
        logger.info(f"Prediction {prediction_id} {status.value} by {acting_username}.")
        return PredictionService.get_prediction(store, group_id, prediction_id)

    @staticmethod
    def add_comment(
        store: RecordStore,
        group_id: str,
        prediction_id: str,
        username: str,
        content: str,
    ) -> Comment:
        """Comment on a prediction while the group is in review."""
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comments cannot be empty.")
        if len(content) > MAX_PREDICTION_LENGTH:
            raise ValidationError(
                f"Comments must be {MAX_PREDICTION_LENGTH} characters or less."
            )

        PredictionService._require_review_phase(store, group_id)
        GroupService.require_member(store, group_id, username)
        PredictionService.get_prediction(store, group_id, prediction_id)

        (row,) = store.insert(
            COMMENTS_COLLECTION,
            [
                {
                    "group_id": group_id,
                    "prediction_id": prediction_id,
                    "username": username,
                    "content": content,
                    "created_at": firestore.SERVER_TIMESTAMP,
                }
            ],
        )
        return cast("Comment", row)

    @staticmethod
    def list_for_review(
        store: RecordStore, group_id: str, username: str
    ) -> list[Prediction]:
        """Predictions with their comments attached, for the review page."""
        PredictionService._require_review_phase(store, group_id)
        GroupService.require_member(store, group_id, username)

        predictions = PredictionService.list_for_group(store, group_id, username)
        comments_by_prediction: dict[str, list[Comment]] = {}
        for comment in store.select(COMMENTS_COLLECTION, {"group_id": group_id}):
            comments_by_prediction.setdefault(comment["prediction_id"], []).append(
                cast("Comment", comment)
            )
        for prediction in predictions:
            prediction["comments"] = comments_by_prediction.get(prediction["id"], [])
        return predictions
