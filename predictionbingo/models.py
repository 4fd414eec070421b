"""Data models for groups, members, predictions and completion marks."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypedDict


class APIResponse(TypedDict):
    """Envelope every JSON endpoint returns."""

    success: bool
    message: str
    data: dict[str, Any] | None


class FirestoreDocument(TypedDict, total=False):
    """Fields shared by documents read back from Firestore."""

    id: str
    created_at: Any


class GroupStatus(str, Enum):
    """Lifecycle phase of a group."""

    SUBMISSION = "submission"
    REVIEW = "review"
    ACTIVE = "active"


class MemberRole(str, Enum):
    """Role of a member within a group."""

    ADMIN = "admin"
    MEMBER = "member"


class PredictionStatus(str, Enum):
    """Review outcome of a prediction."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Allowed forward moves. Holding the current status is always allowed.
PHASE_TRANSITIONS: dict[GroupStatus, frozenset[GroupStatus]] = {
    GroupStatus.SUBMISSION: frozenset({GroupStatus.REVIEW, GroupStatus.ACTIVE}),
    GroupStatus.REVIEW: frozenset({GroupStatus.ACTIVE}),
    GroupStatus.ACTIVE: frozenset(),
}


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    organizer_username: str
    status: str
    is_locked: bool
    submission_deadline: Any


class Member(TypedDict, total=False):
    """A row of the group_members collection."""

    id: str
    group_id: str
    username: str
    role: str
    joined_at: Any

    # UI and calculated fields
    color: str


class Comment(FirestoreDocument, total=False):
    """A review comment on a prediction."""

    group_id: str
    prediction_id: str
    username: str
    content: str


class Prediction(FirestoreDocument, total=False):
    """A prediction document in Firestore."""

    group_id: str
    username: str
    content: str
    position: int
    status: str

    # UI and calculated fields
    is_current_user: bool
    comments: list[Comment]


class CompletedMark(TypedDict, total=False):
    """Presence of this row means the prediction came true."""

    id: str
    group_id: str
    prediction_id: str
    marked_by: str
    marked_at: Any


def member_id(group_id: str, username: str) -> str:
    """Document id of a membership; one per (group, username)."""
    return f"{group_id}_{username}"


def mark_id(group_id: str, prediction_id: str) -> str:
    """Document id of a completion mark; one per (group, prediction)."""
    return f"{group_id}_{prediction_id}"
