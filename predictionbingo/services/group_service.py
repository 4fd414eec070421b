"""Service layer for group membership and lifecycle."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, cast

from firebase_admin import firestore

from predictionbingo.constants import (
    GROUPS_COLLECTION,
    MAX_GROUP_MEMBERS,
    MAX_GROUP_NAME_LENGTH,
    MEMBERS_COLLECTION,
    PREDICTIONS_COLLECTION,
)
from predictionbingo.errors import (
    AccessDenied,
    AlreadyMember,
    CapacityExceeded,
    GroupLocked,
    InvalidTransition,
    NotFoundError,
    PhaseClosed,
    ValidationError,
)
from predictionbingo.models import (
    PHASE_TRANSITIONS,
    Group,
    GroupStatus,
    Member,
    MemberRole,
    PredictionStatus,
    member_id,
)
from predictionbingo.store import RecordStore

from .grid import assign_colors, card_predictions, submitters_in_order

logger = logging.getLogger(__name__)


def _deadline_passed(deadline: Any) -> bool:
    if not isinstance(deadline, datetime):
        return False
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    return deadline < datetime.now(timezone.utc)


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def get_group(store: RecordStore, group_id: str) -> Group:
        """Fetch a group or raise NotFoundError."""
        group = store.get(GROUPS_COLLECTION, group_id)
        if group is None:
            raise NotFoundError("Group not found.")
        return cast("Group", group)

    @staticmethod
    def get_status(group: Group) -> GroupStatus:
        """Current status of a group row."""
        return GroupStatus(group.get("status") or GroupStatus.SUBMISSION.value)

    @staticmethod
    def get_members(store: RecordStore, group_id: str) -> list[Member]:
        """Fetch the roster of a group."""
        rows = store.select(MEMBERS_COLLECTION, {"group_id": group_id})
        return cast("list[Member]", rows)

    @staticmethod
    def get_member(
        store: RecordStore, group_id: str, username: str
    ) -> Member | None:
        """Fetch one membership row, or None."""
        row = store.get(MEMBERS_COLLECTION, member_id(group_id, username))
        return cast("Member | None", row)

    @staticmethod
    def is_admin(store: RecordStore, group_id: str, username: str) -> bool:
        """Check whether a user organizes the group."""
        member = GroupService.get_member(store, group_id, username)
        return bool(member and member.get("role") == MemberRole.ADMIN.value)

    @staticmethod
    def require_member(
        store: RecordStore, group_id: str, username: str
    ) -> Member:
        """Return the membership row or raise AccessDenied."""
        member = GroupService.get_member(store, group_id, username)
        if member is None:
            raise AccessDenied("You are not a member of this group.")
        return member

    @staticmethod
    def require_admin(store: RecordStore, group_id: str, username: str) -> None:
        """Raise AccessDenied unless the user is the group's admin."""
        if not GroupService.is_admin(store, group_id, username):
            raise AccessDenied("Only the group organizer can do that.")

    @staticmethod
    def create_group(
        store: RecordStore,
        name: str,
        organizer_username: str,
        submission_deadline: datetime | None = None,
    ) -> Group:
        """Create a group in the submission phase with its organizer as admin.

        The group and the membership are two separate writes. If the second
        one fails the group stays behind without members and the error
        propagates; ``ensure_membership`` can be retried safely.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter a group name.")
        if len(name) > MAX_GROUP_NAME_LENGTH:
            raise ValidationError(
                f"Group names must be {MAX_GROUP_NAME_LENGTH} characters or less."
            )
        if not organizer_username:
            raise ValidationError("Please enter a username.")

        group_data = {
            "name": name,
            "organizer_username": organizer_username,
            "status": GroupStatus.SUBMISSION.value,
            "is_locked": False,
            "submission_deadline": submission_deadline,
            "created_at": firestore.SERVER_TIMESTAMP,
        }
        (row,) = store.insert(GROUPS_COLLECTION, [group_data])
        group = cast("Group", row)
        GroupService.ensure_membership(
            store, group["id"], organizer_username, MemberRole.ADMIN
        )
        logger.info(f"Group {group['id']} created by {organizer_username}.")
        return group

    @staticmethod
    def ensure_membership(
        store: RecordStore,
        group_id: str,
        username: str,
        role: MemberRole = MemberRole.MEMBER,
    ) -> Member:
        """Insert a membership row; an existing row is kept as is."""
        (member,) = store.insert(
            MEMBERS_COLLECTION,
            [
                {
                    "id": member_id(group_id, username),
                    "group_id": group_id,
                    "username": username,
                    "role": role.value,
                    "joined_at": firestore.SERVER_TIMESTAMP,
                }
            ],
        )
        return cast("Member", member)

    @staticmethod
    def join(store: RecordStore, group_id: str, username: str) -> Member:
        """Add a user to a group as a regular member."""
        group = GroupService.get_group(store, group_id)

        if group.get("is_locked"):
            raise GroupLocked()
        if GroupService.get_status(group) != GroupStatus.SUBMISSION:
            raise PhaseClosed("This group is no longer accepting new members.")
        if _deadline_passed(group.get("submission_deadline")):
            raise PhaseClosed("The submission deadline for this group has passed.")

        members = GroupService.get_members(store, group_id)
        if any(m.get("username") == username for m in members):
            raise AlreadyMember()
        if len(members) >= MAX_GROUP_MEMBERS:
            raise CapacityExceeded()

        member = GroupService.ensure_membership(store, group_id, username)
        logger.info(f"{username} joined group {group_id}.")
        return member

    @staticmethod
    def toggle_lock(
        store: RecordStore, group_id: str, acting_username: str
    ) -> Group:
        """Flip the group's lock. Only the organizer may do this."""
        group = GroupService.get_group(store, group_id)
        GroupService.require_admin(store, group_id, acting_username)

        is_locked = not group.get("is_locked", False)
        store.update_by_id(GROUPS_COLLECTION, group_id, {"is_locked": is_locked})
        logger.info(f"Group {group_id} lock set to {is_locked} by {acting_username}.")
        return GroupService.get_group(store, group_id)

    @staticmethod
    def advance_phase(
        store: RecordStore,
        group_id: str,
        target: GroupStatus | str,
        acting_username: str | None = None,
    ) -> Group:
        """Move a group forward through its lifecycle.

        Asking for the current status holds the group where it is. Manual
        requests carry ``acting_username`` and need the admin role; the
        automatic move after the last member submits passes None.
        """
        try:
            target = GroupStatus(target)
        except ValueError as e:
            raise ValidationError(f"Unknown group status: {target}.") from e

        group = GroupService.get_group(store, group_id)
        current = GroupService.get_status(group)
        if target == current:
            return group
        if target not in PHASE_TRANSITIONS[current]:
            raise InvalidTransition(
                f"Cannot move a group from {current.value} to {target.value}."
            )
        if acting_username is not None:
            GroupService.require_admin(store, group_id, acting_username)

        predictions = store.select(PREDICTIONS_COLLECTION, {"group_id": group_id})

        if current == GroupStatus.SUBMISSION and target == GroupStatus.ACTIVE:
            submitters = {p.get("username") for p in predictions}
            missing = [
                m["username"]
                for m in GroupService.get_members(store, group_id)
                if m.get("username") not in submitters
            ]
            if missing:
                raise InvalidTransition(
                    "Every member must submit a prediction first. "
                    f"Still waiting on: {', '.join(sorted(missing))}."
                )

        if target == GroupStatus.REVIEW:
            if not predictions:
                raise InvalidTransition("There are no predictions to review yet.")
            store.update(
                PREDICTIONS_COLLECTION,
                {"group_id": group_id},
                {"status": PredictionStatus.PENDING.value},
            )

        if current == GroupStatus.REVIEW:
            if any(
                p.get("status") == PredictionStatus.PENDING.value for p in predictions
            ):
                raise InvalidTransition(
                    "All predictions must be approved or rejected before "
                    "finishing review."
                )

        store.update_by_id(GROUPS_COLLECTION, group_id, {"status": target.value})
        logger.info(f"Group {group_id} moved from {current.value} to {target.value}.")
        return GroupService.get_group(store, group_id)

    @staticmethod
    def get_dashboard(
        store: RecordStore, group_id: str, username: str
    ) -> dict[str, Any]:
        """Fetch everything the group page shows."""
        group = GroupService.get_group(store, group_id)
        members = GroupService.get_members(store, group_id)
        predictions = store.select(PREDICTIONS_COLLECTION, {"group_id": group_id})
        user_predictions = [p for p in predictions if p.get("username") == username]

        # Card submitters first so each keeps the color shown on the card.
        order = submitters_in_order(card_predictions(predictions))
        colors = assign_colors(order + [m["username"] for m in members])
        for member in members:
            member["color"] = colors.get(member["username"])

        current = next((m for m in members if m.get("username") == username), None)
        return {
            "group": group,
            "members": members,
            "member_count": len(members),
            "is_member": current is not None,
            "is_admin": bool(
                current and current.get("role") == MemberRole.ADMIN.value
            ),
            "user_prediction_count": len(user_predictions),
        }
