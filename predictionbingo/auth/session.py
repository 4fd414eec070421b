"""Session helpers: the current username and the recent-groups list.

The recent-groups list is a convenience for navigation only. It lives in
the client's session cookie and is never consulted for membership or
phase decisions.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from flask import session

from predictionbingo.constants import RECENT_GROUPS_LIMIT

USERNAME_KEY = "username"
RECENT_GROUPS_KEY = "recent_groups"


def remember_group(
    recent: list[dict[str, Any]],
    group: dict[str, Any],
    limit: int = RECENT_GROUPS_LIMIT,
) -> list[dict[str, Any]]:
    """Return a new most-recently-used list with ``group`` at the front."""
    entry = {
        "id": group["id"],
        "name": group.get("name"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    others = [item for item in recent if item.get("id") != group["id"]]
    return [entry, *others][:limit]


def current_username() -> str | None:
    """Username the caller signed in with, if any."""
    return session.get(USERNAME_KEY)


def get_recent_groups() -> list[dict[str, Any]]:
    """Copy of the recent-groups list stored in the session."""
    return list(session.get(RECENT_GROUPS_KEY, []))


def record_recent_group(group: dict[str, Any]) -> list[dict[str, Any]]:
    """Move ``group`` to the front of the session's recent-groups list."""
    recent = remember_group(get_recent_groups(), group)
    session[RECENT_GROUPS_KEY] = recent
    return recent


def sign_in(username: str) -> None:
    """Store the self-asserted username in the session."""
    session[USERNAME_KEY] = username


def sign_out() -> None:
    """Forget the username; the recent-groups list stays."""
    session.pop(USERNAME_KEY, None)
