"""Record store adapter over Firestore.

Services never touch the Firestore client directly. They go through
:class:`RecordStore`, which exposes plain ``select``/``insert``/``update``/
``delete`` calls over collections with equality filters and returns rows as
dictionaries carrying their document ``id``.

Firestore only guarantees atomicity per document, so nothing here spans
more than one call. Rows inserted with an explicit ``id`` are keyed
inserts: writing the same key twice never creates a second row, and a
duplicate key is reported as success by returning the stored row.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore
from flask import g
from google.api_core import exceptions as google_exceptions

from .errors import StoreError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def _to_row(snapshot: Any) -> dict[str, Any]:
    """Flatten a document snapshot into a dict with its id."""
    return {**(snapshot.to_dict() or {}), "id": snapshot.id}


class RecordStore:
    """Generic CRUD facade over a Firestore client."""

    def __init__(self, db: Client | Any) -> None:
        """Wrap a Firestore (or mock Firestore) client."""
        self.db = db

    def _query(self, table: str, filters: dict[str, Any] | None) -> Any:
        query = self.db.collection(table)
        for field, value in (filters or {}).items():
            query = query.where(filter=firestore.FieldFilter(field, "==", value))
        return query

    def _matching_ids(self, table: str, filters: dict[str, Any] | None) -> list[str]:
        return [doc.id for doc in self._query(table, filters).stream()]

    def get(self, table: str, row_id: str) -> dict[str, Any] | None:
        """Fetch a single row by document id, or None if it does not exist."""
        try:
            snapshot = self.db.collection(table).document(row_id).get()
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error reading {table}/{row_id}: {e}")
            raise StoreError(f"Failed to read from {table}.") from e
        if not snapshot.exists:
            return None
        return _to_row(snapshot)

    def select(
        self, table: str, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Return every row of ``table`` whose fields equal ``filters``."""
        try:
            return [_to_row(doc) for doc in self._query(table, filters).stream()]
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error querying {table} with {filters}: {e}")
            raise StoreError(f"Failed to read from {table}.") from e

    def insert(
        self, table: str, rows: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Insert rows and return them with their ids.

        A row carrying an ``id`` is created at that document id. Creation
        fails atomically if the document exists, in which case the stored
        row is returned unchanged.
        """
        inserted = []
        try:
            for row in rows:
                data = {k: v for k, v in row.items() if k != "id"}
                row_id = row.get("id")
                if row_id is None:
                    _, ref = self.db.collection(table).add(data)
                    inserted.append({**data, "id": ref.id})
                    continue

                ref = self.db.collection(table).document(row_id)
                try:
                    ref.create(data)
                except google_exceptions.AlreadyExists:
                    logger.info(f"Duplicate key {table}/{row_id}, keeping stored row.")
                    inserted.append(_to_row(ref.get()))
                    continue
                inserted.append({**data, "id": row_id})
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error inserting into {table}: {e}")
            raise StoreError(f"Failed to write to {table}.") from e
        return inserted

    def update(
        self, table: str, filters: dict[str, Any], patch: dict[str, Any]
    ) -> int:
        """Apply ``patch`` to every matching row and return how many changed."""
        try:
            row_ids = self._matching_ids(table, filters)
            for row_id in row_ids:
                self.db.collection(table).document(row_id).update(patch)
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error updating {table} with {filters}: {e}")
            raise StoreError(f"Failed to update {table}.") from e
        return len(row_ids)

    def update_by_id(self, table: str, row_id: str, patch: dict[str, Any]) -> None:
        """Apply ``patch`` to a single row addressed by document id."""
        try:
            self.db.collection(table).document(row_id).update(patch)
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error updating {table}/{row_id}: {e}")
            raise StoreError(f"Failed to update {table}.") from e

    def delete(self, table: str, filters: dict[str, Any]) -> int:
        """Delete every matching row and return how many were removed."""
        try:
            row_ids = self._matching_ids(table, filters)
            for row_id in row_ids:
                self.db.collection(table).document(row_id).delete()
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error deleting from {table} with {filters}: {e}")
            raise StoreError(f"Failed to delete from {table}.") from e
        return len(row_ids)

    def delete_by_id(self, table: str, row_id: str) -> None:
        """Delete a single row addressed by document id."""
        try:
            self.db.collection(table).document(row_id).delete()
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Error deleting {table}/{row_id}: {e}")
            raise StoreError(f"Failed to delete from {table}.") from e


def get_store() -> RecordStore:
    """Return the record store for the current request."""
    if "store" not in g:
        g.store = RecordStore(firestore.client())
    return g.store
