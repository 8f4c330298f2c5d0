"""Supabase-backed session store."""

import logging
from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from wellness_sessions.errors import StoreError
from wellness_sessions.services.sessions import Document, Filters, SessionStore

logger = logging.getLogger(__name__)

_COLUMNS = "id, owner_id, title, tags, json_file_url, status, created_at, updated_at"


@dataclass
class SupabaseSessionStore(SessionStore):
    """Supabase implementation of the session store."""

    client: Client
    table: str = "sessions"

    def find(
        self,
        filters: Filters,
        sort: tuple[str, bool] | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Return rows matching every equality filter."""
        if not _has_valid_id(filters):
            return []
        query = self._apply_filters(
            self.client.table(self.table).select(_COLUMNS), filters
        )
        if sort is not None:
            column, descending = sort
            query = query.order(column, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        response = self._execute(query, "find")
        return list(response.data or [])

    def find_one(self, filters: Filters) -> Document | None:
        """Return the first matching row, if present."""
        if not _has_valid_id(filters):
            return None
        query = self._apply_filters(
            self.client.table(self.table).select(_COLUMNS), filters
        ).limit(1)
        response = self._execute(query, "find_one")
        if not response.data:
            return None
        return response.data[0]

    def insert(self, document: Document) -> Document:
        """Insert a row and return it."""
        response = self._execute(
            self.client.table(self.table).insert(document), "insert"
        )
        if not response.data:
            raise StoreError("Failed to create session")
        return response.data[0]

    def update_one(self, filters: Filters, patch: Document) -> Document | None:
        """Update the matching row and return its new state."""
        if not _has_valid_id(filters):
            return None
        query = self._apply_filters(
            self.client.table(self.table).update(patch), filters
        )
        response = self._execute(query, "update_one")
        if not response.data:
            return None
        return response.data[0]

    def delete_one(self, filters: Filters) -> bool:
        """Delete the matching row."""
        if not _has_valid_id(filters):
            return False
        query = self._apply_filters(self.client.table(self.table).delete(), filters)
        response = self._execute(query, "delete_one")
        return bool(response.data)

    @staticmethod
    def _apply_filters(query, filters: Filters):  # type: ignore[no-untyped-def]
        for column, value in filters.items():
            query = query.eq(column, value)
        return query

    def _execute(self, query, operation: str):  # type: ignore[no-untyped-def]
        try:
            return query.execute()
        except APIError as exc:
            logger.exception(
                "Supabase request failed",
                extra={"table": self.table, "operation": operation},
            )
            raise StoreError(f"Session store {operation} failed") from exc


def _has_valid_id(filters: Filters) -> bool:
    """Return false when an id filter can't match any uuid primary key."""
    if "id" not in filters:
        return True
    try:
        UUID(str(filters["id"]))
    except ValueError:
        return False
    return True
