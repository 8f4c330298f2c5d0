"""Draft/publish lifecycle for wellness sessions."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from wellness_sessions.domain.sessions import (
    SaveResult,
    SessionDraft,
    SessionRecord,
    SessionStatus,
)
from wellness_sessions.domain.validation import normalize_tags, validate_draft
from wellness_sessions.errors import FieldViolation, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

Document = dict[str, object]
Filters = Mapping[str, object]


class SessionStore(Protocol):
    """Persistence interface for session documents."""

    def find(
        self,
        filters: Filters,
        sort: tuple[str, bool] | None = None,
        limit: int | None = None,
    ) -> list[Document]:
        """Return documents matching every filter, optionally sorted and capped."""

    def find_one(self, filters: Filters) -> Document | None:
        """Return the first document matching every filter, if present."""

    def insert(self, document: Document) -> Document:
        """Insert a document and return the stored representation."""

    def update_one(self, filters: Filters, patch: Document) -> Document | None:
        """Apply a patch to the matching document and return it, if any."""

    def delete_one(self, filters: Filters) -> bool:
        """Delete the matching document and report whether one existed."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Owner-scoped CRUD and status transitions for sessions."""

    store: SessionStore
    published_limit: int = 50
    clock: Callable[[], datetime] = field(default=_utcnow)

    def list_published(self) -> list[SessionRecord]:
        """Return published sessions, newest first."""
        rows = self.store.find(
            {"status": SessionStatus.PUBLISHED.value},
            sort=("created_at", True),
            limit=self.published_limit,
        )
        return [_to_record(row) for row in rows]

    def list_own(self, user_id: str) -> list[SessionRecord]:
        """Return every session owned by the user, most recently updated first."""
        rows = self.store.find({"owner_id": user_id}, sort=("updated_at", True))
        return [_to_record(row) for row in rows]

    def get_own(self, user_id: str, session_id: str) -> SessionRecord:
        """Return an owned session or raise NotFoundError."""
        row = self.store.find_one(_owned(user_id, session_id))
        if row is None:
            raise NotFoundError
        return _to_record(row)

    def save_draft(self, user_id: str, draft: SessionDraft) -> SaveResult:
        """Create a new draft or update an owned session in place.

        Updating never touches ``status``, so a published session edited
        through this path stays published.
        """
        violations = validate_draft(draft.title, draft.tags, draft.data_url)
        if violations:
            raise ValidationError(violations)

        now = self.clock().isoformat()
        fields: Document = {
            "title": draft.title.strip(),
            "tags": normalize_tags(draft.tags),
            "json_file_url": draft.data_url.strip(),
            "updated_at": now,
        }

        if not draft.session_id:
            row = self.store.insert(
                {
                    "id": str(uuid4()),
                    "owner_id": user_id,
                    "status": SessionStatus.DRAFT.value,
                    "created_at": now,
                    **fields,
                }
            )
            logger.info(
                "Created draft session",
                extra={"session_id": row["id"], "user_id": user_id},
            )
            return SaveResult(session=_to_record(row), created=True)

        filters = _owned(user_id, draft.session_id)
        if self.store.find_one(filters) is None:
            raise NotFoundError
        row = self.store.update_one(filters, fields)
        if row is None:
            raise NotFoundError
        logger.info(
            "Updated session",
            extra={"session_id": draft.session_id, "user_id": user_id},
        )
        return SaveResult(session=_to_record(row), created=False)

    def publish(self, user_id: str, session_id: str | None) -> SessionRecord:
        """Mark an owned session as published."""
        if not session_id or not session_id.strip():
            raise ValidationError(
                [FieldViolation("sessionId", "Session ID is required")]
            )
        row = self.store.update_one(
            _owned(user_id, session_id),
            {
                "status": SessionStatus.PUBLISHED.value,
                "updated_at": self.clock().isoformat(),
            },
        )
        if row is None:
            raise NotFoundError
        logger.info(
            "Published session",
            extra={"session_id": session_id, "user_id": user_id},
        )
        return _to_record(row)

    def delete_own(self, user_id: str, session_id: str) -> bool:
        """Permanently delete an owned session."""
        if not self.store.delete_one(_owned(user_id, session_id)):
            raise NotFoundError
        logger.info(
            "Deleted session",
            extra={"session_id": session_id, "user_id": user_id},
        )
        return True


def _owned(user_id: str, session_id: str) -> dict[str, object]:
    return {"id": session_id, "owner_id": user_id}


def _parse_timestamp(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _to_record(row: Mapping[str, object]) -> SessionRecord:
    tags = row.get("tags") or []
    return SessionRecord(
        id=str(row["id"]),
        owner_id=str(row["owner_id"]),
        title=str(row["title"]),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        data_url=str(row["json_file_url"]),
        status=SessionStatus(str(row["status"])),
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )
