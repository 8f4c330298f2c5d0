"""Domain models for wellness sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class SessionStatus(StrEnum):
    """Publication state of a session."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted wellness session."""

    id: str
    owner_id: str
    title: str
    tags: list[str]
    data_url: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    @property
    def is_published(self) -> bool:
        return self.status == SessionStatus.PUBLISHED


@dataclass(frozen=True)
class SessionDraft:
    """Editable fields submitted by a save-draft call."""

    title: str
    data_url: str
    tags: list[str] = field(default_factory=list)
    session_id: str | None = None


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save-draft call."""

    session: SessionRecord
    created: bool
