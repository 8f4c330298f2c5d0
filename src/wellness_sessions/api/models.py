"""Pydantic models for the sessions HTTP surface."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wellness_sessions.domain.sessions import SessionDraft, SessionRecord, SessionStatus


class SessionOut(BaseModel):
    """Wire representation of a session."""

    id: str
    owner_id: str
    title: str
    tags: list[str] = Field(default_factory=list)
    json_file_url: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionOut":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            title=record.title,
            tags=list(record.tags),
            json_file_url=record.data_url,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record(self) -> SessionRecord:
        return SessionRecord(
            id=self.id,
            owner_id=self.owner_id,
            title=self.title,
            tags=list(self.tags),
            data_url=self.json_file_url,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SaveDraftRequest(BaseModel):
    """Body of the save-draft endpoint.

    Content rules are enforced by the service so every violated field is
    reported together; this model only checks shapes.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    tags: list[str] = Field(default_factory=list)
    json_file_url: str = ""
    session_id: str | None = Field(default=None, alias="sessionId")

    def to_draft(self) -> SessionDraft:
        return SessionDraft(
            title=self.title,
            tags=list(self.tags),
            data_url=self.json_file_url,
            session_id=self.session_id or None,
        )

    @classmethod
    def from_draft(cls, draft: SessionDraft) -> "SaveDraftRequest":
        return cls(
            title=draft.title,
            tags=list(draft.tags),
            json_file_url=draft.data_url,
            session_id=draft.session_id,
        )


class PublishRequest(BaseModel):
    """Body of the publish endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")


class FieldErrorOut(BaseModel):
    field: str
    message: str


class ApiResponse(BaseModel):
    """Envelope returned by every sessions endpoint."""

    success: bool
    message: str | None = None
    count: int | None = None
    data: SessionOut | list[SessionOut] | None = None
    errors: list[FieldErrorOut] | None = None
