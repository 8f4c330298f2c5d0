"""Shared test fixtures."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from wellness_sessions.client.api_client import ApiResult
from wellness_sessions.config import Settings
from wellness_sessions.containers import AppContainer
from wellness_sessions.domain.sessions import SessionDraft, SessionRecord
from wellness_sessions.errors import AuthError, SessionsError
from wellness_sessions.services.auth import IdentityResolver
from wellness_sessions.services.sessions import SessionService, SessionStore

USER_TOKEN = "user-token"
OTHER_TOKEN = "other-token"
USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@dataclass
class InMemorySessionStore(SessionStore):
    """In-memory session store for tests."""

    documents: dict[str, dict[str, object]] = field(default_factory=dict)

    def find(
        self,
        filters: Mapping[str, object],
        sort: tuple[str, bool] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, object]]:
        rows = [dict(doc) for doc in self.documents.values() if _matches(doc, filters)]
        if sort is not None:
            column, descending = sort
            rows.sort(key=lambda row: str(row[column]), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def find_one(self, filters: Mapping[str, object]) -> dict[str, object] | None:
        for doc in self.documents.values():
            if _matches(doc, filters):
                return dict(doc)
        return None

    def insert(self, document: dict[str, object]) -> dict[str, object]:
        self.documents[str(document["id"])] = dict(document)
        return dict(document)

    def update_one(
        self, filters: Mapping[str, object], patch: dict[str, object]
    ) -> dict[str, object] | None:
        for doc in self.documents.values():
            if _matches(doc, filters):
                doc.update(patch)
                return dict(doc)
        return None

    def delete_one(self, filters: Mapping[str, object]) -> bool:
        for key, doc in list(self.documents.items()):
            if _matches(doc, filters):
                del self.documents[key]
                return True
        return False


def _matches(doc: Mapping[str, object], filters: Mapping[str, object]) -> bool:
    return all(doc.get(column) == value for column, value in filters.items())


@dataclass
class FakeIdentityResolver(IdentityResolver):
    """Resolves a fixed set of tokens."""

    tokens: dict[str, str] = field(
        default_factory=lambda: {USER_TOKEN: USER_ID, OTHER_TOKEN: OTHER_USER_ID}
    )

    def resolve_identity(self, token: str) -> str:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise AuthError("Token is not valid")
        return user_id


@dataclass
class SteppingClock:
    """Clock that advances one second per call."""

    current: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@dataclass
class RecordingNotifier:
    """Notifier that records every notification."""

    successes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@dataclass
class ServiceBackedApi:
    """Session API fake that calls the service directly as one user."""

    service: SessionService
    user_id: str = USER_ID
    calls: list[str] = field(default_factory=list)
    failure: SessionsError | None = None

    async def list_published(self) -> list[SessionRecord]:
        self._record("list_published")
        return self.service.list_published()

    async def list_own(self) -> list[SessionRecord]:
        self._record("list_own")
        return self.service.list_own(self.user_id)

    async def get_own(self, session_id: str) -> SessionRecord:
        self._record("get_own")
        return self.service.get_own(self.user_id, session_id)

    async def save_draft(self, draft: SessionDraft) -> ApiResult:
        self._record("save_draft")
        result = self.service.save_draft(self.user_id, draft)
        message = (
            "Draft saved successfully"
            if result.created
            else "Draft updated successfully"
        )
        return ApiResult(session=result.session, message=message)

    async def publish(self, session_id: str) -> ApiResult:
        self._record("publish")
        session = self.service.publish(self.user_id, session_id)
        return ApiResult(session=session, message="Session published successfully")

    async def delete(self, session_id: str) -> str:
        self._record("delete")
        self.service.delete_own(self.user_id, session_id)
        return "Session deleted successfully"

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.failure is not None:
            raise self.failure


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        environment="test",
    )


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def session_service(session_store: InMemorySessionStore) -> SessionService:
    return SessionService(store=session_store, clock=SteppingClock())


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def api(session_service: SessionService) -> ServiceBackedApi:
    return ServiceBackedApi(service=session_service)


@pytest.fixture
def container(settings: Settings, session_service: SessionService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_resolver=FakeIdentityResolver(),
        session_service=session_service,
        close_resources=close_resources,
    )


def auth_headers(token: str = USER_TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def sample_draft(**overrides: object) -> SessionDraft:
    values: dict[str, object] = {
        "title": "Morning Breath",
        "tags": ["breathing", "calm"],
        "data_url": "https://cdn.example.com/sessions/morning.json",
    }
    values.update(overrides)
    return SessionDraft(**values)  # type: ignore[arg-type]

