"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from types import SimpleNamespace
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from wellness_sessions.adapters.supabase_identity_resolver import (
    SupabaseIdentityResolver,
)
from wellness_sessions.adapters.supabase_session_store import SupabaseSessionStore
from wellness_sessions.errors import AuthError, StoreError


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None
    error: Exception | None = None
    executed: int = 0

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        self.executed += 1
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(session_id: str, status: str = "draft") -> dict[str, object]:
    return {
        "id": session_id,
        "owner_id": "user-1",
        "title": "Morning Breath",
        "tags": ["calm"],
        "json_file_url": "https://x.io/a",
        "status": status,
        "created_at": "2024-01-01T09:00:00+00:00",
        "updated_at": "2024-01-01T09:00:00+00:00",
    }


def test_find_applies_filters_sort_and_limit() -> None:
    client = FakeSupabaseClient()
    table = client.table("sessions")
    table.queue("select", [_row(str(uuid4()), "published")])

    store = SupabaseSessionStore(client)
    rows = store.find({"status": "published"}, sort=("created_at", True), limit=50)

    assert len(rows) == 1
    assert table.last_filters == [("status", "published")]
    assert table.last_order == ("created_at", True)
    assert table.last_limit == 50


def test_find_one_and_insert_use_configured_table() -> None:
    client = FakeSupabaseClient()
    table = client.table("wellness_sessions")
    session_id = str(uuid4())
    table.queue("insert", [_row(session_id)])
    table.queue("select", [_row(session_id)])

    store = SupabaseSessionStore(client, table="wellness_sessions")
    inserted = store.insert(_row(session_id))
    fetched = store.find_one({"id": session_id, "owner_id": "user-1"})

    assert inserted["id"] == session_id
    assert fetched is not None
    assert ("owner_id", "user-1") in table.last_filters
    assert table.last_limit == 1


def test_insert_without_returned_row_raises() -> None:
    client = FakeSupabaseClient()

    store = SupabaseSessionStore(client)

    with pytest.raises(StoreError):
        store.insert(_row(str(uuid4())))


def test_update_and_delete_report_matches() -> None:
    client = FakeSupabaseClient()
    table = client.table("sessions")
    session_id = str(uuid4())
    table.queue("update", [_row(session_id, "published")])
    table.queue("delete", [])

    store = SupabaseSessionStore(client)
    updated = store.update_one({"id": session_id}, {"status": "published"})
    deleted = store.delete_one({"id": session_id})

    assert updated is not None
    assert updated["status"] == "published"
    assert table.last_payload == {"status": "published"}
    assert deleted is False


def test_malformed_id_short_circuits() -> None:
    client = FakeSupabaseClient()
    table = client.table("sessions")

    store = SupabaseSessionStore(client)

    assert store.find_one({"id": "not-a-uuid"}) is None
    assert store.update_one({"id": "not-a-uuid"}, {"title": "x"}) is None
    assert store.delete_one({"id": "not-a-uuid"}) is False
    assert table.executed == 0


def test_api_errors_become_store_errors() -> None:
    client = FakeSupabaseClient()
    table = client.table("sessions")
    table.error = APIError({"message": "boom", "code": "500"})

    store = SupabaseSessionStore(client)

    with pytest.raises(StoreError):
        store.find({"status": "published"})


@dataclass
class FakeAuth:
    users: dict[str, str]

    def get_user(self, jwt: str):  # type: ignore[no-untyped-def]
        if jwt not in self.users:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.users[jwt]))


def test_identity_resolver_returns_user_id() -> None:
    client = SimpleNamespace(auth=FakeAuth({"good": "user-1"}))

    resolver = SupabaseIdentityResolver(client)

    assert resolver.resolve_identity("good") == "user-1"
    with pytest.raises(AuthError):
        resolver.resolve_identity("bad")
