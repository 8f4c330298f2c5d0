"""Client-side session cache kept coherent with server responses."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from wellness_sessions.client.api_client import SessionApi
from wellness_sessions.client.notifications import LoggingNotifier, Notifier
from wellness_sessions.domain.sessions import SessionDraft, SessionRecord
from wellness_sessions.errors import NetworkError, SessionsError

logger = logging.getLogger(__name__)

AUTO_SAVE_MESSAGE = "Draft saved automatically"

# A flag, or a predicate checked once the response has arrived.
Notify = bool | Callable[[], bool]


@dataclass
class ClientSessionState:
    """Local cache of sessions keyed by id.

    Entries change only after a request resolves, and always to the
    representation the server returned. A failed request leaves the cache at
    its last known good state.
    """

    api: SessionApi
    notifier: Notifier = field(default_factory=LoggingNotifier)
    sessions: dict[str, SessionRecord] = field(default_factory=dict)
    loading: bool = False

    async def fetch_user_sessions(self) -> list[SessionRecord]:
        """Replace the cache with the caller's sessions."""
        return await self._fetch(self.api.list_own, "Failed to fetch sessions")

    async def fetch_published_sessions(self) -> list[SessionRecord]:
        """Replace the cache with the public listing."""
        return await self._fetch(
            self.api.list_published, "Failed to fetch published sessions"
        )

    def get(self, session_id: str) -> SessionRecord | None:
        """Return a cached session by id."""
        return self.sessions.get(session_id)

    async def save_draft(
        self, draft: SessionDraft, notify: Notify = True
    ) -> SessionRecord | None:
        """Save a draft on explicit user request."""
        try:
            result = await self.api.save_draft(draft)
        except SessionsError as exc:
            logger.warning("Save draft failed: %s", exc.message)
            if _should_notify(notify):
                self.notifier.error(_failure_message(exc, "Failed to save draft"))
            return None
        self.sessions[result.session.id] = result.session
        if _should_notify(notify):
            self.notifier.success(result.message)
        return result.session

    async def auto_save_draft(
        self, draft: SessionDraft, notify: Notify = True
    ) -> SessionRecord | None:
        """Save a draft in the background; failures are only logged."""
        try:
            result = await self.api.save_draft(draft)
        except SessionsError as exc:
            logger.error("Auto-save failed: %s", exc.message)
            return None
        self.sessions[result.session.id] = result.session
        if _should_notify(notify):
            self.notifier.success(AUTO_SAVE_MESSAGE)
        return result.session

    async def publish(
        self, session_id: str, notify: Notify = True
    ) -> SessionRecord | None:
        """Publish a session and cache the returned representation."""
        try:
            result = await self.api.publish(session_id)
        except SessionsError as exc:
            logger.warning("Publish session failed: %s", exc.message)
            if _should_notify(notify):
                self.notifier.error(
                    _failure_message(exc, "Failed to publish session")
                )
            return None
        self.sessions[result.session.id] = result.session
        if _should_notify(notify):
            self.notifier.success(result.message)
        return result.session

    async def delete(self, session_id: str, notify: Notify = True) -> bool:
        """Delete a session and drop it from the cache."""
        try:
            message = await self.api.delete(session_id)
        except SessionsError as exc:
            logger.warning("Delete session failed: %s", exc.message)
            if _should_notify(notify):
                self.notifier.error(_failure_message(exc, "Failed to delete session"))
            return False
        self.sessions.pop(session_id, None)
        if _should_notify(notify):
            self.notifier.success(message)
        return True

    async def _fetch(
        self, call: Callable[[], Awaitable[list[SessionRecord]]], failure: str
    ) -> list[SessionRecord]:
        self.loading = True
        try:
            records = await call()
        except SessionsError as exc:
            logger.warning("%s: %s", failure, exc.message)
            self.notifier.error(_failure_message(exc, failure))
            return []
        finally:
            self.loading = False
        self.sessions = {record.id: record for record in records}
        return records


def _failure_message(exc: SessionsError, fallback: str) -> str:
    if isinstance(exc, NetworkError):
        return f"Network error: {fallback.lower()}"
    return exc.message or fallback


def _should_notify(notify: Notify) -> bool:
    return notify() if callable(notify) else notify
