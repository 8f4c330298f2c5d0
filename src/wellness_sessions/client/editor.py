"""Editor form state with debounced auto-save."""

import asyncio
import logging
from datetime import UTC, datetime
from enum import Enum

from wellness_sessions.client.state import ClientSessionState
from wellness_sessions.domain.sessions import SessionDraft, SessionRecord, SessionStatus
from wellness_sessions.domain.validation import parse_tag_string
from wellness_sessions.errors import NotFoundError

logger = logging.getLogger(__name__)

AUTOSAVE_DELAY_SECONDS = 5.0

_FIELDS = ("title", "tags", "data_url")


class SaveState(Enum):
    """Whether a manual save is in flight."""

    IDLE = "idle"
    SAVING = "saving"


class EditorForm:
    """Field state for creating or editing one session.

    Every keystroke restarts the inactivity timer. The timer is armed only
    while no manual save is pending, and a manual save cancels it. A timer
    that fires while an auto-save is still running is pushed back, so at most
    one write for the form is ever in flight.
    """

    def __init__(
        self,
        state: ClientSessionState,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
    ) -> None:
        self.state = state
        self.autosave_delay = autosave_delay
        self.title = ""
        self.tags = ""
        self.data_url = ""
        self.session_id: str | None = None
        self.status = SessionStatus.DRAFT
        self.save_state = SaveState.IDLE
        self.is_auto_saving = False
        self.last_saved: datetime | None = None
        self.alive = True
        self._timer: asyncio.TimerHandle | None = None
        self._autosave_task: asyncio.Task[SessionRecord | None] | None = None

    @classmethod
    def for_session(
        cls,
        state: ClientSessionState,
        session_id: str,
        autosave_delay: float = AUTOSAVE_DELAY_SECONDS,
    ) -> "EditorForm":
        """Open a cached session for editing."""
        session = state.get(session_id)
        if session is None:
            raise NotFoundError
        form = cls(state, autosave_delay=autosave_delay)
        form.title = session.title
        form.tags = ", ".join(session.tags)
        form.data_url = session.data_url
        form.session_id = session.id
        form.status = session.status
        return form

    @property
    def is_editing(self) -> bool:
        return self.session_id is not None

    @property
    def is_saving(self) -> bool:
        return self.save_state is SaveState.SAVING

    @property
    def autosave_pending(self) -> bool:
        return self._timer is not None

    def update(self, **fields: str) -> None:
        """Apply typed input and restart the inactivity timer."""
        for name, value in fields.items():
            if name not in _FIELDS:
                raise TypeError(f"Unknown editor field: {name}")
            setattr(self, name, value)
        self._cancel_timer()
        if self._has_content() and not self.is_saving and self.alive:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self.autosave_delay, self._on_timer)

    def draft(self) -> SessionDraft:
        """Build the save-draft request from the current fields."""
        return SessionDraft(
            title=self.title.strip(),
            tags=parse_tag_string(self.tags),
            data_url=self.data_url.strip(),
            session_id=self.session_id,
        )

    async def auto_save(self) -> SessionRecord | None:
        """Save the current fields in the background."""
        if not self.title.strip() or self.is_saving or self.is_auto_saving:
            return None
        self.is_auto_saving = True
        try:
            result = await self.state.auto_save_draft(
                self.draft(), notify=self._autosave_feedback_wanted
            )
        finally:
            self.is_auto_saving = False
        if result is None:
            return None
        self._adopt(result)
        return result

    async def save(self, publish: bool = False) -> SessionRecord | None:
        """Save on explicit request, optionally publishing afterwards."""
        if not self.title.strip():
            self.state.notifier.error("Please enter a title")
            return None

        if self.is_saving:
            return None

        self._cancel_timer()
        self.save_state = SaveState.SAVING
        try:
            pending = self._autosave_task
            if pending is not None and not pending.done():
                await pending
            result = await self.state.save_draft(
                self.draft(), notify=False if publish else self._is_alive
            )
            if result is None:
                return None
            self._adopt(result)
            if not publish:
                return result
            if self.status is SessionStatus.PUBLISHED:
                self._feedback("Session updated successfully!")
                return result
            published = await self.state.publish(result.id, notify=False)
            if published is None:
                self._feedback("Failed to publish session", error=True)
                return None
            self._adopt(published)
            self._feedback("Session published successfully!")
            return published
        finally:
            self.save_state = SaveState.IDLE

    def close(self) -> None:
        """Detach the form: stop the timer and silence late responses."""
        self.alive = False
        self._cancel_timer()

    def _is_alive(self) -> bool:
        return self.alive

    def _autosave_feedback_wanted(self) -> bool:
        return self.alive and self.status is not SessionStatus.PUBLISHED

    def _on_timer(self) -> None:
        self._timer = None
        if self._autosave_running():
            # Wait for the running save so the next one carries its id.
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self.autosave_delay, self._on_timer)
            return
        self._autosave_task = asyncio.ensure_future(self.auto_save())

    def _autosave_running(self) -> bool:
        return self._autosave_task is not None and not self._autosave_task.done()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _has_content(self) -> bool:
        return any(getattr(self, name).strip() for name in _FIELDS)

    def _adopt(self, session: SessionRecord) -> None:
        if self.session_id is None:
            logger.info("Editing new session", extra={"session_id": session.id})
        self.session_id = session.id
        self.status = session.status
        self.last_saved = datetime.now(tz=UTC)

    def _feedback(self, message: str, error: bool = False) -> None:
        if not self.alive:
            return
        if error:
            self.state.notifier.error(message)
        else:
            self.state.notifier.success(message)
