"""HTTP client for the sessions API."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from wellness_sessions.api.models import (
    ApiResponse,
    PublishRequest,
    SaveDraftRequest,
    SessionOut,
)
from wellness_sessions.domain.sessions import SessionDraft, SessionRecord
from wellness_sessions.errors import (
    AuthError,
    FieldViolation,
    NetworkError,
    NotFoundError,
    SessionsError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResult:
    """A successful mutating call: the session plus the server's message."""

    session: SessionRecord
    message: str


class SessionApi(Protocol):
    """Interface for the sessions HTTP surface."""

    async def list_published(self) -> list[SessionRecord]:
        """Return published sessions."""

    async def list_own(self) -> list[SessionRecord]:
        """Return the caller's sessions."""

    async def get_own(self, session_id: str) -> SessionRecord:
        """Return one of the caller's sessions."""

    async def save_draft(self, draft: SessionDraft) -> ApiResult:
        """Create or update a draft."""

    async def publish(self, session_id: str) -> ApiResult:
        """Publish a session."""

    async def delete(self, session_id: str) -> str:
        """Delete a session and return the confirmation message."""


@dataclass
class HttpxSessionApiClient:
    """Sessions API client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    token: str | None = None

    @classmethod
    def create(cls, base_url: str, token: str | None = None) -> "HttpxSessionApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            token=token,
        )

    async def list_published(self) -> list[SessionRecord]:
        """Fetch the public listing."""
        body = await self._request("GET", "/sessions", authenticated=False)
        return _records(body)

    async def list_own(self) -> list[SessionRecord]:
        """Fetch the caller's drafts and published sessions."""
        body = await self._request("GET", "/sessions/my-sessions")
        return _records(body)

    async def get_own(self, session_id: str) -> SessionRecord:
        """Fetch a single owned session."""
        body = await self._request("GET", f"/sessions/my-sessions/{session_id}")
        return _record(body)

    async def save_draft(self, draft: SessionDraft) -> ApiResult:
        """Send a save-draft request."""
        payload = SaveDraftRequest.from_draft(draft).model_dump(
            by_alias=True, exclude_none=True
        )
        body = await self._request(
            "POST", "/sessions/my-sessions/save-draft", json=payload
        )
        return ApiResult(session=_record(body), message=body.message or "")

    async def publish(self, session_id: str) -> ApiResult:
        """Send a publish request."""
        payload = PublishRequest(session_id=session_id).model_dump(by_alias=True)
        body = await self._request(
            "POST", "/sessions/my-sessions/publish", json=payload
        )
        return ApiResult(session=_record(body), message=body.message or "")

    async def delete(self, session_id: str) -> str:
        """Send a delete request."""
        body = await self._request("DELETE", f"/sessions/my-sessions/{session_id}")
        return body.message or ""

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
        authenticated: bool = True,
    ) -> ApiResponse:
        headers = {"Content-Type": "application/json"}
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers=headers,
                timeout=10,
            )
        except httpx.HTTPError as exc:
            logger.warning("Request to %s failed: %s", path, exc)
            raise NetworkError("Network error") from exc
        try:
            body = ApiResponse.model_validate(response.json())
        except ValueError as exc:
            raise SessionsError(
                f"Unexpected response ({response.status_code})"
            ) from exc
        if response.is_success and body.success:
            return body
        raise _error_for(response.status_code, body)


def _error_for(status_code: int, body: ApiResponse) -> SessionsError:
    message = body.message or "Request failed"
    if status_code == httpx.codes.BAD_REQUEST:
        violations = [
            FieldViolation(field=error.field, message=error.message)
            for error in body.errors or []
        ]
        return ValidationError(violations, message=message)
    if status_code == httpx.codes.UNAUTHORIZED:
        return AuthError(message)
    if status_code == httpx.codes.NOT_FOUND:
        return NotFoundError(message)
    return SessionsError(message)


def _record(body: ApiResponse) -> SessionRecord:
    if not isinstance(body.data, SessionOut):
        raise SessionsError("Response did not include a session")
    return body.data.to_record()


def _records(body: ApiResponse) -> list[SessionRecord]:
    if not isinstance(body.data, list):
        return []
    return [item.to_record() for item in body.data]
