"""Request dependencies for the sessions API."""

from fastapi import Header, Request

from wellness_sessions.containers import AppContainer
from wellness_sessions.services.auth import parse_bearer_token
from wellness_sessions.services.sessions import SessionService


def get_session_service(request: Request) -> SessionService:
    container: AppContainer = request.app.state.container
    return container.session_service


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> str:
    """Resolve the bearer credential into the caller's user id."""
    container: AppContainer = request.app.state.container
    token = parse_bearer_token(authorization)
    return container.identity_resolver.resolve_identity(token)
