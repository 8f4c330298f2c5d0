"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from wellness_sessions.adapters.supabase_identity_resolver import (
    SupabaseIdentityResolver,
)
from wellness_sessions.adapters.supabase_session_store import SupabaseSessionStore
from wellness_sessions.client.api_client import HttpxSessionApiClient
from wellness_sessions.client.notifications import LoggingNotifier, Notifier
from wellness_sessions.client.state import ClientSessionState
from wellness_sessions.config import Settings
from wellness_sessions.services.auth import IdentityResolver
from wellness_sessions.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_resolver: IdentityResolver
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_store = SupabaseSessionStore(
        supabase_client, table=resolved_settings.sessions_table
    )
    session_service = SessionService(
        store=session_store,
        published_limit=resolved_settings.published_limit,
    )
    identity_resolver = SupabaseIdentityResolver(supabase_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        identity_resolver=identity_resolver,
        session_service=session_service,
        close_resources=close_resources,
    )


def build_client_state(
    settings: Settings,
    token: str | None = None,
    notifier: Notifier | None = None,
) -> ClientSessionState:
    """Create a client-side session cache talking to the configured API."""
    api = HttpxSessionApiClient.create(settings.api_base_url, token=token)
    return ClientSessionState(api=api, notifier=notifier or LoggingNotifier())
