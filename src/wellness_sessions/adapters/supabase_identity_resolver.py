"""Supabase Auth identity resolver."""

import logging
from dataclasses import dataclass

from supabase import Client

from wellness_sessions.errors import AuthError
from wellness_sessions.services.auth import IdentityResolver

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityResolver(IdentityResolver):
    """Resolve access tokens issued by Supabase Auth."""

    client: Client

    def resolve_identity(self, token: str) -> str:
        """Return the Supabase user id that owns the access token."""
        try:
            response = self.client.auth.get_user(token)
        except Exception as exc:
            logger.warning("Rejected bearer token: %s", type(exc).__name__)
            raise AuthError("Token is not valid") from exc
        user = getattr(response, "user", None)
        if user is None or not getattr(user, "id", None):
            raise AuthError("Token is not valid")
        return str(user.id)
