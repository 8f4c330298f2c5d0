"""Bearer credential resolution."""

from typing import Protocol

from wellness_sessions.errors import AuthError


class IdentityResolver(Protocol):
    """Interface for resolving bearer tokens into user ids."""

    def resolve_identity(self, token: str) -> str:
        """Return the user id for a token or raise AuthError."""


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthError("No token, authorization denied")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError("Token is not valid")
    return token
