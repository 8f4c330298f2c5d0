"""Error taxonomy shared by the service, the API and the client."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    """A single invalid input field and the reason it was rejected."""

    field: str
    message: str


class SessionsError(Exception):
    """Base class for wellness session errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SessionsError):
    """Raised when required input is missing or malformed."""

    def __init__(
        self,
        violations: list[FieldViolation],
        message: str = "Validation errors",
    ) -> None:
        super().__init__(message)
        self.violations = list(violations)

    @property
    def fields(self) -> list[str]:
        return [violation.field for violation in self.violations]


class NotFoundError(SessionsError):
    """Raised when no session matches for the requesting owner."""

    def __init__(self, message: str = "Session not found") -> None:
        super().__init__(message)


class AuthError(SessionsError):
    """Raised when a bearer credential is missing or invalid."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message)


class StoreError(SessionsError):
    """Raised when the underlying persistence layer fails."""


class NetworkError(SessionsError):
    """Raised by the client when the API cannot be reached."""
