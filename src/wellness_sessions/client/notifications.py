"""User-facing feedback channel for client actions."""

import logging
from dataclasses import dataclass, field
from typing import Protocol


class Notifier(Protocol):
    """Interface for transient user notifications."""

    def success(self, message: str) -> None:
        """Show a success notification."""

    def error(self, message: str) -> None:
        """Show an error notification."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that writes notifications to the application log."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("wellness_sessions.notifications")
    )

    def success(self, message: str) -> None:
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.logger.warning(message)
