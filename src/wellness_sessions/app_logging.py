"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONTEXT_FIELDS = ("session_id", "user_id", "method", "path")


class SessionContextFormatter(logging.Formatter):
    """Append the session and request context passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in _CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        if not context:
            return message
        return f"{message} [{' '.join(context)}]"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger.

    Repeated calls only adjust the level.
    """
    logger = logging.getLogger("wellness_sessions")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(SessionContextFormatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
