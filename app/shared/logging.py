"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
Every record carries the correlation id of the request it was emitted
under, or "-" outside a request.
"""

import logging
import sys

from app.shared.context import current_context

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(correlation_id)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SECURITY_LOGGER = "app.security"

_CONTEXT_FIELDS = ("correlation_id", "client_address", "user_agent")


class RequestContextFilter(logging.Filter):
    """Fill in request identity fields on every record.

    Records emitted through a ``ContextLogger`` already carry them; other
    records take them from the current request, if any.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_context()
        for name in _CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, getattr(context, name, "-") if context else "-")
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestContextFilter())

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)


def security_logger() -> logging.Logger:
    """Return the logger dedicated to security events."""
    return logging.getLogger(SECURITY_LOGGER)
