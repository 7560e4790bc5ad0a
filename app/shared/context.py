"""
Per-request context.

Every inbound request gets a correlation id and a logger pre-bound with
that id, the client address and the user agent. The context is attached to
``request.state.context`` and published through a context variable so that
module-level loggers deeper in the stack pick up the correlation id too.
"""

import logging
import secrets
import string
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, MutableMapping, Optional

from starlette.requests import HTTPConnection

_BASE36 = string.digits + string.ascii_lowercase
UNKNOWN_USER_AGENT = "Unknown"

_current_context: ContextVar[Optional["RequestContext"]] = ContextVar(
    "request_context", default=None
)


def _base36(value: int) -> str:
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def generate_correlation_id() -> str:
    """Return a new correlation id: millisecond time plus a random suffix."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{_base36(time.time_ns() // 1_000_000)}-{suffix}"


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that stamps every record with the request's identity."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


@dataclass(frozen=True)
class RequestContext:
    """Identity of one in-flight request.

    Attributes:
        correlation_id: Opaque token tying together all log lines and the
            error response of this request.
        client_address: Remote address as seen by the server.
        user_agent: Client user agent, or "Unknown".
        logger: Logger bound to the three fields above.
        started_at: Monotonic instant the request was received.
    """

    correlation_id: str
    client_address: str
    user_agent: str
    logger: ContextLogger
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000


def build_request_context(
    connection: HTTPConnection, logger_name: str = "app.request"
) -> RequestContext:
    """Create the context for an inbound request."""
    correlation_id = generate_correlation_id()
    client_address = connection.client.host if connection.client else "unknown"
    user_agent = connection.headers.get("user-agent", UNKNOWN_USER_AGENT)
    bound = ContextLogger(
        logging.getLogger(logger_name),
        {
            "correlation_id": correlation_id,
            "client_address": client_address,
            "user_agent": user_agent,
        },
    )
    return RequestContext(
        correlation_id=correlation_id,
        client_address=client_address,
        user_agent=user_agent,
        logger=bound,
    )


def get_request_context(connection: HTTPConnection) -> RequestContext:
    """Return the context attached to ``connection``.

    Builds and attaches one if the request bypassed the context middleware
    (for example an error raised by an outer middleware).
    """
    context = getattr(connection.state, "context", None)
    if context is None:
        context = build_request_context(connection)
        connection.state.context = context
    return context


def bind_context(context: Optional[RequestContext]):
    """Publish ``context`` as the current one. Returns a reset token."""
    return _current_context.set(context)


def reset_context(token) -> None:
    _current_context.reset(token)


def current_context() -> Optional[RequestContext]:
    """Return the context of the request being served, if any."""
    return _current_context.get()
