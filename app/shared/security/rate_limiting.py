"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits, keyed by client address.
Four limit classes exist; each route opts into one with a decorator.
The active limit strings are read at request time, so ``configure_limiter``
can change them for a given application.
"""

import math
import time
from typing import Callable

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.config import Settings, settings

GENERAL = "general"
READ_ONLY = "read_only"
CONTACT = "contact"
STRICT = "strict"

LIMIT_MESSAGES = {
    GENERAL: "Too many requests from this IP, please try again later.",
    READ_ONLY: "Too many requests from this IP, please try again later.",
    CONTACT: "Too many contact form submissions from this IP. Please try again in an hour.",
    STRICT: "Rate limit exceeded for sensitive operations. Please try again later.",
}

_active_limits: dict[str, str] = {}

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    enabled=settings.rate_limit_enabled,
)


def configure_limiter(config: Settings) -> Limiter:
    """Apply the limit strings and the on/off switch from ``config``."""
    _active_limits.update(
        {
            GENERAL: config.rate_limit_general,
            READ_ONLY: config.rate_limit_read_only,
            CONTACT: config.rate_limit_contact,
            STRICT: config.rate_limit_strict,
        }
    )
    limiter.enabled = config.rate_limit_enabled
    return limiter


configure_limiter(settings)


def _limit_for(limit_class: str) -> Callable[[], str]:
    return lambda: _active_limits[limit_class]


def _decorator(limit_class: str):
    # Routes of one class share a single window per client.
    return limiter.shared_limit(
        _limit_for(limit_class),
        scope=limit_class,
        error_message=LIMIT_MESSAGES[limit_class],
    )


limit_general = _decorator(GENERAL)
limit_read_only = _decorator(READ_ONLY)
limit_contact = _decorator(CONTACT)
limit_strict = _decorator(STRICT)


def retry_after_seconds(request: Request, exc: RateLimitExceeded) -> int:
    """Seconds until the exceeded window resets for this client.

    Uses the limiter's window stats for the hit that failed; falls back to
    the full window length when those are not available.
    """
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        item, args = view_limit
        reset_time, _remaining = limiter.limiter.get_window_stats(item, *args)
        return max(1, math.ceil(reset_time - time.time()))
    return exc.limit.limit.get_expiry()
