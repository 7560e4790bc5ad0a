"""
Optional external error tracking.

The tracker is a capability that may be absent: without a DSN a no-op
tracker is installed and nothing else changes. Only non-operational
errors are forwarded, by the error terminal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from app.core.config import Settings

logger = logging.getLogger(__name__)


class ErrorTracker(ABC):
    """Interface of an error tracking backend."""

    enabled = False

    @abstractmethod
    def capture(self, exc: BaseException, context: dict[str, Any]) -> None:
        """Forward ``exc`` with request ``context``."""
        raise NotImplementedError


class NoopErrorTracker(ErrorTracker):
    """Tracker used when no backend is configured."""

    def capture(self, exc: BaseException, context: dict[str, Any]) -> None:
        return None


class SentryErrorTracker(ErrorTracker):
    """Forwards errors to Sentry.

    Args:
        dsn: Project DSN.
        environment: Deployment environment tag.
        release: Release identifier.
        traces_sample_rate: Share of transactions traced.
    """

    enabled = True

    def __init__(
        self,
        dsn: str,
        environment: str,
        release: Optional[str],
        traces_sample_rate: float,
    ) -> None:
        import sentry_sdk

        self._sdk = sentry_sdk
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=release,
            traces_sample_rate=traces_sample_rate,
            send_default_pii=False,
        )
        logger.info("Sentry error tracking initialized (environment=%s)", environment)

    def capture(self, exc: BaseException, context: dict[str, Any]) -> None:
        with self._sdk.new_scope() as scope:
            scope.set_tag("correlation_id", context.get("correlation_id"))
            scope.set_tag("component", context.get("component", "api"))
            scope.set_context(
                "request",
                {k: context.get(k) for k in ("method", "url", "client_address", "user_agent")},
            )
            code = getattr(exc, "code", None)
            if code:
                scope.fingerprint = [str(code), str(exc)]
            self._sdk.capture_exception(exc)


def build_error_tracker(settings: Settings) -> ErrorTracker:
    """Return the tracker for ``settings``; no-op unless a DSN is set."""
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not provided, error tracking disabled")
        return NoopErrorTracker()
    return SentryErrorTracker(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=settings.sentry_release or f"{settings.project_name}@{settings.version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )
