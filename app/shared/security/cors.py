"""
Cross-origin policy.

Browsers send an Origin header on cross-origin requests. A request whose
origin is not on the allow-list is refused with an Authorization error
before it reaches a route. Requests without an Origin header (curl,
server-to-server, same-origin navigations) always pass.

Preflight requests from allowed origins that ask for a method or header
outside the policy are refused here as well, so the rejection is rendered
like every other error.

Starlette's CORSMiddleware, installed just inside this one, emits the
CORS response headers for allowed origins.
"""

from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from app.shared.errors.handlers import render_error
from app.shared.errors.taxonomy import AuthorizationError

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]

# Always accepted by CORSMiddleware, whatever the configured list.
SAFELISTED_HEADERS = frozenset({"accept", "accept-language", "content-language", "content-type"})


def preflight_allowed(method: str, requested_headers: str) -> bool:
    """Return True if a preflight's requested method and headers are permitted."""
    if method.upper() not in CORS_METHODS:
        return False
    allowed = SAFELISTED_HEADERS | {h.lower() for h in CORS_HEADERS}
    requested = {h.strip().lower() for h in requested_headers.split(",") if h.strip()}
    return requested <= allowed


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    """Reject requests from origins outside the allow-list.

    Args:
        app: The wrapped ASGI application.
        allowed_origins: Exact origins that may call the API.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        if origin is None:
            return await call_next(request)

        allowed = origin in self.allowed_origins
        requested_method = request.headers.get("access-control-request-method")
        if allowed and request.method == "OPTIONS" and requested_method is not None:
            allowed = preflight_allowed(
                requested_method, request.headers.get("access-control-request-headers", "")
            )
        if not allowed:
            return render_error(request, AuthorizationError("CORS policy violation"))
        return await call_next(request)
