"""
HTTPS enforcement middleware.

Redirects plain HTTP requests to HTTPS when enabled. Requests that reached
a TLS-terminating proxy over HTTPS are recognized by X-Forwarded-Proto.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from app.shared.context import get_request_context


class HTTPSRedirectMiddleware(BaseHTTPMiddleware):
    """Send a 301 to the https URL of any request that is not secure.

    Args:
        app: The wrapped ASGI application.
        enabled: Only redirect when set (production with HTTPS_ONLY).
    """

    def __init__(self, app: ASGIApp, enabled: bool = False) -> None:
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self.enabled and not _is_secure(request):
            host = request.headers.get("host", request.url.netloc)
            target = f"https://{host}{request.url.path}"
            if request.url.query:
                target = f"{target}?{request.url.query}"
            get_request_context(request).logger.info("Redirecting insecure request to %s", target)
            return RedirectResponse(target, status_code=301)
        return await call_next(request)


def _is_secure(request: Request) -> bool:
    forwarded = request.headers.get("x-forwarded-proto", "")
    return request.url.scheme == "https" or forwarded.split(",")[0].strip() == "https"
