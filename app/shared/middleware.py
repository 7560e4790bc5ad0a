"""
Request context middleware.

Gives every request a correlation id and a scoped logger, logs the request
and its response, records metrics, and hands any exception that escaped
the router to the error terminal. Sits just inside the security headers
middleware so that everything below it runs with a context.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import ClientDisconnect, Request
from starlette.responses import Response

from app.shared.context import bind_context, build_request_context, reset_context
from app.shared.errors.handlers import render_error

CORRELATION_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000
CLIENT_CLOSED_REQUEST = 499


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a RequestContext to each request and log its lifecycle."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = build_request_context(request)
        request.state.context = context
        token = bind_context(context)
        try:
            context.logger.debug(
                "Incoming request %s %s", request.method, request.url.path
            )
            try:
                response = await call_next(request)
            except ClientDisconnect:
                context.logger.warning(
                    "Request aborted by client: %s %s after %.1fms",
                    request.method,
                    request.url.path,
                    context.elapsed_ms,
                )
                response = Response(status_code=CLIENT_CLOSED_REQUEST)
            except Exception as exc:
                response = render_error(request, exc)

            duration_ms = context.elapsed_ms
            response.headers[CORRELATION_HEADER] = context.correlation_id
            context.logger.info(
                "%s %s -> %s in %.1fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
            if duration_ms > SLOW_REQUEST_MS:
                context.logger.warning(
                    "Slow request: %s %s took %.1fms",
                    request.method,
                    request.url.path,
                    duration_ms,
                )
            metrics = getattr(request.app.state, "metrics", None)
            if metrics is not None:
                metrics.record(duration_ms, response.status_code)
            return response
        finally:
            reset_context(token)
