"""
Centralized error handlers for FastAPI.

``render_error`` is the only code that writes an error-shaped body. The
exception handlers registered here and the middleware that short-circuit
a request all end up in it, so every error renders the same way:
normalized, logged at a severity derived from its status, optionally
forwarded to the error tracker, then serialized as an ErrorResponse.
"""

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings
from app.core.config import settings as default_settings
from app.domain.portfolio.errors import StorageError
from app.shared.context import get_request_context
from app.shared.errors.normalizer import normalize_error
from app.shared.errors.schemas import ErrorBody, ErrorDetailSchema, ErrorResponse
from app.shared.errors.taxonomy import AppError, NotFoundError, RateLimitError
from app.shared.logging import security_logger
from app.shared.security.rate_limiting import retry_after_seconds

logger = logging.getLogger(__name__)


def _settings_for(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def _json_safe(value: Any) -> Any:
    try:
        return jsonable_encoder(value)
    except (TypeError, ValueError):
        return str(value)


def _stack_lines(exc: BaseException) -> list[str]:
    origin = exc.__cause__ or exc
    text = "".join(traceback.format_exception(type(origin), origin, origin.__traceback__))
    return text.splitlines()


def _log(request: Request, error: AppError, production: bool) -> None:
    context = get_request_context(request)
    status = error.status_code
    if status >= 500:
        extra: dict[str, Any] = {}
        if not production:
            extra = {
                "body": getattr(request.state, "sanitized_body", None),
                "params": dict(request.path_params),
                "query": dict(request.query_params),
            }
        origin = error.__cause__ or error
        context.logger.error(
            "%s %s failed with %s %s: %s %s",
            request.method,
            request.url.path,
            status,
            error.code,
            error.message,
            extra,
            exc_info=None if production else (type(origin), origin, origin.__traceback__),
        )
    else:
        context.logger.warning(
            "%s %s rejected with %s %s: %s",
            request.method,
            request.url.path,
            status,
            error.code,
            error.message,
        )
    if status in (401, 403):
        security_logger().warning(
            "Security event %s on %s %s from %s [%s]",
            error.code,
            request.method,
            request.url.path,
            context.client_address,
            context.correlation_id,
        )


def _track(request: Request, error: AppError) -> None:
    tracker = getattr(request.app.state, "error_tracker", None)
    if error.is_operational or tracker is None or not tracker.enabled:
        return
    context = get_request_context(request)
    try:
        tracker.capture(
            error.__cause__ or error,
            {
                "correlation_id": context.correlation_id,
                "method": request.method,
                "url": str(request.url),
                "client_address": context.client_address,
                "user_agent": context.user_agent,
            },
        )
    except Exception:
        logger.exception("Error tracker failed to capture %s", error.code)


def render_error(request: Request, exc: BaseException) -> JSONResponse:
    """Render any raised value as the standard error envelope.

    Args:
        request: The request that failed.
        exc: Whatever was raised or passed on.

    Returns:
        A JSON response whose status is fixed by the error's kind.
    """
    config = _settings_for(request)
    production = config.is_production
    error = normalize_error(exc, expose_internal_messages=not production)

    _log(request, error, production)
    _track(request, error)

    body = ErrorBody(
        message=error.message,
        code=error.code,
        status_code=error.status_code,
        timestamp=error.timestamp,
        correlation_id=get_request_context(request).correlation_id,
        details=[
            ErrorDetailSchema(
                field=detail.field,
                message=detail.message,
                rejected_value=_json_safe(detail.rejected_value),
                location=detail.location,
            )
            for detail in error.details
        ]
        or None,
        retry_after=error.retry_after,
        stack=None if production else _stack_lines(error),
    )
    headers: Optional[dict[str, str]] = None
    if error.retry_after is not None:
        headers = {"Retry-After": str(error.retry_after)}
    return JSONResponse(
        status_code=error.status_code,
        content=ErrorResponse(error=body).model_dump(by_alias=True, exclude_none=True, mode="json"),
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return render_error(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request body, query and path validation failures."""
        return render_error(request, exc)

    @app.exception_handler(PydanticValidationError)
    async def handle_model_validation(
        request: Request, exc: PydanticValidationError
    ) -> JSONResponse:
        return render_error(request, exc)

    @app.exception_handler(RateLimitExceeded)
    async def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        """Handle an exceeded limit; retryAfter is the time left in the window."""
        retry_after = retry_after_seconds(request, exc)
        error = RateLimitError(str(exc.detail), retry_after=retry_after)
        error.__cause__ = exc
        return render_error(request, error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle unmatched routes and methods, and any other HTTP error."""
        if exc.status_code in (404, 405):
            error = NotFoundError(f"Route {request.method} {request.url.path} not found")
            error.__cause__ = exc
            return render_error(request, error)
        return render_error(request, exc)

    @app.exception_handler(StorageError)
    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: Exception) -> JSONResponse:
        return render_error(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals in production."""
        return render_error(request, exc)
