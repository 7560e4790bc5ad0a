"""
Maps any raised value onto the error taxonomy.

``normalize_error`` is total: whatever comes in, exactly one ``AppError``
comes out, and an ``AppError`` comes out unchanged.
"""

import re
from typing import Any, Iterable, Optional

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.portfolio.errors import (
    DuplicateKeyError,
    MalformedIdentifierError,
    RecordValidationError,
    StorageError,
)
from app.shared.errors.taxonomy import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    ErrorDetail,
    InternalError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

GENERIC_INTERNAL_MESSAGE = "Internal server error"

# Class names used by common JWT libraries.
_EXPIRED_TOKEN_ERRORS = {"ExpiredSignatureError", "TokenExpiredError"}
_INVALID_TOKEN_ERRORS = {"JsonWebTokenError", "InvalidTokenError", "DecodeError", "JWTError"}

_LOCATIONS = {"body": "body", "query": "query", "path": "params", "header": "header", "cookie": "cookie"}

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")
_POSTGRES_UNIQUE = re.compile(r"Key \((?P<columns>[^)]+)\)=")


def unique_violation_field(message: str) -> Optional[str]:
    """Extract the conflicting column from a driver's unique-violation message.

    For composite keys the last column is reported, since it is the one
    that distinguishes rows within the group.

    Returns:
        The column name, or None if the message is not a unique violation.
    """
    match = _SQLITE_UNIQUE.search(message) or _POSTGRES_UNIQUE.search(message)
    if match is None:
        return None
    last = match.group("columns").split(",")[-1].strip()
    return last.rsplit(".", 1)[-1]


def _validation_details(errors: Iterable[dict[str, Any]]) -> list[ErrorDetail]:
    details = []
    for err in errors:
        loc = tuple(err.get("loc", ()))
        location = _LOCATIONS.get(str(loc[0]), "body") if loc else "body"
        path = [str(part) for part in loc[1:]] if loc and loc[0] in _LOCATIONS else [str(p) for p in loc]
        message = err.get("msg", "Invalid value")
        if err.get("type") == "value_error" and err.get("ctx", {}).get("error") is not None:
            message = str(err["ctx"]["error"])
        details.append(
            ErrorDetail(
                field=".".join(path) or location,
                message=message,
                rejected_value=None if err.get("type") == "missing" else err.get("input"),
                location=location,
            )
        )
    return details


def _from_http_exception(exc: StarletteHTTPException) -> AppError:
    message = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code == 401:
        return AuthenticationError(message)
    if exc.status_code == 403:
        return AuthorizationError(message)
    if exc.status_code in (404, 405):
        return NotFoundError(message if exc.status_code == 404 else None)
    if exc.status_code == 429:
        return RateLimitError(message)
    if 400 <= exc.status_code < 500:
        return ValidationError(message)
    return InternalError(message)


def _is_token_error(exc: BaseException, names: set[str]) -> bool:
    return any(cls.__name__ in names for cls in type(exc).__mro__)


def normalize_error(exc: BaseException, *, expose_internal_messages: bool = False) -> AppError:
    """Return the taxonomy error for ``exc``.

    Args:
        exc: Anything raised during request handling.
        expose_internal_messages: Keep the original message of
            unanticipated errors instead of the generic phrase. Never set
            in production.

    Returns:
        ``exc`` itself if it already is an ``AppError``, otherwise a new
        one chained to ``exc``.
    """
    if isinstance(exc, AppError):
        return exc

    normalized = _map(exc, expose_internal_messages)
    normalized.__cause__ = exc
    return normalized


def _map(exc: BaseException, expose_internal_messages: bool) -> AppError:
    if isinstance(exc, (RequestValidationError, PydanticValidationError)):
        return ValidationError("Validation failed", details=_validation_details(exc.errors()))

    if isinstance(exc, RecordValidationError):
        return ValidationError(
            "Database validation failed",
            details=[ErrorDetail(field, message, value) for field, message, value in exc.violations],
        )

    if isinstance(exc, DuplicateKeyError):
        return _duplicate(exc.field, exc.value)

    if isinstance(exc, IntegrityError):
        field = unique_violation_field(str(exc.orig))
        if field is not None:
            return _duplicate(field, None)
        return DatabaseError()

    if isinstance(exc, MalformedIdentifierError):
        return ValidationError(
            "Invalid ID format",
            details=[ErrorDetail(exc.parameter, "Invalid ID format", exc.value, location="params")],
        )

    if isinstance(exc, (StorageError, SQLAlchemyError)):
        return DatabaseError()

    if _is_token_error(exc, _EXPIRED_TOKEN_ERRORS):
        return AuthenticationError("Token expired")
    if _is_token_error(exc, _INVALID_TOKEN_ERRORS):
        return AuthenticationError("Invalid token")

    if isinstance(exc, RateLimitExceeded):
        return RateLimitError(str(exc.detail) or None, retry_after=exc.limit.limit.get_expiry())

    if isinstance(exc, StarletteHTTPException):
        return _from_http_exception(exc)

    if "CORS" in str(exc):
        return AuthorizationError("CORS policy violation")

    return InternalError(str(exc) if expose_internal_messages and str(exc) else GENERIC_INTERNAL_MESSAGE)


def _duplicate(field: str, value: Any) -> ValidationError:
    return ValidationError(
        "Duplicate value error",
        details=[ErrorDetail(field, f"{field} already exists", value)],
    )
