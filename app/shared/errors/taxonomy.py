"""
Error taxonomy shared by every layer.

Each failure kind fixes its HTTP status, machine code and whether it is
operational (an expected, handled condition). Status and code are never
set per instance, so every error of a given kind renders identically no
matter where it was raised.

No framework imports allowed.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional


class ErrorKind(Enum):
    """Closed set of failure kinds: (status, code, operational)."""

    VALIDATION = (400, "VALIDATION_ERROR", True)
    AUTHENTICATION = (401, "AUTHENTICATION_ERROR", True)
    AUTHORIZATION = (403, "AUTHORIZATION_ERROR", True)
    NOT_FOUND = (404, "NOT_FOUND_ERROR", True)
    RATE_LIMIT = (429, "RATE_LIMIT_ERROR", True)
    DATABASE = (500, "DATABASE_ERROR", True)
    EXTERNAL_SERVICE = (503, "EXTERNAL_SERVICE_ERROR", True)
    INTERNAL = (500, "INTERNAL_SERVER_ERROR", False)

    def __init__(self, status_code: int, code: str, operational: bool) -> None:
        self.status_code = status_code
        self.code = code
        self.operational = operational


def status_for(kind: ErrorKind) -> int:
    """Return the HTTP status bound to an error kind."""
    return kind.status_code


def code_for(kind: ErrorKind) -> str:
    """Return the machine-readable code bound to an error kind."""
    return kind.code


@dataclass(frozen=True)
class ErrorDetail:
    """A single field-level problem attached to an error.

    Attributes:
        field: Name of the offending field or parameter.
        message: Human readable explanation.
        rejected_value: The value that was refused, if known.
        location: Where the field came from (body, query, params, header).
    """

    field: str
    message: str
    rejected_value: Any = None
    location: str = "body"


class AppError(Exception):
    """Base error for every failure the API knows how to render.

    Subclasses pin ``kind`` and a default message. Instances are treated
    as immutable once raised.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Iterable[ErrorDetail] = (),
        retry_after: Optional[int] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details: tuple[ErrorDetail, ...] = tuple(details)
        self.retry_after = retry_after
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return status_for(self.kind)

    @property
    def code(self) -> str:
        return code_for(self.kind)

    @property
    def is_operational(self) -> bool:
        return self.kind.operational

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}, {self.message!r})"


class ValidationError(AppError):
    """Client-correctable input problem."""

    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"


class AuthenticationError(AppError):
    """Missing or invalid credential. Reserved: no endpoint authenticates yet."""

    kind = ErrorKind.AUTHENTICATION
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Caller is not permitted, including cross-origin rejections."""

    kind = ErrorKind.AUTHORIZATION
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    """Missing resource or route."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class RateLimitError(AppError):
    """Quota exceeded. ``retry_after`` is in seconds."""

    kind = ErrorKind.RATE_LIMIT
    default_message = "Rate limit exceeded"


class DatabaseError(AppError):
    """The storage collaborator failed."""

    kind = ErrorKind.DATABASE
    default_message = "Database operation failed"


class ExternalServiceError(AppError):
    """An outbound collaborator such as the SMTP relay failed."""

    kind = ErrorKind.EXTERNAL_SERVICE
    default_message = "External service unavailable"

    def __init__(self, message: Optional[str] = None, service: Optional[str] = None) -> None:
        super().__init__(message)
        self.service = service


class InternalError(AppError):
    """Anything unanticipated. The only non-operational kind."""

    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"
