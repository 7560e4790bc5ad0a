"""
Tests for the error taxonomy and the error normalizer.

Pure tests: no application, no database.
"""

import pytest
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException

from app.domain.portfolio.errors import (
    DuplicateKeyError,
    MalformedIdentifierError,
    RecordValidationError,
    StorageUnavailableError,
)
from app.shared.errors.normalizer import normalize_error, unique_violation_field
from app.shared.errors.taxonomy import (
    AppError,
    AuthenticationError,
    ErrorKind,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    code_for,
    status_for,
)


class _Form(BaseModel):
    age: int = Field(..., ge=0)


def _pydantic_error() -> PydanticValidationError:
    try:
        _Form(age=-1)
    except PydanticValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


class ExpiredSignatureError(Exception):
    """Stand-in carrying the class name JWT libraries use."""


def _raised_values() -> list[BaseException]:
    return [
        ValueError("boom"),
        KeyError("missing"),
        RuntimeError("CORS origin not allowed"),
        RecordValidationError([("email", "Please provide a valid email address", "x")]),
        DuplicateKeyError("email", "a@b.co"),
        MalformedIdentifierError("id", "not-a-uuid"),
        StorageUnavailableError("connection refused"),
        IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: skills.category, skills.name")),
        IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: contacts.name")),
        OperationalError("SELECT", {}, Exception("database is locked")),
        HTTPException(status_code=404),
        HTTPException(status_code=405),
        HTTPException(status_code=401),
        HTTPException(status_code=418),
        HTTPException(status_code=502),
        RequestValidationError([{"loc": ("body", "name"), "msg": "bad", "type": "value_error"}]),
        _pydantic_error(),
        ExpiredSignatureError("expired"),
        NotFoundError("gone"),
        ExternalServiceError("smtp down", service="smtp"),
        AppError(),
    ]


class TestErrorKinds:
    """Status and code are fixed per kind."""

    @pytest.mark.parametrize(
        ("kind", "status", "code"),
        [
            (ErrorKind.VALIDATION, 400, "VALIDATION_ERROR"),
            (ErrorKind.AUTHENTICATION, 401, "AUTHENTICATION_ERROR"),
            (ErrorKind.AUTHORIZATION, 403, "AUTHORIZATION_ERROR"),
            (ErrorKind.NOT_FOUND, 404, "NOT_FOUND_ERROR"),
            (ErrorKind.RATE_LIMIT, 429, "RATE_LIMIT_ERROR"),
            (ErrorKind.DATABASE, 500, "DATABASE_ERROR"),
            (ErrorKind.EXTERNAL_SERVICE, 503, "EXTERNAL_SERVICE_ERROR"),
            (ErrorKind.INTERNAL, 500, "INTERNAL_SERVER_ERROR"),
        ],
    )
    def test_status_and_code(self, kind, status, code) -> None:
        assert status_for(kind) == status
        assert code_for(kind) == code

    def test_only_internal_is_non_operational(self) -> None:
        non_operational = [kind for kind in ErrorKind if not kind.operational]
        assert non_operational == [ErrorKind.INTERNAL]

    def test_rate_limit_carries_retry_after(self) -> None:
        error = RateLimitError(retry_after=30)
        assert error.retry_after == 30
        assert error.status_code == 429
        assert error.message == "Rate limit exceeded"

    def test_timestamp_is_utc(self) -> None:
        assert ValidationError().timestamp.utcoffset().total_seconds() == 0


class TestNormalizer:
    """normalize_error is total and idempotent."""

    @pytest.mark.parametrize("raised", _raised_values(), ids=lambda e: type(e).__name__)
    def test_always_one_taxonomy_error(self, raised) -> None:
        normalized = normalize_error(raised)
        assert isinstance(normalized, AppError)
        assert normalized.status_code == status_for(normalized.kind)
        assert normalized.code == code_for(normalized.kind)

    @pytest.mark.parametrize("raised", _raised_values(), ids=lambda e: type(e).__name__)
    def test_idempotent(self, raised) -> None:
        once = normalize_error(raised)
        assert normalize_error(once) is once

    def test_app_error_passes_through(self) -> None:
        error = NotFoundError("gone")
        assert normalize_error(error) is error

    def test_unknown_error_is_generic_internal(self) -> None:
        normalized = normalize_error(ValueError("secret detail"))
        assert normalized.kind is ErrorKind.INTERNAL
        assert normalized.message == "Internal server error"
        assert isinstance(normalized.__cause__, ValueError)

    def test_unknown_error_message_exposed_on_request(self) -> None:
        normalized = normalize_error(ValueError("secret detail"), expose_internal_messages=True)
        assert normalized.message == "secret detail"

    def test_record_validation_keeps_every_field(self) -> None:
        normalized = normalize_error(
            RecordValidationError([("name", "Name is required", ""), ("email", "bad", "x")])
        )
        assert normalized.kind is ErrorKind.VALIDATION
        assert normalized.message == "Database validation failed"
        assert [d.field for d in normalized.details] == ["name", "email"]

    def test_duplicate_key(self) -> None:
        normalized = normalize_error(DuplicateKeyError("email", "a@b.co"))
        assert normalized.message == "Duplicate value error"
        assert normalized.details[0].message == "email already exists"

    def test_unique_integrity_error_becomes_duplicate(self) -> None:
        exc = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: skills.category, skills.name")
        )
        normalized = normalize_error(exc)
        assert normalized.kind is ErrorKind.VALIDATION
        assert normalized.details[0].field == "name"

    def test_other_integrity_error_is_database(self) -> None:
        exc = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: contacts.name"))
        assert normalize_error(exc).kind is ErrorKind.DATABASE

    def test_malformed_identifier(self) -> None:
        normalized = normalize_error(MalformedIdentifierError("id", "abc"))
        assert normalized.message == "Invalid ID format"
        assert normalized.details[0].location == "params"

    def test_expired_token(self) -> None:
        normalized = normalize_error(ExpiredSignatureError("jwt expired"))
        assert isinstance(normalized, AuthenticationError)
        assert normalized.message == "Token expired"

    def test_cors_message(self) -> None:
        normalized = normalize_error(RuntimeError("Not allowed by CORS"))
        assert normalized.kind is ErrorKind.AUTHORIZATION
        assert normalized.message == "CORS policy violation"

    def test_method_not_allowed_is_not_found(self) -> None:
        assert normalize_error(HTTPException(status_code=405)).kind is ErrorKind.NOT_FOUND

    def test_request_validation_details(self) -> None:
        exc = RequestValidationError(
            [
                {"loc": ("body", "name"), "msg": "Value error, bad", "type": "value_error",
                 "input": "A", "ctx": {"error": ValueError("Name must be between 2 and 50 characters")}},
                {"loc": ("query", "page"), "msg": "too small", "type": "greater_than_equal", "input": "0"},
                {"loc": ("body", "email"), "msg": "Field required", "type": "missing", "input": {}},
            ]
        )
        details = normalize_error(exc).details
        assert [(d.field, d.location) for d in details] == [
            ("name", "body"),
            ("page", "query"),
            ("email", "body"),
        ]
        assert details[0].message == "Name must be between 2 and 50 characters"
        assert details[0].rejected_value == "A"
        assert details[2].rejected_value is None


class TestUniqueViolationField:
    def test_sqlite(self) -> None:
        assert unique_violation_field("UNIQUE constraint failed: contacts.id") == "id"

    def test_postgres(self) -> None:
        message = 'duplicate key value violates unique constraint "x"\nDETAIL:  Key (category, name)=(a, b) already exists.'
        assert unique_violation_field(message) == "name"

    def test_not_unique(self) -> None:
        assert unique_violation_field("database is locked") is None
