"""
Storage-layer errors for the portfolio bounded context.

Repository adapters raise these instead of driver exceptions so the
error normalizer can map them onto the shared taxonomy without knowing
which database sits behind the port.
No framework imports allowed.
"""

from typing import Any


class StorageError(Exception):
    """Base error for all record store failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class RecordValidationError(StorageError):
    """Raised when a record violates the stored schema.

    Attributes:
        violations: One ``(field, message, value)`` triple per violated field.
    """

    def __init__(self, violations: list[tuple[str, str, Any]]) -> None:
        fields = ", ".join(v[0] for v in violations)
        super().__init__(f"Record failed schema validation: {fields}")
        self.violations = violations


class DuplicateKeyError(StorageError):
    """Raised when a write collides with a unique key."""

    def __init__(self, field: str, value: Any = None) -> None:
        super().__init__(f"Duplicate value for unique field: {field}")
        self.field = field
        self.value = value


class MalformedIdentifierError(StorageError):
    """Raised when a lookup is attempted with an ill-formed identifier."""

    def __init__(self, parameter: str, value: Any) -> None:
        super().__init__(f"Malformed identifier for {parameter}: {value!r}")
        self.parameter = parameter
        self.value = value


class StorageUnavailableError(StorageError):
    """Raised when the record store cannot be reached."""
