"""
Adapter: Contact submission repository.

Implements ContactRepository port.
Persists contact form submissions through SQLAlchemy Core.
"""

import logging
import re
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import IntegrityError

from app.domain.portfolio.entities import ContactStatus, ContactSubmission
from app.domain.portfolio.errors import (
    DuplicateKeyError,
    MalformedIdentifierError,
    RecordValidationError,
)
from app.domain.portfolio.ports import ContactRepository
from app.infrastructure.database import as_utc, contacts
from app.shared.errors.normalizer import unique_violation_field

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
MESSAGE_MAX_LENGTH = 1200
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


def _validate(submission: ContactSubmission) -> None:
    """Enforce the stored schema before writing."""
    violations: list[tuple[str, str, Any]] = []
    if not submission.name.strip():
        violations.append(("name", "Name is required", submission.name))
    elif len(submission.name) > NAME_MAX_LENGTH:
        violations.append(
            ("name", f"Name cannot exceed {NAME_MAX_LENGTH} characters", submission.name)
        )
    if len(submission.email) > EMAIL_MAX_LENGTH:
        violations.append(
            ("email", f"Email cannot exceed {EMAIL_MAX_LENGTH} characters", submission.email)
        )
    elif not EMAIL_PATTERN.match(submission.email):
        violations.append(("email", "Please provide a valid email address", submission.email))
    if not submission.message.strip():
        violations.append(("message", "Message is required", submission.message))
    elif len(submission.message) > MESSAGE_MAX_LENGTH:
        violations.append(
            (
                "message",
                f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters",
                submission.message,
            )
        )
    if violations:
        raise RecordValidationError(violations)


def _to_entity(row: RowMapping) -> ContactSubmission:
    return ContactSubmission(
        id=UUID(row["id"]),
        name=row["name"],
        email=row["email"],
        message=row["message"],
        submitted_at=as_utc(row["submitted_at"]),
        ip_address=row["ip_address"],
        user_agent=row["user_agent"],
        status=ContactStatus(row["status"]),
    )


class ContactRepositoryAdapter(ContactRepository):
    """Stores contact submissions in the relational record store.

    Implements the ContactRepository port defined in the domain layer.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, submission: ContactSubmission) -> ContactSubmission:
        """Persist a new submission.

        Args:
            submission: The submission to store.

        Returns:
            The submission as stored.

        Raises:
            RecordValidationError: If the submission violates the schema.
            DuplicateKeyError: If the id collides with an existing row.
        """
        _validate(submission)
        values = {
            "id": str(submission.id),
            "name": submission.name,
            "email": submission.email,
            "message": submission.message,
            "submitted_at": submission.submitted_at,
            "ip_address": submission.ip_address,
            "user_agent": submission.user_agent,
            "status": submission.status.value,
        }
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(contacts).values(**values))
        except IntegrityError as exc:
            field = unique_violation_field(str(exc.orig))
            if field is None:
                raise
            raise DuplicateKeyError(field, values.get(field)) from exc

        logger.debug("Saved contact submission id=%s.", submission.id)
        return submission

    def list_page(
        self, offset: int, limit: int, status: Optional[ContactStatus] = None
    ) -> tuple[list[ContactSubmission], int]:
        """Return one page of submissions ordered newest first.

        Args:
            offset: Number of rows to skip.
            limit: Maximum number of rows to return.
            status: Optional status filter.

        Returns:
            The page of submissions and the total number matching the filter.
        """
        query = select(contacts)
        count_query = select(func.count()).select_from(contacts)
        if status is not None:
            query = query.where(contacts.c.status == status.value)
            count_query = count_query.where(contacts.c.status == status.value)
        query = (
            query.order_by(contacts.c.submitted_at.desc(), contacts.c.id)
            .offset(offset)
            .limit(limit)
        )

        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
            total = conn.execute(count_query).scalar_one()

        return [_to_entity(row) for row in rows], total

    def get_by_id(self, submission_id: str) -> Optional[ContactSubmission]:
        """Return a submission by id, or None if absent.

        Raises:
            MalformedIdentifierError: If ``submission_id`` is not a UUID.
        """
        try:
            key = str(UUID(submission_id))
        except ValueError:
            raise MalformedIdentifierError("id", submission_id) from None

        with self._engine.connect() as conn:
            row = conn.execute(
                select(contacts).where(contacts.c.id == key)
            ).mappings().first()

        return _to_entity(row) if row is not None else None
