"""
Port interfaces (ABCs) for the portfolio bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.domain.portfolio.entities import (
    ContactStatus,
    ContactSubmission,
    Profile,
    Skill,
)


class ContactRepository(ABC):
    """Port for persisting and reading contact submissions."""

    @abstractmethod
    def add(self, submission: ContactSubmission) -> ContactSubmission:
        """Persist a new submission and return it as stored.

        Raises:
            RecordValidationError: If the record violates the stored schema.
        """
        raise NotImplementedError

    @abstractmethod
    def list_page(
        self, offset: int, limit: int, status: Optional[ContactStatus] = None
    ) -> tuple[list[ContactSubmission], int]:
        """Return one page of submissions, newest first, and the total count."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, submission_id: str) -> Optional[ContactSubmission]:
        """Return a submission by its ID, or None if not found.

        Raises:
            MalformedIdentifierError: If ``submission_id`` is not a valid ID.
        """
        raise NotImplementedError


class ProfileRepository(ABC):
    """Port for reading the site owner's profile and skills."""

    @abstractmethod
    def get_active_profile(self) -> Optional[Profile]:
        """Return the active profile, or None if none is active."""
        raise NotImplementedError

    @abstractmethod
    def list_active_skills(self, category: Optional[str] = None) -> list[Skill]:
        """Return active skills in storage order, optionally for one category."""
        raise NotImplementedError


class EmailSender(ABC):
    """Port for the outbound mail relay."""

    @abstractmethod
    async def send_contact_notification(
        self, submission: ContactSubmission, subject: str
    ) -> None:
        """Tell the site owner that a new submission arrived."""
        raise NotImplementedError

    @abstractmethod
    async def send_confirmation(
        self, submission: ContactSubmission, subject: str
    ) -> None:
        """Acknowledge receipt to the person who submitted the form."""
        raise NotImplementedError


class Clock(ABC):
    """Port for reading the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""
        raise NotImplementedError
