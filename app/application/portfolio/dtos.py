"""
Data Transfer Objects for the portfolio application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.domain.portfolio.entities import ContactStatus, ContactSubmission, Profile, Skill


@dataclass(frozen=True)
class SubmitContactCommand:
    """Input DTO for a contact form submission.

    Attributes:
        name: Sender's name, already validated and trimmed.
        email: Sender's address, lower-cased.
        subject: Subject line (folded into the stored message).
        message: Message body.
        ip_address: Client address the request came from.
        user_agent: Client user agent string.
    """

    name: str
    email: str
    subject: str
    message: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class ContactReceipt:
    """Output DTO returned after a submission has been stored."""

    submission_id: UUID
    submitted_at: datetime


@dataclass(frozen=True)
class ListContactsQuery:
    """Input DTO for the paginated contact listing."""

    page: int = 1
    limit: int = 10
    status: Optional[ContactStatus] = None


@dataclass(frozen=True)
class ContactPage:
    """Output DTO for one page of contact submissions."""

    items: list[ContactSubmission]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.total else 0


@dataclass(frozen=True)
class AboutResult:
    """Profile plus its skills grouped by category."""

    profile: Profile
    skills: dict[str, list[Skill]]


@dataclass(frozen=True)
class SkillCategoryResult:
    """Skills for a single category."""

    category: str
    skills: list[Skill]
