"""
Domain entities for the portfolio bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class ContactStatus(Enum):
    """Lifecycle of a contact submission in the operator's inbox."""

    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class Proficiency(Enum):
    """Self-assessed skill level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


SKILL_CATEGORIES = (
    "languages",
    "mobile",
    "backend",
    "tools",
    "methodologies",
    "frameworks",
    "platforms",
    "databases",
)


@dataclass(frozen=True)
class ContactSubmission:
    """A message left through the website's contact form.

    ``message`` is the composed text (subject line plus body) as stored;
    the subject is not kept separately.
    """

    name: str
    email: str
    message: str
    submitted_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    status: ContactStatus = ContactStatus.NEW
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class Experience:
    """One entry of the profile's work history."""

    company: str
    position: str
    duration: str
    description: str
    achievements: tuple[str, ...] = ()


@dataclass(frozen=True)
class Profile:
    """The site owner's public profile. At most one is active."""

    name: str
    title: str
    email: str
    bio: str
    phone: Optional[str] = None
    location: Optional[str] = None
    experience: tuple[Experience, ...] = ()
    website: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    resume: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool = True
    version: int = 1
    updated_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Skill:
    """A single technical skill within a category."""

    category: str
    name: str
    proficiency: Proficiency = Proficiency.INTERMEDIATE
    years_of_experience: int = 0
    description: Optional[str] = None
    is_active: bool = True
    display_order: int = 0
    id: Optional[int] = None


@dataclass(frozen=True)
class DayCheck:
    """Answer to "is it not Friday?" for one instant."""

    current_day: str
    is_friday: bool
    day_of_week: int
    timestamp: datetime
    timezone: str

    @property
    def answer(self) -> str:
        return "No" if self.is_friday else "Yes"
