"""
Pydantic schemas for portfolio API request/response validation.

These schemas enforce input validation and define the API contract.
Responses are serialized with camelCase field names.
No business logic belongs here.
"""

import re
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field, field_validator
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from app.shared.errors.schemas import CamelModel

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-'.]+$")
NAME_MIN_LEN = 2
NAME_MAX_LEN = 50
EMAIL_MAX_LEN = 100
SUBJECT_MIN_LEN = 5
SUBJECT_MAX_LEN = 100
MESSAGE_MIN_LEN = 10
MESSAGE_MAX_LEN = 1000


def _required_text(value: Any, label: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{label} is required")
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    return value.strip()


def _check_length(value: str, label: str, low: int, high: int) -> str:
    if not low <= len(value) <= high:
        raise ValueError(f"{label} must be between {low} and {high} characters")
    return value


class ContactRequest(CamelModel):
    """Request schema for the contact form.

    Every field is trimmed before its rules are checked.

    Attributes:
        name: 2-50 letters, spaces, hyphens, apostrophes or periods.
        email: Valid address of at most 100 characters, lower-cased.
        subject: 5-100 characters.
        message: 10-1000 characters.
    """

    name: str = Field(default="", validate_default=True, examples=["John Doe"])
    email: str = Field(default="", validate_default=True, examples=["john@example.com"])
    subject: str = Field(default="", validate_default=True, examples=["Project inquiry"])
    message: str = Field(
        default="",
        validate_default=True,
        examples=["Hi, I'd like to talk about a project."],
    )

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        value = _check_length(_required_text(value, "Name"), "Name", NAME_MIN_LEN, NAME_MAX_LEN)
        if not NAME_PATTERN.match(value):
            raise ValueError(
                "Name can only contain letters, spaces, hyphens, apostrophes, and periods"
            )
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _validate_email(cls, value: Any) -> str:
        value = _required_text(value, "Email").lower()
        if len(value) > EMAIL_MAX_LEN:
            raise ValueError(f"Email must be less than {EMAIL_MAX_LEN} characters")
        try:
            _, address = validate_email(value)
        except PydanticCustomError:
            raise ValueError("Please provide a valid email address") from None
        return address.lower()

    @field_validator("subject", mode="before")
    @classmethod
    def _validate_subject(cls, value: Any) -> str:
        return _check_length(
            _required_text(value, "Subject"), "Subject", SUBJECT_MIN_LEN, SUBJECT_MAX_LEN
        )

    @field_validator("message", mode="before")
    @classmethod
    def _validate_message(cls, value: Any) -> str:
        return _check_length(
            _required_text(value, "Message"), "Message", MESSAGE_MIN_LEN, MESSAGE_MAX_LEN
        )


class ContactCreatedResponse(CamelModel):
    """Response schema for a stored contact submission."""

    success: bool = True
    message: str
    submission_id: UUID
    timestamp: datetime


class ContactRecord(CamelModel):
    """A stored submission as shown to the operator. Client metadata is withheld."""

    id: UUID
    name: str
    email: str
    message: str
    status: str
    submitted_at: datetime


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class ContactListResponse(CamelModel):
    """Response schema for the paginated submission listing."""

    success: bool = True
    data: list[ContactRecord]
    pagination: Pagination
    message: str


class ContactDetailResponse(CamelModel):
    success: bool = True
    data: ContactRecord
    message: str


class ExperienceItem(CamelModel):
    company: str
    position: str
    duration: str
    description: str
    achievements: list[str] = []


class SkillItem(CamelModel):
    """A skill as exposed publicly."""

    name: str
    proficiency: str
    years_of_experience: int
    description: Optional[str] = None


class ProfileData(CamelModel):
    """The active profile with its skills grouped by category."""

    name: str
    title: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    bio: str
    experience: list[ExperienceItem]
    website: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    resume: Optional[str] = None
    profile_image: Optional[str] = None
    skills: dict[str, list[SkillItem]]


class AboutResponse(CamelModel):
    success: bool = True
    data: ProfileData
    last_updated: datetime
    message: str


class SkillsResponse(CamelModel):
    """Response schema for the full skills catalog."""

    success: bool = True
    data: dict[str, list[SkillItem]]
    counts: dict[str, int]
    total: int
    last_updated: datetime
    message: str


class SkillCategoryResponse(CamelModel):
    success: bool = True
    category: str
    skills: list[SkillItem]
    count: int
    last_updated: datetime
    message: str


class DayCheckDetails(CamelModel):
    current_day: str
    is_friday: bool
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    timestamp: datetime
    timezone: str


class DayCheckResponse(CamelModel):
    """Response schema for the "is it not Friday?" utility."""

    success: bool = True
    question: str
    answer: str
    details: DayCheckDetails
    message: str
