"""
Dependency injection for the portfolio bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
The engine and settings are owned by the application and read from
``app.state``, so tests can build an app against their own database.
"""

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from app.application.portfolio.check_day import CheckDayUseCase
from app.application.portfolio.read_contacts import GetContactUseCase, ListContactsUseCase
from app.application.portfolio.read_profile import (
    GetAboutUseCase,
    GetSkillCategoryUseCase,
    GetSkillsUseCase,
)
from app.application.portfolio.submit_contact import SubmitContactUseCase
from app.core.config import Settings
from app.domain.portfolio.ports import (
    Clock,
    ContactRepository,
    EmailSender,
    ProfileRepository,
)
from app.infrastructure.portfolio.clock import SystemClock
from app.infrastructure.portfolio.contact_repository import ContactRepositoryAdapter
from app.infrastructure.portfolio.profile_repository import ProfileRepositoryAdapter
from app.infrastructure.portfolio.smtp_email_sender import SmtpEmailSender


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_contact_repository(engine: Engine = Depends(get_engine)) -> ContactRepository:
    return ContactRepositoryAdapter(engine=engine)


def get_profile_repository(engine: Engine = Depends(get_engine)) -> ProfileRepository:
    return ProfileRepositoryAdapter(engine=engine)


def get_email_sender(settings: Settings = Depends(get_settings)) -> EmailSender:
    return SmtpEmailSender(settings=settings)


def get_clock(settings: Settings = Depends(get_settings)) -> Clock:
    return SystemClock(timezone_name=settings.day_check_timezone)


def get_submit_contact_use_case(
    repository: ContactRepository = Depends(get_contact_repository),
    email_sender: EmailSender = Depends(get_email_sender),
) -> SubmitContactUseCase:
    """Build SubmitContactUseCase with its infrastructure dependencies."""
    return SubmitContactUseCase(repository=repository, email_sender=email_sender)


def get_list_contacts_use_case(
    repository: ContactRepository = Depends(get_contact_repository),
) -> ListContactsUseCase:
    return ListContactsUseCase(repository=repository)


def get_contact_use_case(
    repository: ContactRepository = Depends(get_contact_repository),
) -> GetContactUseCase:
    return GetContactUseCase(repository=repository)


def get_about_use_case(
    repository: ProfileRepository = Depends(get_profile_repository),
) -> GetAboutUseCase:
    """Build GetAboutUseCase with its infrastructure dependencies."""
    return GetAboutUseCase(repository=repository)


def get_skills_use_case(
    repository: ProfileRepository = Depends(get_profile_repository),
) -> GetSkillsUseCase:
    return GetSkillsUseCase(repository=repository)


def get_skill_category_use_case(
    repository: ProfileRepository = Depends(get_profile_repository),
) -> GetSkillCategoryUseCase:
    return GetSkillCategoryUseCase(repository=repository)


def get_check_day_use_case(clock: Clock = Depends(get_clock)) -> CheckDayUseCase:
    """Build CheckDayUseCase with the configured clock."""
    return CheckDayUseCase(clock=clock)
