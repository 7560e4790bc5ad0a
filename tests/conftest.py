"""
Shared fixtures.

Every test gets its own SQLite file, a fake mail relay, a fixed clock and
a fresh rate limiter window.
"""

import sys
import threading
from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.domain.portfolio.entities import (
    ContactSubmission,
    Experience,
    Proficiency,
    Profile,
    Skill,
)
from app.domain.portfolio.ports import Clock, EmailSender
from app.infrastructure.portfolio.profile_repository import ProfileRepositoryAdapter
from app.interfaces.portfolio.dependencies import get_clock, get_email_sender
from app.main import create_app
from app.shared.security.rate_limiting import limiter

FRIDAY = datetime(2024, 6, 21, 12, 0, tzinfo=timezone.utc)
MONDAY = datetime(2024, 6, 17, 12, 0, tzinfo=timezone.utc)


class FakeEmailSender(EmailSender):
    """Records sends; raises ``fail_with`` from the selected methods."""

    def __init__(
        self,
        fail_with: Optional[BaseException] = None,
        fail_notification: bool = True,
        fail_confirmation: bool = True,
    ) -> None:
        self.fail_with = fail_with
        self.fail_notification = fail_notification
        self.fail_confirmation = fail_confirmation
        self.notifications: list[tuple[ContactSubmission, str]] = []
        self.confirmations: list[tuple[ContactSubmission, str]] = []

    async def send_contact_notification(self, submission: ContactSubmission, subject: str) -> None:
        if self.fail_with is not None and self.fail_notification:
            raise self.fail_with
        self.notifications.append((submission, subject))

    async def send_confirmation(self, submission: ContactSubmission, subject: str) -> None:
        if self.fail_with is not None and self.fail_confirmation:
            raise self.fail_with
        self.confirmations.append((submission, subject))


class FixedClock(Clock):
    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def make_settings(tmp_path, **overrides) -> Settings:
    """Settings for an isolated test app; ``overrides`` win."""
    values = {
        "environment": "test",
        "database_url": f"sqlite:///{tmp_path / 'test.db'}",
        "cors_origins": "https://portfolio.example",
        "rate_limit_enabled": True,
        "log_level": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def sample_profile() -> Profile:
    return Profile(
        name="Jane Doe",
        title="Software Engineer",
        email="jane@example.com",
        bio="Builds dependable services.",
        location="Portland, OR",
        experience=(
            Experience(
                company="Acme Corp",
                position="Engineer",
                duration="2021 - Present",
                description="APIs",
                achievements=("Shipped v2",),
            ),
        ),
        github="https://github.com/janedoe",
    )


def sample_skills() -> list[Skill]:
    return [
        Skill(category="languages", name="Kotlin", proficiency=Proficiency.ADVANCED,
              years_of_experience=5, display_order=2),
        Skill(category="languages", name="Python", proficiency=Proficiency.EXPERT,
              years_of_experience=8, display_order=1),
        Skill(category="tools", name="Git", proficiency=Proficiency.EXPERT,
              years_of_experience=10, display_order=1),
        Skill(category="languages", name="Go", proficiency=Proficiency.BEGINNER,
              years_of_experience=1, display_order=3, is_active=False),
    ]


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(autouse=True)
def restore_process_hooks():
    """The lifespan installs process-wide hooks; put the originals back."""
    saved = (sys.excepthook, threading.excepthook)
    yield
    sys.excepthook, threading.excepthook = saved


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(MONDAY)


@pytest.fixture
def app(settings, email_sender, clock):
    application = create_app(settings)
    application.dependency_overrides[get_email_sender] = lambda: email_sender
    application.dependency_overrides[get_clock] = lambda: clock
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_profile(app, client) -> ProfileRepositoryAdapter:
    """Store the sample profile and skills. Depends on ``client`` so the schema exists."""
    repository = ProfileRepositoryAdapter(engine=app.state.engine)
    repository.replace_all(sample_profile(), sample_skills())
    return repository


def valid_contact(**overrides) -> dict:
    body = {
        "name": "Al",
        "email": "a@b.co",
        "subject": "Hello There",
        "message": "This is a sufficiently long test message.",
    }
    body.update(overrides)
    return body
