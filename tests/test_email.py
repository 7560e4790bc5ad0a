"""
Tests for the SMTP email adapter.
"""

import asyncio
import smtplib
from datetime import datetime, timezone

import pytest

from app.domain.portfolio.entities import ContactSubmission
from app.infrastructure.portfolio.smtp_email_sender import (
    SmtpEmailSender,
    build_confirmation,
    build_notification,
)
from app.shared.errors.taxonomy import ExternalServiceError
from tests.conftest import make_settings


def _submission(**overrides) -> ContactSubmission:
    values = {
        "name": "Al <b>",
        "email": "a@b.co",
        "message": "Subject: Hi\n\n<script>x</script> & more",
        "submitted_at": datetime(2024, 6, 17, 12, 0, tzinfo=timezone.utc),
        "ip_address": "10.0.0.1",
    }
    values.update(overrides)
    return ContactSubmission(**values)


def _html_part(message) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


class TestMessageBuilders:
    def test_notification_headers(self) -> None:
        message = build_notification(
            _submission(), "Hi", sender="site@example.com", recipient="me@example.com"
        )

        assert message["Subject"] == "New Contact Form Submission: Hi"
        assert message["Reply-To"] == "a@b.co"
        assert message["To"] == "me@example.com"

    def test_notification_html_is_escaped(self) -> None:
        body = _html_part(
            build_notification(_submission(), "Hi", sender="s@x.co", recipient="r@x.co")
        )

        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "Al &lt;b&gt;" in body
        assert "<br>" in body

    def test_confirmation(self) -> None:
        message = build_confirmation(
            _submission(), 'Say "hi"', sender="s@x.co", signature="Jane Doe"
        )

        assert message["To"] == "a@b.co"
        assert message["Subject"] == "Thank you for contacting Jane Doe"
        assert "&quot;hi&quot;" in _html_part(message)
        assert 'Say "hi"' in message.get_body(preferencelist=("plain",)).get_content()


class TestSmtpEmailSender:
    """Tests for delivery failures surfacing as ExternalServiceError."""

    def test_unconfigured_relay(self, tmp_path) -> None:
        sender = SmtpEmailSender(make_settings(tmp_path))

        with pytest.raises(ExternalServiceError, match="not configured"):
            asyncio.run(sender.send_confirmation(_submission(), "Hi"))

    def test_relay_failure_is_wrapped(self, tmp_path, monkeypatch) -> None:
        settings = make_settings(
            tmp_path, email_user="u@x.co", email_password="pw", email_to="me@x.co"
        )
        sender = SmtpEmailSender(settings)

        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, b"service not available")

        monkeypatch.setattr(smtplib, "SMTP", refuse)

        with pytest.raises(ExternalServiceError) as excinfo:
            asyncio.run(sender.send_contact_notification(_submission(), "Hi"))

        assert excinfo.value.service == "smtp"
        assert isinstance(excinfo.value.__cause__, smtplib.SMTPConnectError)

    def test_delivers_through_relay(self, tmp_path, monkeypatch) -> None:
        sent = []

        class FakeSMTP:
            def __init__(self, host, port, timeout) -> None:
                self.address = (host, port)

            def __enter__(self):
                return self

            def __exit__(self, *exc_info) -> None:
                return None

            def starttls(self) -> None:
                sent.append("starttls")

            def login(self, user, password) -> None:
                sent.append(("login", user))

            def send_message(self, message) -> None:
                sent.append(message["To"])

        monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
        settings = make_settings(
            tmp_path, email_user="u@x.co", email_password="pw", email_to="me@x.co"
        )

        asyncio.run(SmtpEmailSender(settings).send_contact_notification(_submission(), "Hi"))

        assert sent == ["starttls", ("login", "u@x.co"), "me@x.co"]
