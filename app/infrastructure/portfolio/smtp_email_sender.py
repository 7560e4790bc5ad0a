"""
Adapter: SMTP email sender.

Implements the EmailSender port with smtplib, run off the event loop.
Each message carries a plain-text body and an HTML alternative.
"""

import asyncio
import html
import logging
import smtplib
from email.message import EmailMessage

from app.core.config import Settings
from app.domain.portfolio.entities import ContactSubmission
from app.domain.portfolio.ports import EmailSender
from app.shared.errors.taxonomy import ExternalServiceError

logger = logging.getLogger(__name__)

SERVICE_NAME = "smtp"


def _html_paragraphs(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def build_notification(
    submission: ContactSubmission, subject: str, sender: str, recipient: str
) -> EmailMessage:
    """Compose the operator-facing notification for a new submission."""
    submitted = submission.submitted_at.isoformat()
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Reply-To"] = submission.email
    message["Subject"] = f"New Contact Form Submission: {subject}"
    message.set_content(
        "New Contact Form Submission\n\n"
        f"From: {submission.name}\n"
        f"Email: {submission.email}\n\n"
        f"{submission.message}\n\n"
        f"Submitted on: {submitted}\n"
        f"IP Address: {submission.ip_address or 'unknown'}\n"
    )
    message.add_alternative(
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>From:</strong> {html.escape(submission.name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(submission.email)}</p>"
        f"<p>{_html_paragraphs(submission.message)}</p>"
        "<hr>"
        f"<p><small>Submitted on: {submitted}</small></p>"
        f"<p><small>IP Address: {html.escape(submission.ip_address or 'unknown')}</small></p>",
        subtype="html",
    )
    return message


def build_confirmation(
    submission: ContactSubmission, subject: str, sender: str, signature: str
) -> EmailMessage:
    """Compose the acknowledgement sent back to the submitter."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = submission.email
    message["Subject"] = f"Thank you for contacting {signature}"
    message.set_content(
        f"Hi {submission.name},\n\n"
        "Thank you for reaching out through my website. I've received your "
        f'message about "{subject}" and will get back to you as soon as possible.\n\n'
        f"Your message:\n{submission.message}\n\n"
        f"Best regards,\n{signature}\n\n"
        "---\nThis is an automated confirmation email. Please don't reply to this email.\n"
    )
    message.add_alternative(
        "<h2>Thank you for your message!</h2>"
        f"<p>Hi {html.escape(submission.name)},</p>"
        "<p>Thank you for reaching out through my website. I've received your message "
        f'about "{html.escape(subject)}" and will get back to you as soon as possible.</p>'
        f"<h3>Your message:</h3><p>{_html_paragraphs(submission.message)}</p>"
        f"<p>Best regards,<br>{html.escape(signature)}</p>"
        "<hr><p><small>This is an automated confirmation email. "
        "Please don't reply to this email.</small></p>",
        subtype="html",
    )
    return message


class SmtpEmailSender(EmailSender):
    """Sends contact emails through the configured SMTP relay.

    Args:
        settings: Application settings holding the relay credentials.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def send_contact_notification(
        self, submission: ContactSubmission, subject: str
    ) -> None:
        self._ensure_configured()
        message = build_notification(
            submission,
            subject,
            sender=self._settings.email_user,
            recipient=self._settings.email_to,
        )
        await self._send(message)
        logger.info("Contact notification email sent for submission %s", submission.id)

    async def send_confirmation(self, submission: ContactSubmission, subject: str) -> None:
        self._ensure_configured()
        message = build_confirmation(
            submission,
            subject,
            sender=self._settings.email_user,
            signature=self._settings.author,
        )
        await self._send(message)
        logger.info("Confirmation email sent to %s", submission.email)

    def _ensure_configured(self) -> None:
        if not self._settings.email_configured:
            raise ExternalServiceError("Email service is not configured", service=SERVICE_NAME)

    async def _send(self, message: EmailMessage) -> None:
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            raise ExternalServiceError(
                f"Email delivery failed: {exc}", service=SERVICE_NAME
            ) from exc

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(
            self._settings.email_host,
            self._settings.email_port,
            timeout=self._settings.email_timeout_seconds,
        ) as smtp:
            if self._settings.email_use_tls:
                smtp.starttls()
            smtp.login(self._settings.email_user, self._settings.email_password)
            smtp.send_message(message)
