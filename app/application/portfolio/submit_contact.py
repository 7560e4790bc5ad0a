"""
Use case: Accept a contact form submission.

Input: SubmitContactCommand
Output: ContactReceipt
Side effects: Persists a ContactSubmission; sends two emails (best effort).
Failure cases: RecordValidationError or storage failures from the repository.
    Email failures never fail the use case once the record is stored.
"""

import asyncio
import logging
from datetime import datetime, timezone

from app.application.portfolio.dtos import ContactReceipt, SubmitContactCommand
from app.domain.portfolio.entities import ContactSubmission
from app.domain.portfolio.ports import ContactRepository, EmailSender
from app.domain.portfolio.services import compose_contact_message

logger = logging.getLogger(__name__)


class SubmitContactUseCase:
    """Stores a contact submission and notifies both parties."""

    def __init__(self, repository: ContactRepository, email_sender: EmailSender) -> None:
        self._repository = repository
        self._email_sender = email_sender

    async def execute(self, command: SubmitContactCommand) -> ContactReceipt:
        """Run the submission use case.

        The record is written first. Only after it is durably stored are the
        operator notification and the submitter confirmation attempted,
        concurrently; each failure is logged and swallowed.

        Args:
            command: Validated form fields plus client metadata.

        Returns:
            Identifier and timestamp of the stored submission.
        """
        submission = ContactSubmission(
            name=command.name,
            email=command.email,
            message=compose_contact_message(command.subject, command.message),
            submitted_at=datetime.now(timezone.utc),
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )
        stored = await asyncio.to_thread(self._repository.add, submission)
        logger.info("Stored contact submission %s from %s", stored.id, stored.email)

        outcomes = await asyncio.gather(
            self._email_sender.send_contact_notification(stored, command.subject),
            self._email_sender.send_confirmation(stored, command.subject),
            return_exceptions=True,
        )
        for label, outcome in zip(("notification", "confirmation"), outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Contact %s email failed for submission %s: %s",
                    label,
                    stored.id,
                    outcome,
                )

        return ContactReceipt(submission_id=stored.id, submitted_at=stored.submitted_at)
