"""
Use cases: Read stored contact submissions (admin views).

Input: ListContactsQuery, or a raw submission id
Output: ContactPage, or a single ContactSubmission
Side effects: None.
Failure cases: NotFoundError; MalformedIdentifierError from the repository.
"""

import logging

from app.application.portfolio.dtos import ContactPage, ListContactsQuery
from app.domain.portfolio.entities import ContactSubmission
from app.domain.portfolio.ports import ContactRepository
from app.shared.errors.taxonomy import NotFoundError

logger = logging.getLogger(__name__)


class ListContactsUseCase:
    """Returns one page of submissions, newest first."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repository = repository

    def execute(self, query: ListContactsQuery) -> ContactPage:
        offset = (query.page - 1) * query.limit
        items, total = self._repository.list_page(
            offset=offset, limit=query.limit, status=query.status
        )
        logger.debug(
            "Listed %d of %d contact submissions (page=%d)", len(items), total, query.page
        )
        return ContactPage(items=items, page=query.page, limit=query.limit, total=total)


class GetContactUseCase:
    """Looks up a single submission by id."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repository = repository

    def execute(self, submission_id: str) -> ContactSubmission:
        submission = self._repository.get_by_id(submission_id)
        if submission is None:
            raise NotFoundError("Contact submission not found")
        return submission
