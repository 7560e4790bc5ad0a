"""
Use cases: Read the public profile and skills catalog.

Input: nothing, or a skill category name
Output: AboutResult, grouped skills, or SkillCategoryResult
Side effects: None.
Failure cases: NotFoundError when no profile is active or a category is empty.
"""

import logging

from app.application.portfolio.dtos import AboutResult, SkillCategoryResult
from app.domain.portfolio.entities import Skill
from app.domain.portfolio.ports import ProfileRepository
from app.domain.portfolio.services import group_skills_by_category
from app.shared.errors.taxonomy import ErrorDetail, NotFoundError

logger = logging.getLogger(__name__)


class GetAboutUseCase:
    """Fetches the active profile together with its grouped skills."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    def execute(self) -> AboutResult:
        profile = self._repository.get_active_profile()
        if profile is None:
            raise NotFoundError("No active profile found")
        skills = group_skills_by_category(self._repository.list_active_skills())
        return AboutResult(profile=profile, skills=dict(skills))


class GetSkillsUseCase:
    """Fetches every active skill grouped by category."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    def execute(self) -> dict[str, list[Skill]]:
        return dict(group_skills_by_category(self._repository.list_active_skills()))


class GetSkillCategoryUseCase:
    """Fetches the skills of one category."""

    def __init__(self, repository: ProfileRepository) -> None:
        self._repository = repository

    def execute(self, category: str) -> SkillCategoryResult:
        """Return the skills for ``category``.

        Raises:
            NotFoundError: If the category holds no active skills. The error
                lists the categories that do.
        """
        skills = self._repository.list_active_skills(category=category)
        if not skills:
            available = list(group_skills_by_category(self._repository.list_active_skills()))
            logger.info("Unknown skills category requested: %s", category)
            raise NotFoundError(
                f"Skills category '{category}' not found",
                details=[
                    ErrorDetail(
                        field="category",
                        message="Available categories: " + ", ".join(available),
                        rejected_value=category,
                        location="params",
                    )
                ],
            )
        ordered = group_skills_by_category(skills)[category]
        return SkillCategoryResult(category=category, skills=ordered)
