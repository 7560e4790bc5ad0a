"""
FastAPI router for the portfolio bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error rendering is handled by the centralized error handlers; routes only
raise.

Every rate-limited route takes the raw ``request`` so slowapi can key the
limit on the client address.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.application.portfolio.check_day import CheckDayUseCase
from app.application.portfolio.dtos import ListContactsQuery, SubmitContactCommand
from app.application.portfolio.read_contacts import GetContactUseCase, ListContactsUseCase
from app.application.portfolio.read_profile import (
    GetAboutUseCase,
    GetSkillCategoryUseCase,
    GetSkillsUseCase,
)
from app.application.portfolio.submit_contact import SubmitContactUseCase
from app.domain.portfolio.entities import ContactStatus, ContactSubmission, Skill
from app.interfaces.portfolio.dependencies import (
    get_about_use_case,
    get_check_day_use_case,
    get_contact_use_case,
    get_list_contacts_use_case,
    get_skill_category_use_case,
    get_skills_use_case,
    get_submit_contact_use_case,
)
from app.interfaces.portfolio.schemas import (
    AboutResponse,
    ContactCreatedResponse,
    ContactDetailResponse,
    ContactListResponse,
    ContactRecord,
    ContactRequest,
    DayCheckDetails,
    DayCheckResponse,
    ExperienceItem,
    Pagination,
    ProfileData,
    SkillCategoryResponse,
    SkillItem,
    SkillsResponse,
)
from app.shared.context import get_request_context
from app.shared.errors.schemas import ErrorResponse
from app.shared.security.rate_limiting import (
    limit_contact,
    limit_general,
    limit_read_only,
    limit_strict,
)

router = APIRouter(tags=["portfolio"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
}


def _skill_item(skill: Skill) -> SkillItem:
    return SkillItem(
        name=skill.name,
        proficiency=skill.proficiency.value,
        years_of_experience=skill.years_of_experience,
        description=skill.description,
    )


def _grouped_items(grouped: dict[str, list[Skill]]) -> dict[str, list[SkillItem]]:
    return {category: [_skill_item(s) for s in skills] for category, skills in grouped.items()}


def _contact_record(submission: ContactSubmission) -> ContactRecord:
    return ContactRecord(
        id=submission.id,
        name=submission.name,
        email=submission.email,
        message=submission.message,
        status=submission.status.value,
        submitted_at=submission.submitted_at,
    )


# --- About & skills ---------------------------------------------------------


@router.get(
    "/about",
    response_model=AboutResponse,
    responses=ERROR_RESPONSES,
    summary="Profile",
    description="Returns the active profile with its skills grouped by category.",
)
@limit_read_only
def get_about(
    request: Request,
    use_case: GetAboutUseCase = Depends(get_about_use_case),
) -> AboutResponse:
    """Return the active profile."""
    result = use_case.execute()
    profile = result.profile
    return AboutResponse(
        data=ProfileData(
            name=profile.name,
            title=profile.title,
            email=profile.email,
            phone=profile.phone,
            location=profile.location,
            bio=profile.bio,
            experience=[
                ExperienceItem(
                    company=e.company,
                    position=e.position,
                    duration=e.duration,
                    description=e.description,
                    achievements=list(e.achievements),
                )
                for e in profile.experience
            ],
            website=profile.website,
            github=profile.github,
            linkedin=profile.linkedin,
            resume=profile.resume,
            profile_image=profile.profile_image,
            skills=_grouped_items(result.skills),
        ),
        last_updated=profile.updated_at or datetime.now(timezone.utc),
        message="About information retrieved successfully",
    )


@router.get(
    "/skills",
    response_model=SkillsResponse,
    responses=ERROR_RESPONSES,
    summary="Skills catalog",
    description="Returns every active skill grouped by category, with counts.",
)
@limit_read_only
def get_skills(
    request: Request,
    use_case: GetSkillsUseCase = Depends(get_skills_use_case),
) -> SkillsResponse:
    """Return all skills grouped by category."""
    grouped = use_case.execute()
    counts = {category: len(skills) for category, skills in grouped.items()}
    return SkillsResponse(
        data=_grouped_items(grouped),
        counts=counts,
        total=sum(counts.values()),
        last_updated=datetime.now(timezone.utc),
        message="Skills information retrieved successfully",
    )


@router.get(
    "/skills/{category}",
    response_model=SkillCategoryResponse,
    responses=ERROR_RESPONSES,
    summary="Skills in one category",
    description="Returns the skills of one category, or 404 listing the valid ones.",
)
@limit_read_only
def get_skill_category(
    request: Request,
    category: str,
    use_case: GetSkillCategoryUseCase = Depends(get_skill_category_use_case),
) -> SkillCategoryResponse:
    """Return the skills for a single category."""
    result = use_case.execute(category)
    return SkillCategoryResponse(
        category=result.category,
        skills=[_skill_item(s) for s in result.skills],
        count=len(result.skills),
        last_updated=datetime.now(timezone.utc),
        message=f"Skills for category '{result.category}' retrieved successfully",
    )


# --- Contact ----------------------------------------------------------------


@router.post(
    "/contact",
    status_code=201,
    response_model=ContactCreatedResponse,
    responses=ERROR_RESPONSES,
    summary="Submit the contact form",
    description=(
        "Stores the submission, then notifies the site owner and confirms to "
        "the sender. Email failures do not fail the request."
    ),
)
@limit_contact
async def submit_contact(
    request: Request,
    payload: ContactRequest,
    use_case: SubmitContactUseCase = Depends(get_submit_contact_use_case),
) -> ContactCreatedResponse:
    """Accept a contact form submission."""
    context = get_request_context(request)
    command = SubmitContactCommand(
        name=payload.name,
        email=payload.email,
        subject=payload.subject,
        message=payload.message,
        ip_address=context.client_address,
        user_agent=context.user_agent,
    )
    receipt = await use_case.execute(command)
    return ContactCreatedResponse(
        message="Contact form submitted successfully",
        submission_id=receipt.submission_id,
        timestamp=receipt.submitted_at,
    )


@router.get(
    "/contact",
    response_model=ContactListResponse,
    responses=ERROR_RESPONSES,
    summary="List contact submissions",
    description="Paginated listing, newest first. Client metadata is withheld.",
)
@limit_strict
def list_contacts(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ContactStatus] = Query(None),
    use_case: ListContactsUseCase = Depends(get_list_contacts_use_case),
) -> ContactListResponse:
    """Return one page of contact submissions."""
    result = use_case.execute(ListContactsQuery(page=page, limit=limit, status=status))
    return ContactListResponse(
        data=[_contact_record(s) for s in result.items],
        pagination=Pagination(
            page=result.page, limit=result.limit, total=result.total, pages=result.pages
        ),
        message="Contact submissions retrieved successfully",
    )


@router.get(
    "/contact/{submission_id}",
    response_model=ContactDetailResponse,
    responses=ERROR_RESPONSES,
    summary="Get one contact submission",
)
@limit_strict
def get_contact(
    request: Request,
    submission_id: str,
    use_case: GetContactUseCase = Depends(get_contact_use_case),
) -> ContactDetailResponse:
    submission = use_case.execute(submission_id)
    return ContactDetailResponse(
        data=_contact_record(submission),
        message="Contact submission retrieved successfully",
    )


# --- Utility ----------------------------------------------------------------


@router.get(
    "/isitnotfriday",
    response_model=DayCheckResponse,
    responses={429: {"model": ErrorResponse}},
    summary="Is it not Friday?",
    description="Answers Yes on every day except Friday.",
)
@limit_general
def is_it_not_friday(
    request: Request,
    use_case: CheckDayUseCase = Depends(get_check_day_use_case),
) -> DayCheckResponse:
    """Tell whether today is not a Friday."""
    result = use_case.execute()
    message = (
        "It's Friday! Time to celebrate!"
        if result.is_friday
        else f"It's {result.current_day}. Still waiting for Friday!"
    )
    return DayCheckResponse(
        question="Is it not Friday?",
        answer=result.answer,
        details=DayCheckDetails(
            current_day=result.current_day,
            is_friday=result.is_friday,
            day_of_week=result.day_of_week,
            timestamp=result.timestamp,
            timezone=result.timezone,
        ),
        message=message,
    )
