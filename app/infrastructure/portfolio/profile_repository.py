"""
Adapter: Profile and skills repository.

Implements ProfileRepository port.
Reads the active profile and the skills catalog through SQLAlchemy Core,
and offers the bulk replace/export used by the seeding script.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Engine, RowMapping
from sqlalchemy.exc import IntegrityError

from app.domain.portfolio.entities import (
    SKILL_CATEGORIES,
    Experience,
    Proficiency,
    Profile,
    Skill,
)
from app.domain.portfolio.errors import DuplicateKeyError, RecordValidationError
from app.domain.portfolio.ports import ProfileRepository
from app.infrastructure.database import as_utc, profiles, skills
from app.shared.errors.normalizer import unique_violation_field

logger = logging.getLogger(__name__)

MAX_YEARS_OF_EXPERIENCE = 50


def _experience_to_json(entries: tuple[Experience, ...]) -> list[dict[str, Any]]:
    return [
        {
            "company": e.company,
            "position": e.position,
            "duration": e.duration,
            "description": e.description,
            "achievements": list(e.achievements),
        }
        for e in entries
    ]


def _profile_from_row(row: RowMapping) -> Profile:
    return Profile(
        id=row["id"],
        name=row["name"],
        title=row["title"],
        email=row["email"],
        bio=row["bio"],
        phone=row["phone"],
        location=row["location"],
        experience=tuple(
            Experience(
                company=e["company"],
                position=e["position"],
                duration=e["duration"],
                description=e["description"],
                achievements=tuple(e.get("achievements", ())),
            )
            for e in row["experience"] or ()
        ),
        website=row["website"],
        github=row["github"],
        linkedin=row["linkedin"],
        resume=row["resume"],
        profile_image=row["profile_image"],
        is_active=row["is_active"],
        version=row["version"],
        updated_at=as_utc(row["updated_at"]),
    )


def _skill_from_row(row: RowMapping) -> Skill:
    return Skill(
        id=row["id"],
        category=row["category"],
        name=row["name"],
        proficiency=Proficiency(row["proficiency"]),
        years_of_experience=row["years_of_experience"],
        description=row["description"],
        is_active=row["is_active"],
        display_order=row["display_order"],
    )


def _validate_skills(entries: list[Skill]) -> None:
    violations: list[tuple[str, str, Any]] = []
    for skill in entries:
        if skill.category not in SKILL_CATEGORIES:
            violations.append(
                (
                    "category",
                    "Category must be one of: " + ", ".join(SKILL_CATEGORIES),
                    skill.category,
                )
            )
        if not 0 <= skill.years_of_experience <= MAX_YEARS_OF_EXPERIENCE:
            violations.append(
                (
                    "yearsOfExperience",
                    f"Years of experience must be between 0 and {MAX_YEARS_OF_EXPERIENCE}",
                    skill.years_of_experience,
                )
            )
    if violations:
        raise RecordValidationError(violations)


class ProfileRepositoryAdapter(ProfileRepository):
    """Reads the public profile and skills from the relational record store.

    Implements the ProfileRepository port defined in the domain layer.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_active_profile(self) -> Optional[Profile]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(profiles).where(profiles.c.is_active.is_(True)).limit(1)
            ).mappings().first()
        return _profile_from_row(row) if row is not None else None

    def list_active_skills(self, category: Optional[str] = None) -> list[Skill]:
        query = select(skills).where(skills.c.is_active.is_(True))
        if category is not None:
            query = query.where(skills.c.category == category)
        query = query.order_by(skills.c.id)

        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [_skill_from_row(row) for row in rows]

    def replace_all(self, profile: Profile, entries: list[Skill]) -> None:
        """Replace the stored profile and skills catalog in one transaction.

        Args:
            profile: The profile to store as the single active one.
            entries: The full skills catalog, in display order.

        Raises:
            RecordValidationError: If a skill violates the stored schema.
            DuplicateKeyError: If two skills share a category and name.
        """
        _validate_skills(entries)
        profile_values = {
            "name": profile.name,
            "title": profile.title,
            "email": profile.email.lower(),
            "phone": profile.phone,
            "location": profile.location,
            "bio": profile.bio,
            "experience": _experience_to_json(profile.experience),
            "website": profile.website,
            "github": profile.github,
            "linkedin": profile.linkedin,
            "resume": profile.resume,
            "profile_image": profile.profile_image,
            "is_active": True,
            "version": profile.version,
            "updated_at": datetime.now(timezone.utc),
        }
        skill_values = [
            {
                "category": s.category,
                "name": s.name,
                "proficiency": s.proficiency.value,
                "years_of_experience": s.years_of_experience,
                "description": s.description,
                "is_active": s.is_active,
                "display_order": s.display_order,
            }
            for s in entries
        ]

        try:
            with self._engine.begin() as conn:
                conn.execute(delete(skills))
                conn.execute(delete(profiles))
                conn.execute(insert(profiles).values(**profile_values))
                if skill_values:
                    conn.execute(insert(skills), skill_values)
        except IntegrityError as exc:
            field = unique_violation_field(str(exc.orig))
            if field is None:
                raise
            raise DuplicateKeyError(field) from exc

        logger.info("Replaced profile and %d skills.", len(skill_values))

    def export(self) -> dict[str, list[dict[str, Any]]]:
        """Dump every stored profile and skill row as JSON-ready dicts."""
        with self._engine.connect() as conn:
            profile_rows = conn.execute(select(profiles)).mappings().all()
            skill_rows = conn.execute(select(skills).order_by(skills.c.id)).mappings().all()

        def _plain(row: RowMapping) -> dict[str, Any]:
            return {
                key: value.isoformat() if isinstance(value, datetime) else value
                for key, value in row.items()
            }

        return {
            "profiles": [_plain(r) for r in profile_rows],
            "skills": [_plain(r) for r in skill_rows],
        }
