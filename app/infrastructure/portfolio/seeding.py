"""
Profile seeding.

Loads the profile and skills catalog from a JSON document into the record
store. Existing data is only replaced when asked to, optionally after
writing a JSON backup of it.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from app.domain.portfolio.entities import Experience, Proficiency, Profile, Skill
from app.domain.portfolio.errors import RecordValidationError
from app.infrastructure.portfolio.profile_repository import ProfileRepositoryAdapter

logger = logging.getLogger(__name__)


class SeedConflictError(Exception):
    """Raised when the store already holds data and replacing was not requested."""


@dataclass(frozen=True)
class SeedDocument:
    profile: Profile
    skills: list[Skill]


def parse_seed(document: dict[str, Any]) -> SeedDocument:
    """Build entities from a seed document.

    The document has a ``profile`` object and a ``skills`` object mapping
    each category to a list of skills. Display order follows list order.

    Raises:
        RecordValidationError: If a required key is missing or a
            proficiency is unknown.
    """
    try:
        raw_profile = document["profile"]
        profile = Profile(
            name=raw_profile["name"],
            title=raw_profile["title"],
            email=raw_profile["email"],
            bio=raw_profile["bio"],
            phone=raw_profile.get("phone"),
            location=raw_profile.get("location"),
            experience=tuple(
                Experience(
                    company=e["company"],
                    position=e["position"],
                    duration=e["duration"],
                    description=e["description"],
                    achievements=tuple(e.get("achievements", ())),
                )
                for e in raw_profile.get("experience", ())
            ),
            website=raw_profile.get("website"),
            github=raw_profile.get("github"),
            linkedin=raw_profile.get("linkedin"),
            resume=raw_profile.get("resume"),
            profile_image=raw_profile.get("profileImage"),
        )
        skills = [
            Skill(
                category=category,
                name=entry["name"],
                proficiency=Proficiency(entry.get("proficiency", "intermediate")),
                years_of_experience=entry.get("yearsOfExperience", 0),
                description=entry.get("description"),
                display_order=position,
            )
            for category, entries in document.get("skills", {}).items()
            for position, entry in enumerate(entries)
        ]
    except KeyError as exc:
        raise RecordValidationError([(str(exc.args[0]), "Field is required", None)]) from exc
    except ValueError as exc:
        raise RecordValidationError([("proficiency", str(exc), None)]) from exc
    return SeedDocument(profile=profile, skills=skills)


def load_seed_file(path: Path) -> SeedDocument:
    with path.open(encoding="utf-8") as handle:
        return parse_seed(json.load(handle))


def write_backup(repository: ProfileRepositoryAdapter, backup_dir: Path) -> Path:
    """Write the stored profile and skills to a timestamped JSON file."""
    backup_dir.mkdir(parents=True, exist_ok=True)
    now = datetime.now(timezone.utc)
    target = backup_dir / f"backup-{now.strftime('%Y%m%dT%H%M%S%fZ')}.json"
    payload = {"timestamp": now.isoformat(), **repository.export()}
    target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Backup written to %s", target)
    return target


def seed_profile(
    repository: ProfileRepositoryAdapter,
    seed: SeedDocument,
    replace: bool = False,
    backup_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Store ``seed`` as the active profile and skills catalog.

    Args:
        repository: Target store.
        seed: Parsed seed document.
        replace: Overwrite existing data.
        backup_dir: Back existing data up here first.

    Returns:
        Path of the backup file, if one was written.

    Raises:
        SeedConflictError: If data exists and ``replace`` is not set.
    """
    existing = repository.export()
    has_data = bool(existing["profiles"] or existing["skills"])
    if has_data and not replace:
        raise SeedConflictError(
            f"Store already holds {len(existing['profiles'])} profile(s) and "
            f"{len(existing['skills'])} skill(s); pass --replace to overwrite"
        )

    backup = None
    if has_data and backup_dir is not None:
        backup = write_backup(repository, backup_dir)

    repository.replace_all(seed.profile, seed.skills)
    logger.info("Seeded profile '%s' with %d skills", seed.profile.name, len(seed.skills))
    return backup
