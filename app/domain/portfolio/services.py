"""
Pure domain functions for the portfolio bounded context.

No IO. Everything here is a function of its arguments.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Iterable

from app.domain.portfolio.entities import DayCheck, Skill

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
FRIDAY = 5


def compose_contact_message(subject: str, message: str) -> str:
    """Fold the form's subject line into the stored message text."""
    return f"Subject: {subject}\n\n{message}"


def group_skills_by_category(skills: Iterable[Skill]) -> "OrderedDict[str, list[Skill]]":
    """Group skills by category.

    Categories appear in the order they are first seen. Within a category
    skills are ordered by ``display_order``; ties keep storage order since
    ``sorted`` is stable.

    Args:
        skills: Skills in storage order.

    Returns:
        Mapping of category to its ordered skills.
    """
    grouped: "OrderedDict[str, list[Skill]]" = OrderedDict()
    for skill in skills:
        grouped.setdefault(skill.category, []).append(skill)
    for category, members in grouped.items():
        grouped[category] = sorted(members, key=lambda s: s.display_order)
    return grouped


def check_day(now: datetime) -> DayCheck:
    """Work out whether ``now`` falls on a Friday.

    ``day_of_week`` counts from Sunday = 0, matching what browser clients
    get from ``Date.getDay()``.
    """
    day_of_week = now.isoweekday() % 7
    return DayCheck(
        current_day=DAY_NAMES[day_of_week],
        is_friday=day_of_week == FRIDAY,
        day_of_week=day_of_week,
        timestamp=now,
        timezone=getattr(now.tzinfo, "key", None) or now.tzname() or "UTC",
    )
