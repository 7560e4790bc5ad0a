"""
Adapter: System clock.

Implements the Clock port using the host clock, optionally pinned to an
IANA time zone.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from app.domain.portfolio.ports import Clock


class SystemClock(Clock):
    """Reads the current time from the operating system."""

    def __init__(self, timezone_name: Optional[str] = None) -> None:
        self._zone = ZoneInfo(timezone_name) if timezone_name else None

    def now(self) -> datetime:
        if self._zone is not None:
            return datetime.now(self._zone)
        return datetime.now().astimezone()
