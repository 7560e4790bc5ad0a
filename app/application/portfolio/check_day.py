"""
Use case: Answer "is it not Friday?".

Input: nothing (reads the injected Clock)
Output: DayCheck
Side effects: None.
"""

import logging

from app.domain.portfolio.entities import DayCheck
from app.domain.portfolio.ports import Clock
from app.domain.portfolio.services import check_day

logger = logging.getLogger(__name__)


class CheckDayUseCase:
    """Evaluates the current instant against Friday."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    def execute(self) -> DayCheck:
        result = check_day(self._clock.now())
        logger.debug(
            "Friday check: today is %s, is it not Friday? %s",
            result.current_day,
            result.answer,
        )
        return result
