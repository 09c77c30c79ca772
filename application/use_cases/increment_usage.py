"""Use case: record one consumed query for today."""

import logging
from datetime import date
from typing import Callable

from application.models.usage import utc_today
from application.ports.usage_repository import UsageRepository
from backend.observability import UsageMetrics, traced

logger = logging.getLogger(__name__)


class IncrementUsageUseCase:
    """Adds one to today's usage row, creating it on the first query of the day.

    With atomic=False the repository reads then writes, so two concurrent
    calls for the same user and day can both store N + 1. With atomic=True
    the database function performs insert-or-increment in one statement.
    """

    def __init__(
        self,
        repository: UsageRepository,
        atomic: bool = False,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._repo = repository
        self._atomic = atomic
        self._today = today

    @traced(name="usage.increment")
    def execute(self, user_id: str) -> None:
        day = self._today().isoformat()
        if self._atomic:
            new_count = self._repo.increment_atomic(user_id, day)
            logger.info("[INCREMENT-USAGE] Incremented for user: %s (count=%d)", user_id, new_count)
        else:
            self._repo.increment(user_id, day)
            logger.info("[INCREMENT-USAGE] Incremented for user: %s", user_id)

        UsageMetrics.usage_increments_total().add(
            1, {"mode": "atomic" if self._atomic else "read_then_write"}
        )
