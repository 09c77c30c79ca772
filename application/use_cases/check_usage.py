"""Use case: report today's free-query quota for a user."""

import logging
from datetime import date
from typing import Callable

from application.models.usage import UsageStatus, utc_today
from application.ports.usage_repository import UsageRepository
from backend.observability import UsageMetrics, add_span_attributes, traced

logger = logging.getLogger(__name__)


class CheckUsageUseCase:
    """Reads today's count and turns it into a quota decision. Never writes."""

    def __init__(
        self,
        repository: UsageRepository,
        daily_limit: int = 10,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._repo = repository
        self._daily_limit = daily_limit
        self._today = today

    @traced(name="usage.check")
    def execute(self, user_id: str) -> UsageStatus:
        day = self._today().isoformat()
        current_count = self._repo.get_count(user_id, day)
        status = UsageStatus.from_count(current_count, self._daily_limit)

        add_span_attributes({"user.id": user_id, "usage.count": current_count})
        UsageMetrics.usage_checks_total().add(1)
        if not status.can_query:
            UsageMetrics.quota_exhausted_total().add(1)

        logger.info(
            "[CHECK-USAGE] User: %s Count: %d Remaining: %d",
            user_id,
            status.current_count,
            status.remaining,
        )
        return status
