"""Use case: report a user's subscription entitlement."""

import logging
from datetime import datetime, timezone
from typing import Callable

from application.models.subscription import SubscriptionStatus
from application.ports.subscription_repository import SubscriptionRepository
from backend.observability import traced

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckSubscriptionUseCase:
    """Maps the stored subscription row to the plan the user is entitled to."""

    def __init__(
        self,
        repository: SubscriptionRepository,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repo = repository
        self._now = now

    @traced(name="subscription.check")
    def execute(self, user_id: str) -> SubscriptionStatus:
        row = self._repo.get_for_user(user_id)
        if row is None:
            logger.info("[CHECK-SUBSCRIPTION] No subscription found for user: %s", user_id)
            return SubscriptionStatus()

        status = SubscriptionStatus.from_row(row, now=self._now())
        logger.info(
            "[CHECK-SUBSCRIPTION] User: %s plan=%s status=%s subscribed=%s",
            user_id,
            status.plan,
            status.status,
            status.subscribed,
        )
        return status
