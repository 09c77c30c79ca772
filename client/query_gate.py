"""Decides whether the user may send a chat query and charges the quota."""

import logging

from client.subscription_tracker import SubscriptionTracker
from client.usage_tracker import UsageTracker

logger = logging.getLogger(__name__)


class QuotaExceededError(Exception):
    """Free user has no queries left today."""

    def __init__(self, daily_limit: int):
        self.daily_limit = daily_limit
        super().__init__(f"Daily limit of {daily_limit} queries reached")


class QueryGate:
    """Subscribers are never charged; free users spend one query per send."""

    def __init__(self, usage: UsageTracker, subscription: SubscriptionTracker) -> None:
        self._usage = usage
        self._subscription = subscription

    def can_send(self) -> bool:
        return self._subscription.state.subscribed or self._usage.state.can_query

    async def consume(self) -> None:
        """
        Charge one query before it is sent.

        Raises:
            QuotaExceededError: free user with can_query=False
        """
        if self._subscription.state.subscribed:
            return
        if not self._usage.state.can_query:
            logger.info("Query blocked: daily limit reached")
            raise QuotaExceededError(self._usage.state.daily_limit)
        await self._usage.increment_usage()
