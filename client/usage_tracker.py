"""
Client-side state for the daily free-query quota.

UsageTracker keeps the last known quota in memory for the UI:

    tracker = UsageTracker(functions, session)
    await tracker.initialize()        # one check-usage call
    if tracker.state.can_query:
        await tracker.increment_usage()

Increments are optimistic. The local state moves before the server answers
and is never rolled back, so it can drift from the stored count until the
next check_usage().
"""

import logging
from dataclasses import dataclass, replace

from client.functions import FunctionsClient
from client.session import SessionProvider

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 10

CHECK_USAGE_FUNCTION = "check-usage"
INCREMENT_USAGE_FUNCTION = "increment-usage"


@dataclass(frozen=True)
class UsageState:
    current_count: int = 0
    daily_limit: int = DEFAULT_DAILY_LIMIT
    remaining: int = DEFAULT_DAILY_LIMIT
    can_query: bool = True
    loading: bool = True


def apply_optimistic_increment(state: UsageState) -> UsageState:
    """Local state after one query, before the server confirms it.

    can_query is derived from the remaining count before the decrement.
    """
    return replace(
        state,
        current_count=state.current_count + 1,
        remaining=max(0, state.remaining - 1),
        can_query=state.remaining - 1 > 0,
    )


class UsageTracker:
    """Bridges check-usage/increment-usage into UI state."""

    def __init__(
        self,
        functions: FunctionsClient,
        session: SessionProvider,
        reconcile_after_increment: bool = False,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
    ) -> None:
        self._functions = functions
        self._session = session
        self._reconcile = reconcile_after_increment
        self._state = UsageState(daily_limit=daily_limit, remaining=daily_limit)

    @property
    def state(self) -> UsageState:
        return self._state

    async def initialize(self) -> None:
        await self.check_usage()

    async def check_usage(self) -> None:
        """Replace the state with the server's answer.

        Signed-out users and failed calls only clear the loading flag.
        """
        try:
            token = await self._session.get_access_token()
            if not token:
                self._state = replace(self._state, loading=False)
                return

            response = await self._functions.invoke(CHECK_USAGE_FUNCTION)
            if response.error:
                logger.error("Error checking usage: %s", response.error)
                self._state = replace(self._state, loading=False)
                return

            data = response.data
            self._state = UsageState(
                current_count=data["current_count"],
                daily_limit=data["daily_limit"],
                remaining=data["remaining"],
                can_query=data["can_query"],
                loading=False,
            )
        except Exception as e:
            logger.error("Error checking usage: %s", e)
            self._state = replace(self._state, loading=False)

    async def increment_usage(self) -> None:
        """Record a query: optimistic local update, then the server call."""
        self._state = apply_optimistic_increment(self._state)

        try:
            response = await self._functions.invoke(INCREMENT_USAGE_FUNCTION)
            if response.error:
                logger.error("Error incrementing usage: %s", response.error)
        except Exception as e:
            logger.error("Error incrementing usage: %s", e)

        if self._reconcile:
            await self.check_usage()
