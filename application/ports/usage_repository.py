"""Port interface for daily usage tracking."""

from typing import Protocol


class UsageRepository(Protocol):
    """Repository protocol for the usage_tracking table."""

    def get_count(self, user_id: str, day: str) -> int:
        """Get the query count for a user on a day (YYYY-MM-DD).

        Returns:
            The stored query_count, or 0 when no row exists. Never creates a row.
        """
        ...

    def increment(self, user_id: str, day: str) -> None:
        """Record one query for the day.

        Uses select-then-write: updates the existing row by id or inserts a
        new row with query_count=1. Concurrent callers can lose updates.
        """
        ...

    def increment_atomic(self, user_id: str, day: str) -> int:
        """Insert-or-increment in a single database statement.

        Returns:
            The new query_count.
        """
        ...

    def ping(self) -> None:
        """Verify the table is reachable (readiness probe)."""
        ...
