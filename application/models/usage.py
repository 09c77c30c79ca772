"""Domain models for the daily free-query quota."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional


def utc_today() -> date:
    """Current calendar day in UTC (server wall clock, not the user's zone)."""
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class UsageRecord:
    """One usage_tracking row: queries consumed by a user on a day."""

    user_id: str
    date: str  # YYYY-MM-DD
    query_count: int = 0
    id: Optional[str] = None


@dataclass(frozen=True)
class UsageStatus:
    """Quota decision returned by the check endpoint."""

    current_count: int
    daily_limit: int
    remaining: int
    can_query: bool

    @classmethod
    def from_count(cls, current_count: int, daily_limit: int) -> "UsageStatus":
        remaining = max(0, daily_limit - current_count)
        return cls(
            current_count=current_count,
            daily_limit=daily_limit,
            remaining=remaining,
            can_query=remaining > 0,
        )
