"""Domain models for subscription entitlement."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .timestamps import parse_timestamp

FREE_PLAN = "free"
PAID_PLANS = ("weekly", "monthly")

# Statuses written by the payment webhooks that still grant access.
ENTITLED_STATUSES = frozenset({"active", "trialing"})


@dataclass(frozen=True)
class SubscriptionStatus:
    """Entitlement view of a user_subscriptions row."""

    subscribed: bool = False
    plan: str = FREE_PLAN
    status: Optional[str] = None
    subscription_end: Optional[str] = None
    current_period_start: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool = False

    @classmethod
    def from_row(
        cls,
        row: Optional[Dict[str, Any]],
        now: Optional[datetime] = None,
    ) -> "SubscriptionStatus":
        """Build the status from a stored row; no row means the free plan."""
        if not row:
            return cls()

        now = now or datetime.now(timezone.utc)
        status = row.get("status")
        period_end = row.get("current_period_end")
        end = parse_timestamp(period_end)

        subscribed = status in ENTITLED_STATUSES and (end is None or end > now)
        return cls(
            subscribed=subscribed,
            plan=(row.get("plan") or FREE_PLAN) if subscribed else FREE_PLAN,
            status=status,
            subscription_end=period_end if subscribed else None,
            current_period_start=row.get("current_period_start"),
            current_period_end=period_end,
            cancel_at_period_end=bool(row.get("cancel_at_period_end")),
        )
