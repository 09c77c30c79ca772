"""Application domain models for usage quota and subscriptions."""

from .subscription import FREE_PLAN, PAID_PLANS, SubscriptionStatus
from .timestamps import parse_timestamp
from .usage import UsageRecord, UsageStatus, utc_today

__all__ = [
    "FREE_PLAN",
    "PAID_PLANS",
    "SubscriptionStatus",
    "UsageRecord",
    "UsageStatus",
    "parse_timestamp",
    "utc_today",
]
