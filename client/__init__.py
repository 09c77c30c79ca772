"""Async client for the usage API: quota and subscription state for the UI."""

from client.functions import FunctionResponse, FunctionsClient
from client.query_gate import QueryGate, QuotaExceededError
from client.session import SessionProvider, StaticSession
from client.subscription_tracker import (
    SubscriptionActionError,
    SubscriptionState,
    SubscriptionTracker,
)
from client.usage_tracker import UsageState, UsageTracker, apply_optimistic_increment

__all__ = [
    "FunctionResponse",
    "FunctionsClient",
    "QueryGate",
    "QuotaExceededError",
    "SessionProvider",
    "StaticSession",
    "SubscriptionActionError",
    "SubscriptionState",
    "SubscriptionTracker",
    "UsageState",
    "UsageTracker",
    "apply_optimistic_increment",
]
