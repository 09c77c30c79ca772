"""Response schemas for the usage and subscription endpoints."""

from typing import Optional

from pydantic import BaseModel


class UsageStatusResponse(BaseModel):
    """Response from the check-usage endpoint."""
    current_count: int
    daily_limit: int
    remaining: int
    can_query: bool


class IncrementUsageResponse(BaseModel):
    """Response from the increment-usage endpoint. The new count is not returned."""
    success: bool = True


class SubscriptionStatusResponse(BaseModel):
    """Response from the check-subscription endpoint."""
    subscribed: bool
    plan: str  # "free" | "weekly" | "monthly"
    status: Optional[str] = None
    subscription_end: Optional[str] = None
    current_period_start: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool = False


class ErrorResponse(BaseModel):
    """Body of every 500 response."""
    error: str
