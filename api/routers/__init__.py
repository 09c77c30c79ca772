"""
Router package for the usage API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- usage: Daily query quota check and increment
- subscription: Subscription entitlement check
"""

from api.routers.health import router as health_router
from api.routers.subscription import router as subscription_router
from api.routers.usage import router as usage_router

__all__ = [
    "health_router",
    "subscription_router",
    "usage_router",
]
