"""Port interface for subscription lookups."""

from typing import Any, Dict, Optional, Protocol


class SubscriptionRepository(Protocol):
    """Read-only access to user_subscriptions (written by payment webhooks)."""

    def get_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the subscription row for a user, or None."""
        ...
