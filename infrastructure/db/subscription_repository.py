"""Supabase implementation of SubscriptionRepository."""

from typing import Any, Dict, Optional

from supabase import Client

from infrastructure.db.errors import translate_store_errors


class SupabaseSubscriptionRepository:
    """Reads user_subscriptions rows (one per user, upserted on user_id)."""

    TABLE = "user_subscriptions"
    COLUMNS = (
        "user_id, plan, status, current_period_start, "
        "current_period_end, cancel_at_period_end"
    )

    def __init__(self, client: Client) -> None:
        self._client = client

    def get_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        with translate_store_errors():
            result = (
                self._client.table(self.TABLE)
                .select(self.COLUMNS)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        return result.data[0] if result.data else None
