"""Supabase implementation of UsageRepository."""

import logging
from datetime import datetime, timezone

from supabase import Client

from infrastructure.db.errors import translate_store_errors

logger = logging.getLogger(__name__)


class SupabaseUsageRepository:
    """Supabase-backed usage repository.

    One row per (user_id, date) in usage_tracking. Uniqueness is only kept by
    looking up before writing; there is no constraint behind it.
    """

    TABLE = "usage_tracking"
    INCREMENT_FUNCTION = "increment_usage_tracking"

    def __init__(self, client: Client) -> None:
        self._client = client

    def get_count(self, user_id: str, day: str) -> int:
        with translate_store_errors():
            result = (
                self._client.table(self.TABLE)
                .select("query_count")
                .eq("user_id", user_id)
                .eq("date", day)
                .limit(1)
                .execute()
            )

        if not result.data:
            return 0
        return result.data[0].get("query_count") or 0

    def increment(self, user_id: str, day: str) -> None:
        with translate_store_errors():
            # Check for existing row
            existing = (
                self._client.table(self.TABLE)
                .select("id, query_count")
                .eq("user_id", user_id)
                .eq("date", day)
                .limit(1)
                .execute()
            )

            if existing.data:
                row = existing.data[0]
                self._client.table(self.TABLE).update(
                    {
                        "query_count": row["query_count"] + 1,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    }
                ).eq("id", row["id"]).execute()
            else:
                self._client.table(self.TABLE).insert(
                    {
                        "user_id": user_id,
                        "date": day,
                        "query_count": 1,
                    }
                ).execute()

    def increment_atomic(self, user_id: str, day: str) -> int:
        with translate_store_errors():
            result = self._client.rpc(
                self.INCREMENT_FUNCTION,
                {"p_user_id": user_id, "p_date": day},
            ).execute()

        data = result.data
        if isinstance(data, list):
            data = data[0] if data else None
        if isinstance(data, dict):
            return int(data.get("new_count", 1))
        if isinstance(data, int):
            return data
        logger.warning("%s returned no count for user %s", self.INCREMENT_FUNCTION, user_id)
        return 1

    def ping(self) -> None:
        """Cheapest round trip to the table; raises DataStoreError when unreachable."""
        with translate_store_errors():
            self._client.table(self.TABLE).select("id").limit(1).execute()
