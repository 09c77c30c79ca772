"""Unit tests for SupabaseUsageRepository."""

from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from application.exceptions import DataStoreError
from infrastructure.db.usage_repository import SupabaseUsageRepository

DAY = "2026-10-19"


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    return MagicMock()


@pytest.fixture
def repo(mock_supabase_client):
    """Create a SupabaseUsageRepository with mock client."""
    return SupabaseUsageRepository(mock_supabase_client)


def _select_chain(mock_client):
    """The query builder reached by select().eq().eq().limit()."""
    return (
        mock_client.table.return_value.select.return_value
        .eq.return_value.eq.return_value.limit.return_value
    )


def _api_error(message="relation does not exist"):
    return APIError({"message": message, "code": "42P01", "hint": None, "details": None})


class TestGetCount:
    """Tests for get_count."""

    def test_returns_stored_count(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = [{"query_count": 4}]

        assert repo.get_count("user-1", DAY) == 4

    def test_returns_zero_when_no_row(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []

        assert repo.get_count("user-new", DAY) == 0

    def test_returns_zero_for_none_data(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = None

        assert repo.get_count("user-none", DAY) == 0

    def test_filters_by_user_and_date(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []

        repo.get_count("specific-user", DAY)

        mock_supabase_client.table.assert_called_with("usage_tracking")
        select = mock_supabase_client.table.return_value.select
        select.assert_called_once_with("query_count")
        select.return_value.eq.assert_called_once_with("user_id", "specific-user")
        select.return_value.eq.return_value.eq.assert_called_once_with("date", DAY)

    def test_never_writes(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []

        repo.get_count("user-read", DAY)

        mock_supabase_client.table.return_value.insert.assert_not_called()
        mock_supabase_client.table.return_value.update.assert_not_called()

    def test_store_error_becomes_data_store_error(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.side_effect = _api_error("boom")

        with pytest.raises(DataStoreError) as exc_info:
            repo.get_count("user-error", DAY)

        assert exc_info.value.message == "boom"


class TestIncrement:
    """Tests for the select-then-write increment."""

    def test_updates_existing_row_by_id(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = [
            {"id": "row-1", "query_count": 4}
        ]

        repo.increment("user-1", DAY)

        update = mock_supabase_client.table.return_value.update
        payload = update.call_args[0][0]
        assert payload["query_count"] == 5
        update.return_value.eq.assert_called_once_with("id", "row-1")
        update.return_value.eq.return_value.execute.assert_called_once()
        mock_supabase_client.table.return_value.insert.assert_not_called()

    def test_inserts_first_row_of_the_day(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []

        repo.increment("user-2", DAY)

        insert = mock_supabase_client.table.return_value.insert
        insert.assert_called_once_with(
            {"user_id": "user-2", "date": DAY, "query_count": 1}
        )
        insert.return_value.execute.assert_called_once()
        mock_supabase_client.table.return_value.update.assert_not_called()

    def test_lookup_selects_id_and_count(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []

        repo.increment("user-3", DAY)

        mock_supabase_client.table.return_value.select.assert_called_once_with("id, query_count")

    def test_write_failure_becomes_data_store_error(self, repo, mock_supabase_client):
        _select_chain(mock_supabase_client).execute.return_value.data = []
        mock_supabase_client.table.return_value.insert.return_value.execute.side_effect = (
            _api_error("insert denied")
        )

        with pytest.raises(DataStoreError, match="insert denied"):
            repo.increment("user-4", DAY)


class TestIncrementAtomic:
    """Tests for the RPC-backed increment."""

    def test_calls_rpc_with_correct_params(self, repo, mock_supabase_client):
        mock_supabase_client.rpc.return_value.execute.return_value.data = [
            {"new_count": 5, "was_created": False}
        ]

        result = repo.increment_atomic("user-123", DAY)

        mock_supabase_client.rpc.assert_called_once_with(
            "increment_usage_tracking",
            {"p_user_id": "user-123", "p_date": DAY},
        )
        assert result == 5

    def test_first_request_returns_1(self, repo, mock_supabase_client):
        mock_supabase_client.rpc.return_value.execute.return_value.data = [
            {"new_count": 1, "was_created": True}
        ]

        assert repo.increment_atomic("user-456", DAY) == 1

    def test_returns_fallback_on_empty_response(self, repo, mock_supabase_client):
        mock_supabase_client.rpc.return_value.execute.return_value.data = []

        assert repo.increment_atomic("user-empty", DAY) == 1

    def test_rpc_error_becomes_data_store_error(self, repo, mock_supabase_client):
        mock_supabase_client.rpc.return_value.execute.side_effect = _api_error(
            "function increment_usage_tracking does not exist"
        )

        with pytest.raises(DataStoreError, match="does not exist"):
            repo.increment_atomic("user-error", DAY)


class TestPing:
    def test_selects_one_id(self, repo, mock_supabase_client):
        repo.ping()

        mock_supabase_client.table.assert_called_with("usage_tracking")
        mock_supabase_client.table.return_value.select.assert_called_with("id")
        mock_supabase_client.table.return_value.select.return_value.limit.assert_called_with(1)

    def test_unreachable_table_becomes_data_store_error(self, repo, mock_supabase_client):
        mock_supabase_client.table.return_value.select.return_value.limit.return_value.execute.side_effect = (
            _api_error()
        )

        with pytest.raises(DataStoreError, match="relation does not exist"):
            repo.ping()

class TestTableName:
    def test_uses_usage_tracking_table(self, repo):
        assert repo.TABLE == "usage_tracking"
