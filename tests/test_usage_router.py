"""Integration tests for the usage router: quota responses, auth, CORS, errors."""

import pytest
from fastapi.testclient import TestClient

from application.exceptions import DataStoreError
from application.models.usage import utc_today
from backend.main import create_app
from backend.settings import Settings
from tests.fixtures.fakes import SECOND_TOKEN, SECOND_USER_ID, TEST_USER_ID


def _today() -> str:
    return utc_today().isoformat()


@pytest.mark.unit
class TestCheckUsage:
    def test_new_user_has_full_quota(self, api_client, auth_headers):
        response = api_client.post("/check-usage", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "current_count": 0,
            "daily_limit": 10,
            "remaining": 10,
            "can_query": True,
        }

    @pytest.mark.parametrize("count", [0, 1, 5, 9, 10])
    def test_remaining_tracks_count(self, api_client, auth_headers, usage_repo, count):
        usage_repo.set_count(TEST_USER_ID, _today(), count)

        data = api_client.post("/check-usage", headers=auth_headers).json()

        assert data["current_count"] == count
        assert data["remaining"] == max(0, 10 - count)
        assert data["can_query"] is (10 - count > 0)

    def test_check_is_read_only(self, api_client, auth_headers, usage_repo):
        api_client.post("/check-usage", headers=auth_headers)

        assert usage_repo.writes == []

    def test_users_are_isolated(self, api_client, usage_repo):
        usage_repo.set_count(TEST_USER_ID, _today(), 10)

        data = api_client.post(
            "/check-usage", headers={"Authorization": f"Bearer {SECOND_TOKEN}"}
        ).json()

        assert data["current_count"] == 0
        assert data["can_query"] is True


@pytest.mark.unit
class TestIncrementUsage:
    def test_returns_success(self, api_client, auth_headers):
        response = api_client.post("/increment-usage", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_creates_then_increments(self, api_client, auth_headers, usage_repo):
        api_client.post("/increment-usage", headers=auth_headers)
        assert usage_repo.rows[(TEST_USER_ID, _today())] == 1

        api_client.post("/increment-usage", headers=auth_headers)
        assert usage_repo.rows[(TEST_USER_ID, _today())] == 2

    def test_increment_reflected_in_check(self, api_client, auth_headers, usage_repo):
        usage_repo.set_count(TEST_USER_ID, _today(), 8)

        api_client.post("/increment-usage", headers=auth_headers)
        data = api_client.post("/check-usage", headers=auth_headers).json()

        assert data == {"current_count": 9, "daily_limit": 10, "remaining": 1, "can_query": True}

    def test_increment_only_touches_caller(self, api_client, usage_repo):
        api_client.post("/increment-usage", headers={"Authorization": f"Bearer {SECOND_TOKEN}"})

        assert (SECOND_USER_ID, _today()) in usage_repo.rows
        assert (TEST_USER_ID, _today()) not in usage_repo.rows


@pytest.mark.unit
class TestAuthFailures:
    @pytest.mark.parametrize("path", ["/check-usage", "/increment-usage"])
    def test_missing_header_returns_500(self, api_client, usage_repo, path):
        response = api_client.post(path)

        assert response.status_code == 500
        assert response.json() == {"error": "No authorization header"}
        assert usage_repo.writes == []

    @pytest.mark.parametrize("path", ["/check-usage", "/increment-usage"])
    def test_invalid_token_returns_500(self, api_client, usage_repo, path):
        response = api_client.post(path, headers={"Authorization": "Bearer forged"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Auth error")
        assert usage_repo.writes == []


@pytest.mark.unit
class TestStoreFailures:
    @pytest.mark.parametrize("path", ["/check-usage", "/increment-usage"])
    def test_store_error_returns_500(self, api_client, auth_headers, usage_repo, path):
        usage_repo.fail_with = DataStoreError("connection reset by peer")

        response = api_client.post(path, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "connection reset by peer"}

    def test_unexpected_error_returns_500(self, api_client, auth_headers, usage_repo):
        usage_repo.fail_with = KeyError("query_count")

        response = api_client.post("/increment-usage", headers=auth_headers)

        assert response.status_code == 500
        assert "query_count" in response.json()["error"]

    def test_unconfigured_database_returns_500(self, auth_headers):
        settings = Settings(
            environment="test",
            supabase_url="",
            supabase_service_role_key="",
            _env_file=None,
        )
        client = TestClient(create_app(settings=settings))

        response = client.post("/check-usage", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"].startswith("Database not available")
        assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.unit
class TestAtomicMode:
    def test_increment_uses_atomic_path(self, identity_provider, usage_repo, auth_headers):
        from api.deps import get_identity_provider, get_usage_repository

        settings = Settings(
            environment="test",
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="test-key",
            usage_atomic_increment=True,
            _env_file=None,
        )
        app = create_app(settings=settings)
        app.dependency_overrides[get_identity_provider] = lambda: identity_provider
        app.dependency_overrides[get_usage_repository] = lambda: usage_repo

        response = TestClient(app).post("/increment-usage", headers=auth_headers)

        assert response.status_code == 200
        assert usage_repo.rows[(TEST_USER_ID, _today())] == 1


@pytest.mark.unit
class TestCors:
    @pytest.mark.parametrize("path", ["/check-usage", "/increment-usage", "/check-subscription"])
    def test_options_is_empty_and_unauthenticated(self, api_client, identity_provider, path):
        response = api_client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]
        assert identity_provider.calls == []

    def test_preflight_with_browser_headers(self, api_client):
        response = api_client.options(
            "/check-usage",
            headers={
                "Origin": "https://chef.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )

        assert response.status_code == 200
        assert response.content == b""

    def test_responses_carry_cors_headers(self, api_client, auth_headers):
        ok = api_client.post("/check-usage", headers=auth_headers)
        failed = api_client.post("/check-usage")

        assert ok.headers["access-control-allow-origin"] == "*"
        assert failed.headers["access-control-allow-origin"] == "*"

    def test_restricted_origins_echo_allowed_origin(self, identity_provider, usage_repo):
        from api.deps import get_identity_provider, get_usage_repository

        settings = Settings(
            environment="test",
            allowed_origins="https://chef.example.com,https://staging.chef.example.com",
            _env_file=None,
        )
        app = create_app(settings=settings)
        app.dependency_overrides[get_identity_provider] = lambda: identity_provider
        app.dependency_overrides[get_usage_repository] = lambda: usage_repo
        client = TestClient(app)

        allowed = client.options("/check-usage", headers={"Origin": "https://chef.example.com"})
        other = client.options("/check-usage", headers={"Origin": "https://evil.example.com"})

        assert allowed.headers["access-control-allow-origin"] == "https://chef.example.com"
        assert "access-control-allow-origin" not in other.headers
