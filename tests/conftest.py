"""
Shared fixtures for the usage API tests.

Routers run end-to-end through FastAPI with dependency-injected fakes for
Supabase (repositories and the identity provider). No network calls are made.
"""

import os
from typing import Dict

import pytest
from fastapi.testclient import TestClient

# Environment setup (must precede backend imports)
os.environ.setdefault("ENVIRONMENT", "test")

from api.deps import (
    get_identity_provider,
    get_subscription_repository,
    get_usage_repository,
)
from backend.main import create_app
from backend.settings import Settings
from tests.fixtures.fakes import (
    TEST_TOKEN,
    FakeIdentityProvider,
    FakeSubscriptionRepository,
    FakeUsageRepository,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-service-role-key",
        _env_file=None,
    )


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def usage_repo() -> FakeUsageRepository:
    return FakeUsageRepository()


@pytest.fixture
def subscription_repo() -> FakeSubscriptionRepository:
    return FakeSubscriptionRepository()


@pytest.fixture
def usage_app(test_settings, identity_provider, usage_repo, subscription_repo):
    app = create_app(settings=test_settings)
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_usage_repository] = lambda: usage_repo
    app.dependency_overrides[get_subscription_repository] = lambda: subscription_repo
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(usage_app) -> TestClient:
    return TestClient(usage_app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
