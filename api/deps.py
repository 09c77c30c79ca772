"""
FastAPI Dependency Providers for the usage API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repositories and the identity provider are instantiated per-request
  with the shared Supabase client
- Use cases are wired through dependency chains
"""

import logging
from functools import lru_cache

from fastapi import Depends, Request
from supabase import Client, create_client

from application.exceptions import DataStoreError
from application.ports.identity_provider import IdentityProvider
from application.ports.subscription_repository import SubscriptionRepository
from application.ports.usage_repository import UsageRepository
from application.use_cases.check_subscription import CheckSubscriptionUseCase
from application.use_cases.check_usage import CheckUsageUseCase
from application.use_cases.increment_usage import IncrementUsageUseCase
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.auth.supabase_identity_provider import SupabaseIdentityProvider
from infrastructure.db.subscription_repository import SupabaseSubscriptionRepository
from infrastructure.db.usage_repository import SupabaseUsageRepository

logger = logging.getLogger(__name__)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings(request: Request) -> Settings:
    """
    Get application settings.

    Returns the Settings the app was created with, falling back to the
    cached instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def _create_supabase_client(url: str, key: str) -> Client:
    return create_client(url, key)


def get_supabase_client(settings: Settings = Depends(get_settings)) -> Client:
    """
    Get Supabase client instance (cached per url/key pair).

    Credentials are read when a request arrives. Missing or malformed
    credentials fail that request rather than application startup.

    Raises:
        DataStoreError: client could not be created from the configuration
    """
    try:
        return _create_supabase_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        raise DataStoreError(f"Database not available: {e}") from e


# =============================================================================
# Authentication Provider
# =============================================================================


def get_identity_provider(
    client: Client = Depends(get_supabase_client),
) -> IdentityProvider:
    """Get the Supabase Auth identity provider."""
    return SupabaseIdentityProvider(client)


# =============================================================================
# Repository Providers
# =============================================================================


def get_usage_repository(
    client: Client = Depends(get_supabase_client),
) -> UsageRepository:
    """Get usage repository instance."""
    return SupabaseUsageRepository(client)


def get_subscription_repository(
    client: Client = Depends(get_supabase_client),
) -> SubscriptionRepository:
    """Get subscription repository instance."""
    return SupabaseSubscriptionRepository(client)


# =============================================================================
# Use Case Providers
# =============================================================================


def get_check_usage_use_case(
    repository: UsageRepository = Depends(get_usage_repository),
    settings: Settings = Depends(get_settings),
) -> CheckUsageUseCase:
    """Get check-usage use case bound to the configured daily limit."""
    return CheckUsageUseCase(repository=repository, daily_limit=settings.daily_limit)


def get_increment_usage_use_case(
    repository: UsageRepository = Depends(get_usage_repository),
    settings: Settings = Depends(get_settings),
) -> IncrementUsageUseCase:
    """Get increment-usage use case in the configured increment mode."""
    return IncrementUsageUseCase(
        repository=repository,
        atomic=settings.usage_atomic_increment,
    )


def get_check_subscription_use_case(
    repository: SubscriptionRepository = Depends(get_subscription_repository),
) -> CheckSubscriptionUseCase:
    """Get check-subscription use case."""
    return CheckSubscriptionUseCase(repository=repository)
