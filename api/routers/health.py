"""
Health check router.

Liveness for the process and readiness for the usage_tracking table, probed
through the same cached Supabase client the usage endpoints use.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_settings, get_supabase_client
from application.exceptions import UsageServiceError
from backend.settings import Settings
from infrastructure.db.usage_repository import SupabaseUsageRepository

logger = logging.getLogger(__name__)

SERVICE_NAME = "usage-api"

router = APIRouter(
    tags=["Health"],
)


def _not_ready(checks: Dict[str, str]) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "service": SERVICE_NAME, "checks": checks},
    )


@router.get("/health")
def health():
    """Liveness: the process is up."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
def health_ready(settings: Settings = Depends(get_settings)):
    """
    Readiness: usage_tracking answers a one-row select.

    Unset credentials are not ready either; every usage endpoint would
    answer 500 "Database not available".
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Readiness check: Supabase credentials are not configured")
        return _not_ready({"supabase": "not_configured"})

    try:
        SupabaseUsageRepository(get_supabase_client(settings)).ping()
    except UsageServiceError as e:
        logger.warning("Readiness check failed for supabase: %s", e.message)
        return _not_ready({"supabase": "unavailable"})

    return {"status": "ready", "service": SERVICE_NAME, "checks": {"supabase": "ok"}}
