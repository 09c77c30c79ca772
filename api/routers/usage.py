"""
Usage quota router.

Serves the two endpoints the web client calls around each chat query:
- POST /check-usage: today's quota decision for the caller (read-only)
- POST /increment-usage: record one consumed query for today

Both authenticate with the caller's Supabase access token and answer any
failure with 500 {"error": message}.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Header

from api.deps import (
    get_check_usage_use_case,
    get_identity_provider,
    get_increment_usage_use_case,
)
from api.errors import error_response
from api.schemas.usage import ErrorResponse, IncrementUsageResponse, UsageStatusResponse
from application.ports.identity_provider import IdentityProvider
from application.use_cases.check_usage import CheckUsageUseCase
from application.use_cases.increment_usage import IncrementUsageUseCase
from backend.auth import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Usage"],
    responses={500: {"model": ErrorResponse}},
)


@router.post("/check-usage", response_model=UsageStatusResponse)
def check_usage(
    authorization: Optional[str] = Header(None),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    use_case: CheckUsageUseCase = Depends(get_check_usage_use_case),
):
    """
    Return today's quota status for the authenticated caller.

    A user with no row today has a count of 0; no row is created.
    """
    try:
        user = authenticate(authorization, identity_provider)
        status = use_case.execute(user.id)
    except Exception as e:
        return error_response("CHECK-USAGE", e)
    return UsageStatusResponse(**asdict(status))


@router.post("/increment-usage", response_model=IncrementUsageResponse)
def increment_usage(
    authorization: Optional[str] = Header(None),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    use_case: IncrementUsageUseCase = Depends(get_increment_usage_use_case),
):
    """
    Record one consumed query for the authenticated caller.

    The caller gets no indication of whether a failed increment was applied.
    """
    try:
        user = authenticate(authorization, identity_provider)
        use_case.execute(user.id)
    except Exception as e:
        return error_response("INCREMENT-USAGE", e)
    return IncrementUsageResponse(success=True)
