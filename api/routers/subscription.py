"""
Subscription router.

- POST /check-subscription: the caller's plan and billing period, read from
  user_subscriptions (kept current by the payment provider webhooks)
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Header

from api.deps import get_check_subscription_use_case, get_identity_provider
from api.errors import error_response
from api.schemas.usage import ErrorResponse, SubscriptionStatusResponse
from application.ports.identity_provider import IdentityProvider
from application.use_cases.check_subscription import CheckSubscriptionUseCase
from backend.auth import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Subscription"],
    responses={500: {"model": ErrorResponse}},
)


@router.post("/check-subscription", response_model=SubscriptionStatusResponse)
def check_subscription(
    authorization: Optional[str] = Header(None),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    use_case: CheckSubscriptionUseCase = Depends(get_check_subscription_use_case),
):
    """Return the caller's subscription status; free plan when none exists."""
    try:
        user = authenticate(authorization, identity_provider)
        status = use_case.execute(user.id)
    except Exception as e:
        return error_response("CHECK-SUBSCRIPTION", e)
    return SubscriptionStatusResponse(**asdict(status))
