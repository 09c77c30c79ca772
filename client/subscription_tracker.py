"""
Client-side subscription state with periodic refresh.

SubscriptionTracker polls check-subscription while started and hands checkout
and billing-portal links from the payment collaborators to the browser.
"""

import asyncio
import logging
import webbrowser
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from application.models.timestamps import parse_timestamp
from client.functions import FunctionsClient
from client.session import SessionProvider

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 60.0

CHECK_SUBSCRIPTION_FUNCTION = "check-subscription"
CREATE_CHECKOUT_FUNCTION = "create-checkout"
CUSTOMER_PORTAL_FUNCTION = "customer-portal"
CANCEL_SUBSCRIPTION_FUNCTION = "cancel-subscription"

# Gateway whose subscriptions are renewed from the pricing page, not a portal.
MERCADOPAGO_GATEWAY = "mercadopago"

CHECKOUT_PLANS = ("weekly", "monthly")


class SubscriptionActionError(Exception):
    """A billing action (checkout, portal, cancellation) failed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class MealPlanningRange:
    start: datetime
    end: datetime
    days_remaining: int


@dataclass(frozen=True)
class SubscriptionState:
    subscribed: bool = False
    plan: str = "free"
    status: Optional[str] = None
    subscription_end: Optional[str] = None
    current_period_start: Optional[str] = None
    current_period_end: Optional[str] = None
    cancel_at_period_end: bool = False
    trial_end: Optional[str] = None
    loading: bool = True
    payment_gateway: Optional[str] = None
    is_recurring: bool = True
    days_until_expiration: Optional[int] = None

    @property
    def is_past_due(self) -> bool:
        return self.status == "past_due"

    @property
    def is_canceling(self) -> bool:
        return self.cancel_at_period_end and self.status == "active"

    @property
    def can_use_premium_features(self) -> bool:
        return self.subscribed and not self.is_past_due and self.status != "unpaid"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubscriptionTracker:
    """Polls the subscription status and delegates billing actions."""

    def __init__(
        self,
        functions: FunctionsClient,
        session: SessionProvider,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        open_url: Callable[[str], object] = webbrowser.open_new_tab,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._functions = functions
        self._session = session
        self._poll_interval = poll_interval
        self._open_url = open_url
        self._now = now
        self._state = SubscriptionState()
        self._poll_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def check_subscription(self) -> None:
        try:
            token = await self._session.get_access_token()
            if not token:
                self._state = replace(self._state, loading=False)
                return

            response = await self._functions.invoke(CHECK_SUBSCRIPTION_FUNCTION)
            if response.error:
                logger.error("Error checking subscription: %s", response.error)
                self._state = replace(self._state, loading=False)
                return

            data = response.data
            self._state = SubscriptionState(
                subscribed=bool(data.get("subscribed")),
                plan=data.get("plan") or "free",
                status=data.get("status") or None,
                subscription_end=data.get("subscription_end"),
                current_period_start=data.get("current_period_start"),
                current_period_end=data.get("current_period_end"),
                cancel_at_period_end=bool(data.get("cancel_at_period_end")),
                trial_end=data.get("trial_end") or None,
                loading=False,
                payment_gateway=data.get("payment_gateway") or None,
                # Stripe responses omit the flag; only an explicit false is one-off.
                is_recurring=data.get("is_recurring") is not False,
                days_until_expiration=data.get("days_until_expiration") or None,
            )
        except Exception as e:
            logger.error("Error checking subscription: %s", e)
            self._state = replace(self._state, loading=False)

    async def start(self) -> None:
        """Check once, then keep polling until stop()."""
        if self.running:
            return
        await self.check_subscription()
        self._poll_task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        if self._poll_task is None:
            return
        self._poll_task.cancel()
        try:
            await self._poll_task
        except asyncio.CancelledError:
            pass
        self._poll_task = None

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            await self.check_subscription()

    async def create_checkout(self, plan: str) -> str:
        """Open the payment provider's checkout for a plan; returns the URL."""
        if plan not in CHECKOUT_PLANS:
            raise SubscriptionActionError(f"Unknown plan '{plan}'")
        return await self._open_link(CREATE_CHECKOUT_FUNCTION, {"plan": plan}, "creating checkout")

    async def open_customer_portal(self) -> str:
        """Open the billing portal; returns the URL.

        Mercado Pago subscriptions have no portal and are refused without a call.
        """
        if self._state.payment_gateway == MERCADOPAGO_GATEWAY:
            message = (
                "Customer portal is not available for Mercado Pago subscriptions. "
                "Renew from the pricing page."
            )
            logger.error("Error opening portal: %s", message)
            raise SubscriptionActionError(message)
        return await self._open_link(CUSTOMER_PORTAL_FUNCTION, None, "opening portal")

    async def cancel_subscription(self) -> Any:
        """Cancel the current subscription, refresh the state and return the response data."""
        response = await self._functions.invoke(CANCEL_SUBSCRIPTION_FUNCTION)
        if response.error:
            logger.error("Error canceling subscription: %s", response.error)
            raise SubscriptionActionError(response.error)

        await self.check_subscription()
        return response.data

    async def _open_link(self, function: str, body: Optional[dict], action: str) -> str:
        response = await self._functions.invoke(function, body)
        if response.error:
            logger.error("Error %s: %s", action, response.error)
            raise SubscriptionActionError(response.error)

        data = response.data if isinstance(response.data, dict) else {}
        url = data.get("url") or data.get("init_point")
        if not url:
            logger.error("Error %s: no URL returned by %s", action, function)
            raise SubscriptionActionError(f"{function} returned no URL")

        self._open_url(url)
        return url

    def meal_planning_range(self) -> Optional[MealPlanningRange]:
        """Billing period of an active subscription, or None."""
        state = self._state
        if not state.subscribed or not state.current_period_start or not state.current_period_end:
            return None

        start = parse_timestamp(state.current_period_start)
        end = parse_timestamp(state.current_period_end)
        seconds_left = (end - self._now()).total_seconds()
        days_remaining = int(-(-seconds_left // 86400))
        return MealPlanningRange(start=start, end=end, days_remaining=days_remaining)

    def can_plan_for(self, day: date) -> bool:
        """Whether a meal plan may be generated for a day of the billing period."""
        period = self.meal_planning_range()
        if period is None:
            return False
        return period.start.date() <= day <= period.end.date()

    def can_plan_week(self, week_start: date, week_end: date) -> bool:
        """Whether any day of the week overlaps the billing period."""
        period = self.meal_planning_range()
        if period is None:
            return False
        return week_start <= period.end.date() and week_end >= period.start.date()
