"""
Stripe implementation of the billing gateway.

The Stripe SDK is synchronous; network calls run in a worker thread so
the event loop is not blocked.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import stripe

from src.app.services.billing_gateway import (
    BillingProviderError,
    CheckoutSessionInfo,
    IBillingGateway,
    PortalSessionInfo,
    SignatureVerificationFailed,
    SubscriptionSnapshot,
)
from src.domain.billing_events import ORGANIZATION_METADATA_KEY

logger = logging.getLogger(__name__)


class StripeBillingGateway(IBillingGateway):
    def __init__(self, secret_key: str, webhook_secret: str, tolerance: int = 300):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        try:
            stripe.WebhookSignature.verify_header(
                text, signature, self.webhook_secret, self.tolerance
            )
        except stripe.SignatureVerificationError as exc:
            raise SignatureVerificationFailed(str(exc)) from exc

        # json.JSONDecodeError is a ValueError
        event = json.loads(text)
        if not isinstance(event, dict):
            raise ValueError("Webhook payload is not a JSON object")
        return event

    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        try:
            subscription = await asyncio.to_thread(
                stripe.Subscription.retrieve, subscription_id, api_key=self.secret_key
            )
        except stripe.StripeError as exc:
            logger.error(f"Stripe subscription lookup failed for {subscription_id}: {exc}")
            raise BillingProviderError(str(exc)) from exc

        return _snapshot(subscription)

    async def create_checkout_session(
        self,
        organization_id: str,
        price_id: str,
        customer_id: Optional[str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSessionInfo:
        metadata = {ORGANIZATION_METADATA_KEY: organization_id}
        params: Dict[str, Any] = {
            "mode": "subscription",
            "line_items": [{"price": price_id, "quantity": 1}],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": organization_id,
            "metadata": metadata,
            "subscription_data": {"metadata": metadata},
        }
        if customer_id:
            params["customer"] = customer_id

        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create, api_key=self.secret_key, **params
            )
        except stripe.StripeError as exc:
            raise BillingProviderError(str(exc)) from exc

        return CheckoutSessionInfo(id=session["id"], url=session["url"])

    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSessionInfo:
        try:
            session = await asyncio.to_thread(
                stripe.billing_portal.Session.create,
                customer=customer_id,
                return_url=return_url,
                api_key=self.secret_key,
            )
        except stripe.StripeError as exc:
            raise BillingProviderError(str(exc)) from exc

        return PortalSessionInfo(url=session["url"])

    async def cancel_subscription(
        self, subscription_id: str, at_period_end: bool = True
    ) -> SubscriptionSnapshot:
        try:
            if at_period_end:
                subscription = await asyncio.to_thread(
                    stripe.Subscription.modify,
                    subscription_id,
                    cancel_at_period_end=True,
                    api_key=self.secret_key,
                )
            else:
                subscription = await asyncio.to_thread(
                    stripe.Subscription.cancel, subscription_id, api_key=self.secret_key
                )
        except stripe.StripeError as exc:
            logger.error(f"Stripe cancellation failed for {subscription_id}: {exc}")
            raise BillingProviderError(str(exc)) from exc

        return _snapshot(subscription)


def _snapshot(subscription: Any) -> SubscriptionSnapshot:
    return SubscriptionSnapshot(
        id=subscription["id"],
        status=subscription["status"],
        customer_id=_ref(subscription["customer"]),
        price_id=_first_price_id(subscription),
        cancel_at_period_end=bool(subscription["cancel_at_period_end"]),
    )


def _ref(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return value["id"]


def _first_price_id(subscription: Any) -> Optional[str]:
    items = subscription["items"]["data"]
    if not items:
        return None
    return _ref(items[0]["price"])
