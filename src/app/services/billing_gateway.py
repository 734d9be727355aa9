"""
Billing Gateway

Application-side contract for the billing provider (Stripe). The processor
and use cases depend on this interface only; the Stripe SDK stays in the
adapter layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel

from src.domain.entities import SubscriptionStatus


class SignatureVerificationFailed(Exception):
    """Webhook signature missing, malformed or not matching the shared secret"""


class BillingProviderError(Exception):
    """The billing provider could not be reached or rejected the request"""


class SubscriptionSnapshot(BaseModel):
    """Subscription state as reported by the provider"""

    id: str
    status: SubscriptionStatus
    customer_id: Optional[str] = None
    price_id: Optional[str] = None
    cancel_at_period_end: bool = False


class CheckoutSessionInfo(BaseModel):
    id: str
    url: str


class PortalSessionInfo(BaseModel):
    url: str


class IBillingGateway(ABC):
    """Billing provider collaborator"""

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """
        Verify the webhook signature and parse the payload.

        Raises:
            SignatureVerificationFailed: signature does not verify
            ValueError: payload is not valid JSON
        """
        pass

    @abstractmethod
    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        """Fetch subscription and plan details"""
        pass

    @abstractmethod
    async def create_checkout_session(
        self,
        organization_id: str,
        price_id: str,
        customer_id: Optional[str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSessionInfo:
        """Start a subscription checkout correlated to an organization"""
        pass

    @abstractmethod
    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSessionInfo:
        """Open the provider-hosted billing portal for a customer"""
        pass

    @abstractmethod
    async def cancel_subscription(
        self, subscription_id: str, at_period_end: bool = True
    ) -> SubscriptionSnapshot:
        """
        Cancel a subscription, by default when the paid period ends.

        The resulting state reaches the organization through webhooks only.
        """
        pass
