"""
Billing Use Case DTOs
"""

from typing import Optional

from pydantic import BaseModel

from src.domain.plans import Plan


class CreateCheckoutCommand(BaseModel):
    tier: str


class CheckoutResponse(BaseModel):
    session_id: str
    url: str


class SubscriptionInfo(BaseModel):
    """Billing state of an organization"""

    organization_id: str
    plan_tier: str
    subscription_status: str
    has_subscription: bool
    plan: Plan


class WebhookAck(BaseModel):
    """Acknowledgement returned to the billing provider"""

    received: bool = True
    duplicate: Optional[bool] = None


class PortalResponse(BaseModel):
    url: str


class CancelSubscriptionCommand(BaseModel):
    immediately: bool = False


class CancelSubscriptionResponse(BaseModel):
    subscription_id: str
    subscription_status: str
    cancel_at_period_end: bool
