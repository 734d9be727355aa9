"""
Billing Use Cases

Plans, subscriptions, checkout, portal, cancellation and provider webhooks.
"""

from .cancel_subscription_use_case import CancelSubscriptionUseCase
from .create_checkout_session_use_case import CreateCheckoutSessionUseCase
from .create_portal_session_use_case import CreatePortalSessionUseCase
from .dtos import (
    CancelSubscriptionCommand,
    CancelSubscriptionResponse,
    CheckoutResponse,
    CreateCheckoutCommand,
    PortalResponse,
    SubscriptionInfo,
    WebhookAck,
)
from .get_subscription_use_case import GetSubscriptionUseCase
from .list_plans_use_case import ListPlansUseCase
from .process_webhook_use_case import BillingEventRejected, ProcessBillingWebhookUseCase

__all__ = [
    "ListPlansUseCase",
    "GetSubscriptionUseCase",
    "CreateCheckoutSessionUseCase",
    "CreatePortalSessionUseCase",
    "CancelSubscriptionUseCase",
    "ProcessBillingWebhookUseCase",
    "BillingEventRejected",
    "CreateCheckoutCommand",
    "CheckoutResponse",
    "PortalResponse",
    "CancelSubscriptionCommand",
    "CancelSubscriptionResponse",
    "SubscriptionInfo",
    "WebhookAck",
]
