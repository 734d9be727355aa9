"""
Billing Events

Stripe webhook payloads decoded once, at the boundary, into explicit
variants. Each variant carries only the fields its event type guarantees.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from .entities.enums import SubscriptionStatus

CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"
INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
INVOICE_PAYMENT_FAILED = "invoice.payment_failed"

# Metadata key set on checkout sessions and subscriptions to correlate
# Stripe objects with an organization
ORGANIZATION_METADATA_KEY = "organization_id"


class InvalidBillingEvent(ValueError):
    """Raised when a verified payload does not have the expected shape"""


class BillingEvent(BaseModel):
    event_id: str
    event_type: str
    created: int  # provider-assigned epoch seconds


class CheckoutCompleted(BillingEvent):
    session_id: str
    organization_id: Optional[str] = None
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None


class SubscriptionUpdated(BillingEvent):
    subscription_id: str
    status: SubscriptionStatus
    organization_id: Optional[str] = None
    customer_id: Optional[str] = None
    price_id: Optional[str] = None


class SubscriptionDeleted(BillingEvent):
    subscription_id: str
    organization_id: Optional[str] = None
    customer_id: Optional[str] = None


class InvoicePayment(BillingEvent):
    invoice_id: str
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    amount_cents: int = 0


class InvoicePaymentSucceeded(InvoicePayment):
    pass


class InvoicePaymentFailed(InvoicePayment):
    pass


class UnhandledEvent(BillingEvent):
    pass


AnyBillingEvent = Union[
    CheckoutCompleted,
    SubscriptionUpdated,
    SubscriptionDeleted,
    InvoicePaymentSucceeded,
    InvoicePaymentFailed,
    UnhandledEvent,
]


def _ref(value: Any) -> Optional[str]:
    """Stripe references arrive either as an id string or an expanded object"""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("id")
    return None


def _first_price_id(subscription: Dict[str, Any]) -> Optional[str]:
    items = (subscription.get("items") or {}).get("data") or []
    if not items:
        return None
    return _ref(items[0].get("price"))


def _organization_id(obj: Dict[str, Any]) -> Optional[str]:
    metadata = obj.get("metadata") or {}
    return metadata.get(ORGANIZATION_METADATA_KEY) or None


def decode_event(raw: Dict[str, Any]) -> AnyBillingEvent:
    """
    Decode a verified Stripe event dict into its variant.

    Raises:
        InvalidBillingEvent: when required fields are missing or malformed
    """
    try:
        base = {
            "event_id": raw["id"],
            "event_type": raw["type"],
            "created": int(raw.get("created") or 0),
        }
        obj = raw["data"]["object"]

        if raw["type"] == CHECKOUT_COMPLETED:
            return CheckoutCompleted(
                **base,
                session_id=obj["id"],
                organization_id=_organization_id(obj) or obj.get("client_reference_id"),
                customer_id=_ref(obj.get("customer")),
                subscription_id=_ref(obj.get("subscription")),
            )

        if raw["type"] == SUBSCRIPTION_UPDATED:
            return SubscriptionUpdated(
                **base,
                subscription_id=obj["id"],
                status=obj["status"],
                organization_id=_organization_id(obj),
                customer_id=_ref(obj.get("customer")),
                price_id=_first_price_id(obj),
            )

        if raw["type"] == SUBSCRIPTION_DELETED:
            return SubscriptionDeleted(
                **base,
                subscription_id=obj["id"],
                organization_id=_organization_id(obj),
                customer_id=_ref(obj.get("customer")),
            )

        if raw["type"] in (INVOICE_PAYMENT_SUCCEEDED, INVOICE_PAYMENT_FAILED):
            variant = (
                InvoicePaymentSucceeded
                if raw["type"] == INVOICE_PAYMENT_SUCCEEDED
                else InvoicePaymentFailed
            )
            amount_key = "amount_paid" if variant is InvoicePaymentSucceeded else "amount_due"
            return variant(
                **base,
                invoice_id=obj["id"],
                customer_id=_ref(obj.get("customer")),
                subscription_id=_ref(obj.get("subscription")),
                amount_cents=int(obj.get(amount_key) or 0),
            )

        return UnhandledEvent(**base)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidBillingEvent(f"Malformed billing event: {exc}") from exc
