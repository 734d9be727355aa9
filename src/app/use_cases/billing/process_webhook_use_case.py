"""
Process Billing Webhook Use Case

Verifies, de-duplicates and applies Stripe webhook events.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.billing_gateway import IBillingGateway, SignatureVerificationFailed
from src.app.services.unit_of_work import UnitOfWork
from src.domain.billing_events import (
    AnyBillingEvent,
    CheckoutCompleted,
    InvalidBillingEvent,
    InvoicePayment,
    InvoicePaymentSucceeded,
    SubscriptionDeleted,
    SubscriptionUpdated,
    decode_event,
)
from src.domain.entities import (
    AuditEvent,
    PlanTier,
    SubscriptionStatus,
    Tenant,
    WebhookEvent,
    WebhookEventStatus,
)
from src.domain.plans import PlanCatalog

from .dtos import WebhookAck

logger = logging.getLogger(__name__)


class BillingEventRejected(Exception):
    """Event can never be applied; recorded as rejected and not retried"""


class ProcessBillingWebhookUseCase:
    """
    Use case for processing billing provider webhooks.

    Business Rules:
    - Signature is verified before the payload is parsed
    - The unique insert on event_id is the idempotency gate; a conflicting
      delivery only proceeds if it atomically claims a failed record
    - Side effects and the processed status commit in one transaction
    - Fatal events, including verified payloads that do not decode, are
      recorded as rejected and acknowledged
    - Any other failure is recorded as failed and re-raised so the
      provider retries
    - Events older than the last applied billing event do not transition
      tenant state
    """

    def __init__(self, uow: UnitOfWork, gateway: IBillingGateway, plans: PlanCatalog):
        self.uow = uow
        self.gateway = gateway
        self.plans = plans

    async def execute(self, payload: bytes, signature: Optional[str]) -> Result[WebhookAck]:
        """
        Execute webhook processing.

        Args:
            payload: Raw request body, unparsed
            signature: Value of the stripe-signature header

        Returns:
            Result with WebhookAck, or Error for unverifiable requests

        Raises:
            Exception: processing failed and the event was marked failed
        """
        if not signature:
            return Return.err(Error("MISSING_SIGNATURE", "Missing stripe-signature header"))

        try:
            raw = self.gateway.construct_event(payload, signature)
        except SignatureVerificationFailed:
            logger.warning("Webhook signature verification failed")
            return Return.err(Error("INVALID_SIGNATURE", "Invalid webhook signature"))
        except ValueError:
            return Return.err(Error("INVALID_PAYLOAD", "Invalid webhook payload"))

        event_id = raw.get("id")
        event_type = raw.get("type")
        if not isinstance(event_id, str) or not isinstance(event_type, str):
            return Return.err(Error("INVALID_PAYLOAD", "Invalid webhook payload"))

        async with self.uow:
            record = WebhookEvent(
                event_id=event_id,
                event_type=event_type,
                status=WebhookEventStatus.processing,
                event_data=raw,
            )
            inserted = await self.uow.webhook_events.insert_if_absent(record)
            if not inserted and not await self.uow.webhook_events.claim_failed(event_id):
                logger.info(f"Duplicate webhook event {event_id} ignored")
                return Return.ok(WebhookAck(duplicate=True))

            logger.info(f"Processing webhook event {event_id} ({event_type})")

            try:
                await self._apply(self._decode(raw))
                await self._mark(event_id, WebhookEventStatus.processed)
                await self.uow.commit()
            except BillingEventRejected as exc:
                await self.uow.rollback()
                logger.warning(f"Webhook event {event_id} rejected: {exc}")
                await self._mark(event_id, WebhookEventStatus.rejected, error=str(exc))
                await self.uow.commit()
                return Return.ok(WebhookAck())
            except Exception as exc:
                await self.uow.rollback()
                logger.error(f"Webhook event {event_id} failed: {exc}")
                await self._mark(
                    event_id, WebhookEventStatus.failed, error=str(exc), retry=True
                )
                await self.uow.commit()
                raise

            logger.info(f"Webhook event {event_id} processed")
            return Return.ok(WebhookAck())

    @staticmethod
    def _decode(raw: dict) -> AnyBillingEvent:
        try:
            return decode_event(raw)
        except InvalidBillingEvent as exc:
            raise BillingEventRejected(str(exc)) from exc

    async def _mark(
        self,
        event_id: str,
        status: WebhookEventStatus,
        error: Optional[str] = None,
        retry: bool = False,
    ) -> None:
        record = await self.uow.webhook_events.get_by_event_id(event_id)
        record.status = status
        record.error = error
        if status == WebhookEventStatus.processed:
            record.processed_at = datetime.utcnow()
        if retry:
            record.retry_count = (record.retry_count or 0) + 1
        await self.uow.webhook_events.update(record)

    async def _apply(self, event: AnyBillingEvent) -> None:
        if isinstance(event, CheckoutCompleted):
            await self._checkout_completed(event)
        elif isinstance(event, SubscriptionUpdated):
            await self._subscription_updated(event)
        elif isinstance(event, SubscriptionDeleted):
            await self._subscription_deleted(event)
        elif isinstance(event, InvoicePayment):
            await self._invoice_payment(event)
        else:
            logger.info(f"Unhandled webhook event type {event.event_type}")

    async def _checkout_completed(self, event: CheckoutCompleted) -> None:
        if not event.organization_id:
            raise BillingEventRejected(f"Checkout session {event.session_id} has no organization id")
        if not event.subscription_id:
            raise BillingEventRejected(f"Checkout session {event.session_id} has no subscription")

        tenant = await self._tenant_by_correlator(event.organization_id)
        if tenant is None:
            raise BillingEventRejected(f"Unknown organization {event.organization_id}")

        subscription = await self.gateway.get_subscription(event.subscription_id)
        plan = self.plans.get_by_price_id(subscription.price_id)
        if plan is None:
            raise BillingEventRejected(f"Unknown price {subscription.price_id}")

        if self._is_stale(tenant, event):
            return

        before = self._billing_state(tenant)
        tenant.stripe_customer_id = event.customer_id or subscription.customer_id
        tenant.stripe_subscription_id = subscription.id
        await self._transition(tenant, event, plan.tier, subscription.status, before)

    async def _subscription_updated(self, event: SubscriptionUpdated) -> None:
        tenant = await self._find_tenant(event.organization_id, event.subscription_id)
        if tenant is None:
            raise BillingEventRejected(f"No organization for subscription {event.subscription_id}")

        if tenant.stripe_subscription_id not in (None, event.subscription_id):
            logger.info(
                f"Ignoring update of subscription {event.subscription_id}, "
                f"organization {tenant.id} is bound to {tenant.stripe_subscription_id}"
            )
            return

        if self._is_stale(tenant, event):
            return

        plan = self.plans.get_by_price_id(event.price_id)
        before = self._billing_state(tenant)
        tenant.stripe_subscription_id = event.subscription_id
        if event.customer_id and not tenant.stripe_customer_id:
            tenant.stripe_customer_id = event.customer_id
        tier = plan.tier if plan else tenant.plan_tier
        await self._transition(tenant, event, tier, event.status, before)

    async def _subscription_deleted(self, event: SubscriptionDeleted) -> None:
        tenant = await self._find_tenant(event.organization_id, event.subscription_id)
        if tenant is None:
            raise BillingEventRejected(f"No organization for subscription {event.subscription_id}")

        if tenant.stripe_subscription_id not in (None, event.subscription_id):
            logger.info(
                f"Ignoring deletion of subscription {event.subscription_id}, "
                f"organization {tenant.id} is bound to {tenant.stripe_subscription_id}"
            )
            return

        if self._is_stale(tenant, event):
            return

        before = self._billing_state(tenant)
        tenant.stripe_subscription_id = None
        await self._transition(
            tenant, event, PlanTier.free, SubscriptionStatus.canceled, before
        )

    async def _invoice_payment(self, event: InvoicePayment) -> None:
        tenant = None
        if event.subscription_id:
            tenant = await self.uow.tenants.get_by_stripe_subscription_id(event.subscription_id)
        if tenant is None and event.customer_id:
            tenant = await self.uow.tenants.get_by_stripe_customer_id(event.customer_id)
        if tenant is None:
            logger.info(f"Invoice {event.invoice_id} does not belong to a known organization")
            return

        succeeded = isinstance(event, InvoicePaymentSucceeded)
        audit = AuditEvent(
            tenant_id=tenant.id,
            action="invoice_payment_succeeded" if succeeded else "invoice_payment_failed",
            event_metadata={
                "event_id": event.event_id,
                "invoice_id": event.invoice_id,
                "amount_cents": event.amount_cents,
            },
        )
        await self.uow.audit_events.create(audit)

    async def _transition(
        self,
        tenant: Tenant,
        event: AnyBillingEvent,
        tier: PlanTier,
        status: SubscriptionStatus,
        before: dict,
    ) -> None:
        # tier and status always change together
        tenant.plan_tier = tier
        tenant.subscription_status = status
        tenant.billing_event_at = event.created
        tenant.updated_at = datetime.utcnow()
        await self.uow.tenants.update(tenant)

        audit = AuditEvent(
            tenant_id=tenant.id,
            action="billing_state_changed",
            event_metadata={
                "event_id": event.event_id,
                "event_type": event.event_type,
                "before": before,
                "after": self._billing_state(tenant),
            },
        )
        await self.uow.audit_events.create(audit)
        logger.info(
            f"Organization {tenant.id} billing state {before['plan_tier']}/"
            f"{before['subscription_status']} -> {tier.value}/{status.value}"
        )

    async def _find_tenant(
        self, organization_id: Optional[str], subscription_id: str
    ) -> Optional[Tenant]:
        if organization_id:
            tenant = await self._tenant_by_correlator(organization_id)
            if tenant is not None:
                return tenant
        return await self.uow.tenants.get_by_stripe_subscription_id(subscription_id)

    async def _tenant_by_correlator(self, organization_id: str) -> Optional[Tenant]:
        try:
            tenant_id = UUID(organization_id)
        except ValueError:
            return None
        return await self.uow.tenants.get_by_id(tenant_id)

    @staticmethod
    def _is_stale(tenant: Tenant, event: AnyBillingEvent) -> bool:
        if tenant.billing_event_at is not None and event.created < tenant.billing_event_at:
            logger.info(
                f"Webhook event {event.event_id} is older than the last applied billing "
                f"event of organization {tenant.id}, state unchanged"
            )
            return True
        return False

    @staticmethod
    def _billing_state(tenant: Tenant) -> dict:
        return {
            "plan_tier": tenant.plan_tier.value,
            "subscription_status": tenant.subscription_status.value,
            "stripe_subscription_id": tenant.stripe_subscription_id,
        }
