"""
Create Checkout Session Use Case

Starts a Stripe subscription checkout for an organization.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.billing_gateway import BillingProviderError, IBillingGateway
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, PlanTier, SubscriptionStatus
from src.domain.plans import PlanCatalog

from .dtos import CheckoutResponse, CreateCheckoutCommand

logger = logging.getLogger(__name__)

# Statuses in which the organization already pays for its current tier
_LIVE_STATUSES = (SubscriptionStatus.active, SubscriptionStatus.trialing)


class CreateCheckoutSessionUseCase:
    """
    Use case for creating a checkout session.

    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Only plans with a configured price can be checked out
    - An organization already subscribed to the requested tier is rejected
    - The session carries the organization id as metadata; the webhook
      processor uses it to correlate the completed checkout
    - Plan state itself is never changed here; only webhooks change it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        gateway: IBillingGateway,
        plans: PlanCatalog,
        app_base_url: str,
    ):
        self.uow = uow
        self.gateway = gateway
        self.plans = plans
        self.app_base_url = app_base_url.rstrip("/")

    async def execute(
        self, user_id: UUID, tenant_id: UUID, command: CreateCheckoutCommand
    ) -> Result[CheckoutResponse]:
        try:
            tier = PlanTier(command.tier)
        except ValueError:
            return Return.err(Error("INVALID_PLAN", f"Unknown plan: {command.tier}"))

        plan = self.plans.get(tier)
        if not plan.checkout_available:
            return Return.err(
                Error("PLAN_NOT_AVAILABLE", f"The {plan.name} plan cannot be purchased online")
            )

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            if tenant.plan_tier == tier and tenant.subscription_status in _LIVE_STATUSES:
                return Return.err(
                    Error("ALREADY_SUBSCRIBED", f"Organization is already on the {plan.name} plan")
                )

            try:
                session = await self.gateway.create_checkout_session(
                    organization_id=str(tenant.id),
                    price_id=plan.price_id,
                    customer_id=tenant.stripe_customer_id,
                    success_url=f"{self.app_base_url}/billing?checkout=success",
                    cancel_url=f"{self.app_base_url}/billing?checkout=canceled",
                )
            except BillingProviderError as exc:
                logger.error(f"Checkout session creation failed for {tenant.id}: {exc}")
                return Return.err(
                    Error("BILLING_PROVIDER_ERROR", "Could not start checkout, try again later")
                )

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=user_id,
                action="checkout_started",
                event_metadata={"tier": tier.value, "session_id": session.id},
            )
            await self.uow.audit_events.create(audit)
            await self.uow.commit()

            return Return.ok(CheckoutResponse(session_id=session.id, url=session.url))
